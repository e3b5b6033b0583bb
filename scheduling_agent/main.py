"""
FastAPI application entry point.

Assembles the FastAPI app with the scheduling assistant router and builds
the runtime on startup.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scheduling_agent.config import get_config
from scheduling_agent.orchestrator.api import configure, router as agent_router
from scheduling_agent.runtime import create_runtime
from scheduling_agent.shared.logging import setup_logging


# ============================================================================
# Logging configuration (single source of truth for the service)
# ============================================================================
LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"
)

config = get_config()
LOG_LEVEL = getattr(logging, config.log_level.upper(), logging.INFO)

logging.basicConfig(
    level=LOG_LEVEL,
    format=LOG_FORMAT,
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,  # Override any prior basicConfig calls
)

# Quiet noisy third-party loggers
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)

# Structured JSON lines for the package loggers when requested
if config.log_json:
    setup_logging(level=LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    runtime = await create_runtime(config)
    configure(runtime)
    yield
    configure(None)


# Create FastAPI app
app = FastAPI(
    title="Scheduling Assistant",
    description="Chat assistant for hospital shift and leave scheduling",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(agent_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Scheduling Assistant",
        "version": "0.1.0",
        "endpoints": {
            "chat": "/api/agent/chat",
            "session": "/api/agent/session/{staff_id}",
            "refresh": "/api/agent/refresh",
            "daily_summary": "/api/agent/daily-summary",
        },
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
