"""
FastAPI endpoints for the scheduling assistant.

One chat endpoint drives a full assistant turn; the others manage the
caller's session and the cached reference data. Schedulers also get a
daily summary endpoint.
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from scheduling_agent.services.schemas import DailySummary
from scheduling_agent.services.user_context import UserContext, user_scope
from scheduling_agent.shared.exceptions import TurnFailure

logger = logging.getLogger(__name__)

# Create router for the agent route
router = APIRouter(prefix="/api/agent", tags=["agent"])

# Runtime shared across requests, set by the app lifespan
_runtime = None

TURN_FAILED_DETAIL = "Could not get a response from the assistant."


def configure(runtime) -> None:
    """Install the runtime the endpoints use."""
    global _runtime
    _runtime = runtime


def get_runtime():
    if _runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Assistant is not ready",
        )
    return _runtime


# ============================================================================
# Request / response models
# ============================================================================


class ChatRequest(BaseModel):
    staff_id: int = Field(description="Staff id of the caller; also the session key")
    role: Optional[str] = Field(default=None, description="Caller role (Scheduler/Employee)")
    message: str


class ChatResponse(BaseModel):
    staff_id: int
    reply: str
    duration_ms: float


class SessionResponse(BaseModel):
    staff_id: int
    ended: bool = True


class RefreshResponse(BaseModel):
    staff: int
    departments: int


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """
    Send one message to the assistant and wait for its reply.

    Args:
        request: Caller identity and message text

    Returns:
        The assistant's reply for this turn
    """
    if not request.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message must not be empty",
        )

    runtime = get_runtime()
    api_start_time = time.perf_counter()

    try:
        reply = await runtime.orchestrator.send(
            request.staff_id, request.message, role=request.role
        )
    except TurnFailure as e:
        logger.error(f"[owner={request.staff_id}] Turn failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=TURN_FAILED_DETAIL,
        )

    duration_ms = (time.perf_counter() - api_start_time) * 1000
    return ChatResponse(staff_id=request.staff_id, reply=reply, duration_ms=duration_ms)


@router.delete("/session/{staff_id}", response_model=SessionResponse)
async def end_session(staff_id: int) -> SessionResponse:
    """End the caller's conversation and delete its remote thread."""
    runtime = get_runtime()
    await runtime.orchestrator.end_session(staff_id)
    return SessionResponse(staff_id=staff_id)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_lookup() -> RefreshResponse:
    """Reload departments, staff and the other reference tables."""
    runtime = get_runtime()
    await runtime.lookup.refresh(runtime.store)
    snapshot = runtime.lookup.snapshot
    return RefreshResponse(staff=len(snapshot.staff), departments=len(snapshot.departments))


@router.get("/daily-summary", response_model=Optional[DailySummary])
async def daily_summary(staff_id: int, role: Optional[str] = None) -> Optional[DailySummary]:
    """
    Start-of-day overview for schedulers.

    Returns null for callers who are not schedulers.
    """
    runtime = get_runtime()
    with user_scope(UserContext(staff_id=staff_id, role=role)):
        return await runtime.insights.daily_summary()
