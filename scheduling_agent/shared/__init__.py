"""
Shared infrastructure for the scheduling agent.

Modules:
- llm: OpenAI client and assistant bootstrap
- logging: Structured JSON logging
- contracts: Tool envelope, resolution and availability contracts
- schemas: Domain entities
- exceptions: Tool-level and turn-level errors
"""

from scheduling_agent.shared.llm.client import get_cached_client, ensure_assistant
from scheduling_agent.shared.logging.config import setup_logging, log_run_transition

__all__ = [
    "get_cached_client",
    "ensure_assistant",
    "setup_logging",
    "log_run_transition",
]
