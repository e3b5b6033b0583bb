"""
Run state as seen by the orchestrator.

Remote run objects are converted into these models at the transport edge
so the run loop never touches SDK types.
"""

import logging
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from scheduling_agent.shared.contracts import ToolCall

RATE_LIMIT_CODE = "rate_limit_exceeded"
TRANSPORT_ERROR_CODE = "transport_error"

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def from_remote(cls, status: str) -> "RunStatus":
        """Map a remote status string onto the six states the loop handles."""
        status = (status or "").lower()
        if status == "cancelling":
            return cls.CANCELLED
        if status in ("expired", "incomplete"):
            return cls.FAILED
        try:
            return cls(status)
        except ValueError:
            logger.warning(f"Unknown remote run status '{status}', treating it as failed")
            return cls.FAILED

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED)


class RunError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: Optional[str] = None
    message: Optional[str] = None

    @property
    def is_rate_limit(self) -> bool:
        return RATE_LIMIT_CODE in (self.code or "").lower()


class Run(BaseModel):
    """One remote run, re-fetched by id on every poll."""

    model_config = ConfigDict(frozen=True)

    run_id: str
    thread_id: str
    status: RunStatus
    tool_calls: Tuple[ToolCall, ...] = ()
    last_error: Optional[RunError] = None


class ThreadMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    text: str
    message_id: Optional[str] = None
    run_id: Optional[str] = None
