"""
Caller identity for the current chat turn.

The orchestrator (or a test) binds a UserContext with user_scope() for the
length of a turn; services and tool handlers read it back with
current_user(). A ContextVar keeps concurrent turns for different owners isolated.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator, Optional

SCHEDULER = "Scheduler"
EMPLOYEE = "Employee"


@dataclass(frozen=True)
class UserContext:
    """The logged-in user a turn runs on behalf of."""

    staff_id: Optional[int] = None
    role: Optional[str] = None

    @property
    def is_scheduler(self) -> bool:
        return (self.role or "").lower() == SCHEDULER.lower()

    @property
    def is_employee(self) -> bool:
        return (self.role or "").lower() == EMPLOYEE.lower()


ANONYMOUS = UserContext()

_current_user: ContextVar[UserContext] = ContextVar("current_user", default=ANONYMOUS)


def current_user() -> UserContext:
    return _current_user.get()


@contextmanager
def user_scope(user: UserContext) -> Iterator[UserContext]:
    """Bind ``user`` for the duration of a with-block."""
    token = _current_user.set(user)
    try:
        yield user
    finally:
        _current_user.reset(token)
