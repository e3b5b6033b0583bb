"""
Exception types shared across the scheduling agent.

Two families live here:

- Tool-level errors (BusinessRuleViolation, MissingArgumentError) never leave
  the tool registry; they are turned into ``success: false`` envelopes.
- Turn-level failures (TurnFailure and subclasses) are raised by the run
  orchestrator and mapped to a generic message at the HTTP boundary.
"""

from typing import Optional


class BusinessRuleViolation(Exception):
    """
    Raised by a service when a request breaks a scheduling rule.

    The message is meant for the end user and is passed through verbatim
    in the tool envelope.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingArgumentError(Exception):
    """Raised when a required tool argument is missing or has the wrong type."""

    def __init__(self, field_name: str, expected: str = "a value"):
        self.field_name = field_name
        self.expected = expected
        super().__init__(f"Missing or invalid `{field_name}` (expected {expected}).")


class DuplicateToolError(Exception):
    """Raised at startup when two handlers claim the same tool name."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool '{tool_name}' is registered more than once.")


class TurnFailure(Exception):
    """Base class for a chat turn that produced no assistant reply."""

    def __init__(self, message: str, run_id: Optional[str] = None):
        self.run_id = run_id
        super().__init__(message)


class RunFailedError(TurnFailure):
    """The remote run ended in a non-retryable failure or was cancelled."""

    def __init__(self, message: str, code: Optional[str] = None, run_id: Optional[str] = None):
        self.code = code
        super().__init__(message, run_id=run_id)


class RateLimitExhaustedError(TurnFailure):
    """The remote run kept failing on rate limits past the retry budget."""

    def __init__(self, attempts: int, run_id: Optional[str] = None):
        self.attempts = attempts
        super().__init__(
            f"Rate limit exceeded after {attempts} attempts.", run_id=run_id
        )


class NoReplyError(TurnFailure):
    """The run completed but carried no assistant text message."""

    def __init__(self, run_id: Optional[str] = None):
        super().__init__("no reply", run_id=run_id)
