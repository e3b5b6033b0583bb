"""
Configuration for the scheduling agent.

Centralizes the remote assistant settings and the polling/retry tuning of
the run orchestrator, so behavior can be adjusted without touching the
orchestration code. Values come from the environment (optionally a .env
file) and can be overridden per call to get_config().
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


DEFAULT_INSTRUCTIONS = (
    "You are a hospital shift scheduling assistant. Use the provided tools to "
    "look up and change shifts, leave requests and staff availability. "
    "Resolve departments, shift types, statuses and dates with the resolver "
    "tools before calling tools that need ids. Keep answers short."
)


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AgentConfig:
    """
    Configuration for the run orchestrator and the remote assistant.

    Attributes:
        model: Model used when the assistant is created locally
        assistant_id: Existing remote assistant id (created on demand if unset)
        assistant_name: Name used when creating the assistant
        instructions: System instructions for the assistant
        poll_base_delay: First poll interval in seconds
        poll_max_delay: Cap for the doubling poll interval
        retry_max_delay: Cap for the rate-limit retry delay (before jitter)
        retry_jitter: Upper bound of the uniform jitter added to retry delays
        max_retries: Rate-limit retries allowed per turn
        emit_unknown_tool_error: Answer unknown tool names with an error envelope
            instead of dropping the call
        log_level: Root log level name
        log_json: Emit JSON log lines for the package loggers
    """

    # Remote assistant
    model: str = "gpt-4.1-mini"
    assistant_id: Optional[str] = None
    assistant_name: str = "Hospital Scheduling Assistant"
    instructions: str = DEFAULT_INSTRUCTIONS

    # Polling
    poll_base_delay: float = 0.5  # seconds
    poll_max_delay: float = 8.0  # seconds

    # Rate-limit retry
    retry_max_delay: float = 30.0  # seconds
    retry_jitter: float = 1.0  # seconds
    max_retries: int = 5

    # Tool dispatch
    emit_unknown_tool_error: bool = False

    log_level: str = "INFO"
    log_json: bool = False


def config_from_env() -> AgentConfig:
    """Build a configuration from SCHEDULING_AGENT_* environment variables."""
    defaults = AgentConfig()
    return AgentConfig(
        model=os.environ.get("SCHEDULING_AGENT_MODEL", defaults.model),
        assistant_id=os.environ.get("OPENAI_ASSISTANT_ID") or None,
        assistant_name=os.environ.get(
            "SCHEDULING_AGENT_ASSISTANT_NAME", defaults.assistant_name
        ),
        instructions=os.environ.get(
            "SCHEDULING_AGENT_INSTRUCTIONS", defaults.instructions
        ),
        poll_base_delay=_env_float(
            "SCHEDULING_AGENT_POLL_BASE_DELAY", defaults.poll_base_delay
        ),
        poll_max_delay=_env_float(
            "SCHEDULING_AGENT_POLL_MAX_DELAY", defaults.poll_max_delay
        ),
        retry_max_delay=_env_float(
            "SCHEDULING_AGENT_RETRY_MAX_DELAY", defaults.retry_max_delay
        ),
        retry_jitter=_env_float("SCHEDULING_AGENT_RETRY_JITTER", defaults.retry_jitter),
        max_retries=_env_int("SCHEDULING_AGENT_MAX_RETRIES", defaults.max_retries),
        emit_unknown_tool_error=_env_bool(
            "SCHEDULING_AGENT_EMIT_UNKNOWN_TOOL_ERROR",
            defaults.emit_unknown_tool_error,
        ),
        log_level=os.environ.get("SCHEDULING_AGENT_LOG_LEVEL", defaults.log_level),
        log_json=_env_bool("SCHEDULING_AGENT_LOG_JSON", defaults.log_json),
    )


def get_config(
    model: Optional[str] = None,
    assistant_id: Optional[str] = None,
    poll_base_delay: Optional[float] = None,
    poll_max_delay: Optional[float] = None,
    retry_max_delay: Optional[float] = None,
    retry_jitter: Optional[float] = None,
    max_retries: Optional[int] = None,
    emit_unknown_tool_error: Optional[bool] = None,
) -> AgentConfig:
    """
    Create a configuration with optional overrides on top of the environment.

    Args:
        model: Override for the assistant model
        assistant_id: Override for the remote assistant id
        poll_base_delay: Override for the first poll interval
        poll_max_delay: Override for the poll interval cap
        retry_max_delay: Override for the retry delay cap
        retry_jitter: Override for the retry jitter bound
        max_retries: Override for the rate-limit retry budget
        emit_unknown_tool_error: Override for unknown tool handling

    Returns:
        AgentConfig with specified overrides applied
    """
    base = config_from_env()
    return AgentConfig(
        model=model or base.model,
        assistant_id=assistant_id or base.assistant_id,
        assistant_name=base.assistant_name,
        instructions=base.instructions,
        poll_base_delay=poll_base_delay
        if poll_base_delay is not None
        else base.poll_base_delay,
        poll_max_delay=poll_max_delay
        if poll_max_delay is not None
        else base.poll_max_delay,
        retry_max_delay=retry_max_delay
        if retry_max_delay is not None
        else base.retry_max_delay,
        retry_jitter=retry_jitter if retry_jitter is not None else base.retry_jitter,
        max_retries=max_retries if max_retries is not None else base.max_retries,
        emit_unknown_tool_error=emit_unknown_tool_error
        if emit_unknown_tool_error is not None
        else base.emit_unknown_tool_error,
        log_level=base.log_level,
        log_json=base.log_json,
    )
