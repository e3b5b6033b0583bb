"""Run orchestration: sessions, polling, retry and the HTTP surface."""

from scheduling_agent.orchestrator.retry import BackoffState, RetryPolicy
from scheduling_agent.orchestrator.run_orchestrator import RunOrchestrator
from scheduling_agent.orchestrator.sessions import (
    ConversationStore,
    InMemoryConversationStore,
)
from scheduling_agent.orchestrator.state import Run, RunError, RunStatus, ThreadMessage
from scheduling_agent.orchestrator.transport import OpenAIRunTransport, RunTransport

__all__ = [
    "BackoffState",
    "ConversationStore",
    "InMemoryConversationStore",
    "OpenAIRunTransport",
    "RetryPolicy",
    "Run",
    "RunError",
    "RunOrchestrator",
    "RunStatus",
    "RunTransport",
    "ThreadMessage",
]
