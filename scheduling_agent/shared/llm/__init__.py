"""LLM client utilities."""

from scheduling_agent.shared.llm.client import get_cached_client, ensure_assistant

__all__ = ["get_cached_client", "ensure_assistant"]
