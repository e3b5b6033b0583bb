"""
Tool dispatch for the scheduling assistant.

build_registry() wires every handler to services built over one data store
and lookup cache.
"""

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.store import DataStore
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler
from scheduling_agent.tools.context import ToolContext
from scheduling_agent.tools.handlers import default_handlers
from scheduling_agent.tools.registry import ToolRegistry


def build_registry(
    store: DataStore, lookup: LookupCache, emit_unknown_tool_error: bool = False
) -> ToolRegistry:
    """Create the registry holding every scheduling tool."""
    ctx = ToolContext.from_store(store, lookup)
    return ToolRegistry(default_handlers(ctx), emit_unknown_tool_error=emit_unknown_tool_error)


__all__ = [
    "ToolArguments",
    "ToolContext",
    "ToolHandler",
    "ToolRegistry",
    "build_registry",
]
