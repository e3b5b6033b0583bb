"""Contracts exchanged between the resolver, the search and the tool registry."""

from scheduling_agent.shared.contracts.availability import (
    AvailabilityFilter,
    AvailabilityResult,
    AvailableStaff,
    DayAvailability,
)
from scheduling_agent.shared.contracts.resolution import ResolvedEntities
from scheduling_agent.shared.contracts.tool_call import ToolCall, ToolOutput
from scheduling_agent.shared.contracts.tool_result import ToolResult

__all__ = [
    "AvailabilityFilter",
    "AvailabilityResult",
    "AvailableStaff",
    "DayAvailability",
    "ResolvedEntities",
    "ToolCall",
    "ToolOutput",
    "ToolResult",
]
