"""Staff availability search and fatigue rules."""

from scheduling_agent.availability.fatigue import has_fatigue_risk, is_adjacent
from scheduling_agent.availability.search import AvailabilitySearch

__all__ = ["AvailabilitySearch", "has_fatigue_risk", "is_adjacent"]
