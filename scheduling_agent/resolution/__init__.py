"""Entity, staff reference and date resolution."""

from scheduling_agent.resolution.dates import parse_natural_dates, resolve_relative_date
from scheduling_agent.resolution.entity_resolver import EntityResolver, is_self_reference
from scheduling_agent.resolution.staff_reference import StaffReference, resolve_staff_reference

__all__ = [
    "EntityResolver",
    "StaffReference",
    "is_self_reference",
    "parse_natural_dates",
    "resolve_relative_date",
    "resolve_staff_reference",
]
