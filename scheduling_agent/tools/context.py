"""Collaborators shared by the tool handlers."""

from dataclasses import dataclass

from scheduling_agent.availability import AvailabilitySearch
from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.store import DataStore
from scheduling_agent.resolution import EntityResolver
from scheduling_agent.services import (
    DepartmentService,
    LeaveRequestService,
    PlannedShiftService,
    ShiftSwapService,
    StaffService,
)


@dataclass
class ToolContext:
    lookup: LookupCache
    resolver: EntityResolver
    availability: AvailabilitySearch
    departments: DepartmentService
    staff: StaffService
    leave: LeaveRequestService
    shifts: PlannedShiftService
    swaps: ShiftSwapService

    @classmethod
    def from_store(cls, store: DataStore, lookup: LookupCache) -> "ToolContext":
        return cls(
            lookup=lookup,
            resolver=EntityResolver(lookup),
            availability=AvailabilitySearch(
                lookup, store.planned_shifts, store.leave_requests, store.availability
            ),
            departments=DepartmentService(lookup),
            staff=StaffService(lookup),
            leave=LeaveRequestService(store.leave_requests, lookup),
            shifts=PlannedShiftService(store.planned_shifts, store.leave_requests, lookup),
            swaps=ShiftSwapService(store.swap_requests, store.planned_shifts, lookup),
        )
