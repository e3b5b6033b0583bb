"""
Bundle of repositories the services and the lookup cache read from.
"""

from dataclasses import dataclass

from scheduling_agent.data.repository import InMemoryRepository, Repository
from scheduling_agent.shared.schemas import (
    Department,
    LeaveRequest,
    LeaveStatus,
    LeaveType,
    PlannedShift,
    Role,
    ShiftStatus,
    ShiftSwapRequest,
    ShiftType,
    Staff,
    StaffAvailability,
)


@dataclass
class DataStore:
    """One repository per table."""

    staff: Repository[Staff]
    departments: Repository[Department]
    roles: Repository[Role]
    shift_types: Repository[ShiftType]
    shift_statuses: Repository[ShiftStatus]
    leave_types: Repository[LeaveType]
    leave_statuses: Repository[LeaveStatus]
    planned_shifts: Repository[PlannedShift]
    leave_requests: Repository[LeaveRequest]
    availability: Repository[StaffAvailability]
    swap_requests: Repository[ShiftSwapRequest]


def empty_store() -> DataStore:
    """Create a store with empty in-memory repositories."""
    return DataStore(
        staff=InMemoryRepository("staff_id"),
        departments=InMemoryRepository("department_id"),
        roles=InMemoryRepository("role_id"),
        shift_types=InMemoryRepository("shift_type_id"),
        shift_statuses=InMemoryRepository("shift_status_id"),
        leave_types=InMemoryRepository("leave_type_id"),
        leave_statuses=InMemoryRepository("leave_status_id"),
        planned_shifts=InMemoryRepository("planned_shift_id"),
        leave_requests=InMemoryRepository("leave_request_id"),
        availability=InMemoryRepository("availability_id"),
        swap_requests=InMemoryRepository("swap_request_id"),
    )
