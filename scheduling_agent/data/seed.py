"""
Demo data for running the assistant without a database.

Dates are laid out relative to ``today`` so the demo roster always has
shifts around the current week.
"""

from datetime import date, timedelta
from typing import Optional

from scheduling_agent.data.repository import InMemoryRepository
from scheduling_agent.data.store import DataStore
from scheduling_agent.services.user_context import EMPLOYEE, SCHEDULER
from scheduling_agent.shared.schemas import (
    Department,
    LeaveRequest,
    LeaveRequestStatuses,
    LeaveStatus,
    LeaveType,
    LeaveTypes,
    PlannedShift,
    Role,
    ShiftStatus,
    ShiftStatuses,
    ShiftType,
    ShiftTypes,
    Staff,
    StaffAvailability,
)

DEPARTMENTS = [
    Department(department_id=1, department_name="Emergency"),
    Department(department_id=2, department_name="Cardiology"),
    Department(department_id=3, department_name="Pediatrics"),
    Department(department_id=4, department_name="Intensive Care Unit"),
]

ROLES = [
    Role(role_id=1, role_name=SCHEDULER),
    Role(role_id=2, role_name=EMPLOYEE),
]

SHIFT_TYPES = [
    ShiftType(shift_type_id=ShiftTypes.MORNING, shift_type_name="Morning"),
    ShiftType(shift_type_id=ShiftTypes.EVENING, shift_type_name="Evening"),
    ShiftType(shift_type_id=ShiftTypes.NIGHT, shift_type_name="Night"),
]

SHIFT_STATUSES = [
    ShiftStatus(shift_status_id=ShiftStatuses.SCHEDULED, shift_status_name="Scheduled"),
    ShiftStatus(shift_status_id=ShiftStatuses.ASSIGNED, shift_status_name="Assigned"),
    ShiftStatus(shift_status_id=ShiftStatuses.COMPLETED, shift_status_name="Completed"),
    ShiftStatus(shift_status_id=ShiftStatuses.CANCELLED, shift_status_name="Cancelled"),
    ShiftStatus(shift_status_id=ShiftStatuses.VACANT, shift_status_name="Vacant"),
]

LEAVE_TYPES = [
    LeaveType(leave_type_id=LeaveTypes.SICK, leave_type_name="Sick"),
    LeaveType(leave_type_id=LeaveTypes.CASUAL, leave_type_name="Casual"),
    LeaveType(leave_type_id=LeaveTypes.VACATION, leave_type_name="Vacation"),
]

LEAVE_STATUSES = [
    LeaveStatus(leave_status_id=LeaveRequestStatuses.PENDING, leave_status_name="Pending"),
    LeaveStatus(leave_status_id=LeaveRequestStatuses.APPROVED, leave_status_name="Approved"),
    LeaveStatus(leave_status_id=LeaveRequestStatuses.REJECTED, leave_status_name="Rejected"),
]

STAFF = [
    Staff(staff_id=1, staff_name="Priya Raman", role_id=1, staff_department_id=1),
    Staff(staff_id=2, staff_name="Daniel Okafor", role_id=2, staff_department_id=1),
    Staff(staff_id=3, staff_name="Maria Lopez", role_id=2, staff_department_id=1),
    Staff(staff_id=4, staff_name="Kenji Sato", role_id=2, staff_department_id=2),
    Staff(staff_id=5, staff_name="Aisha Bello", role_id=2, staff_department_id=2),
    Staff(staff_id=6, staff_name="Tom Becker", role_id=2, staff_department_id=3),
    Staff(staff_id=7, staff_name="Lena Novak", role_id=2, staff_department_id=4),
    Staff(
        staff_id=8,
        staff_name="Victor Hale",
        role_id=2,
        staff_department_id=2,
        is_active=False,
    ),
]


def build_demo_store(today: Optional[date] = None) -> DataStore:
    """
    Create in-memory repositories filled with a small hospital roster.

    Args:
        today: Anchor date for the generated shifts and leave (default: today)

    Returns:
        DataStore backed by InMemoryRepository instances.
    """
    today = today or date.today()
    day = lambda offset: today + timedelta(days=offset)  # noqa: E731

    shifts = [
        PlannedShift(
            shift_date=day(0),
            shift_type_id=ShiftTypes.MORNING,
            department_id=1,
            shift_status_id=ShiftStatuses.SCHEDULED,
            assigned_staff_id=2,
        ),
        PlannedShift(
            shift_date=day(0),
            shift_type_id=ShiftTypes.NIGHT,
            department_id=1,
            shift_status_id=ShiftStatuses.SCHEDULED,
            assigned_staff_id=3,
        ),
        PlannedShift(
            shift_date=day(1),
            shift_type_id=ShiftTypes.MORNING,
            department_id=1,
        ),
        PlannedShift(
            shift_date=day(1),
            shift_type_id=ShiftTypes.EVENING,
            department_id=2,
            shift_status_id=ShiftStatuses.SCHEDULED,
            assigned_staff_id=4,
        ),
        PlannedShift(
            shift_date=day(2),
            shift_type_id=ShiftTypes.NIGHT,
            department_id=2,
        ),
        PlannedShift(
            shift_date=day(3),
            shift_type_id=ShiftTypes.MORNING,
            department_id=3,
            shift_status_id=ShiftStatuses.SCHEDULED,
            assigned_staff_id=6,
        ),
        PlannedShift(
            shift_date=day(3),
            shift_type_id=ShiftTypes.EVENING,
            department_id=4,
            shift_status_id=ShiftStatuses.SCHEDULED,
            assigned_staff_id=7,
        ),
    ]

    leave = [
        LeaveRequest(
            staff_id=5,
            leave_start=day(1),
            leave_end=day(3),
            leave_type_id=LeaveTypes.VACATION,
            leave_status_id=LeaveRequestStatuses.APPROVED,
        ),
        LeaveRequest(
            staff_id=6,
            leave_start=day(3),
            leave_end=day(3),
            leave_type_id=LeaveTypes.SICK,
            leave_status_id=LeaveRequestStatuses.PENDING,
        ),
    ]

    availability = [
        StaffAvailability(staff_id=7, available_date=day(2), is_available=False),
    ]

    return DataStore(
        staff=InMemoryRepository("staff_id", list(STAFF)),
        departments=InMemoryRepository("department_id", list(DEPARTMENTS)),
        roles=InMemoryRepository("role_id", list(ROLES)),
        shift_types=InMemoryRepository("shift_type_id", list(SHIFT_TYPES)),
        shift_statuses=InMemoryRepository("shift_status_id", list(SHIFT_STATUSES)),
        leave_types=InMemoryRepository("leave_type_id", list(LEAVE_TYPES)),
        leave_statuses=InMemoryRepository("leave_status_id", list(LEAVE_STATUSES)),
        planned_shifts=InMemoryRepository("planned_shift_id", shifts),
        leave_requests=InMemoryRepository("leave_request_id", leave),
        availability=InMemoryRepository("availability_id", availability),
        swap_requests=InMemoryRepository("swap_request_id"),
    )
