"""
Domain entities for the hospital scheduling data.

Reference tables (departments, roles, shift types/statuses, leave
types/statuses) are frozen so the lookup snapshot cannot be mutated in place.
Transactional records (shifts, leave requests, swap requests) are plain
models that services copy-and-update before handing back to a repository.
"""

from datetime import date, datetime
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Well-known ids
# =============================================================================


class ShiftTypes(IntEnum):
    MORNING = 1
    EVENING = 2
    NIGHT = 3


class ShiftStatuses(IntEnum):
    SCHEDULED = 1
    ASSIGNED = 2
    COMPLETED = 3
    CANCELLED = 4
    VACANT = 5


class LeaveRequestStatuses(IntEnum):
    PENDING = 1
    APPROVED = 2
    REJECTED = 3


class LeaveTypes(IntEnum):
    SICK = 1
    CASUAL = 2
    VACATION = 3


class ShiftSwapStatuses(IntEnum):
    PENDING = 1
    APPROVED = 2
    REJECTED = 3


# =============================================================================
# Reference tables (immutable)
# =============================================================================


class Department(BaseModel):
    model_config = ConfigDict(frozen=True)

    department_id: int
    department_name: str


class Role(BaseModel):
    model_config = ConfigDict(frozen=True)

    role_id: int
    role_name: str


class ShiftType(BaseModel):
    model_config = ConfigDict(frozen=True)

    shift_type_id: int
    shift_type_name: str


class ShiftStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    shift_status_id: int
    shift_status_name: str


class LeaveType(BaseModel):
    model_config = ConfigDict(frozen=True)

    leave_type_id: int
    leave_type_name: str


class LeaveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    leave_status_id: int
    leave_status_name: str


class Staff(BaseModel):
    model_config = ConfigDict(frozen=True)

    staff_id: int
    staff_name: str
    role_id: int
    staff_department_id: int
    is_active: bool = True


# =============================================================================
# Transactional records
# =============================================================================


class PlannedShift(BaseModel):
    """A slot on the roster for one department, date and shift type."""

    planned_shift_id: int = 0
    shift_date: date
    shift_type_id: int
    department_id: int
    slot_number: int = 1
    shift_status_id: int = ShiftStatuses.VACANT
    assigned_staff_id: Optional[int] = None


class LeaveRequest(BaseModel):
    """A leave request covering ``leave_start`` to ``leave_end`` inclusive."""

    leave_request_id: int = 0
    staff_id: int
    leave_start: date
    leave_end: date
    leave_type_id: int
    leave_status_id: int = LeaveRequestStatuses.PENDING

    def covers(self, day: date) -> bool:
        return self.leave_start <= day <= self.leave_end


class StaffAvailability(BaseModel):
    """Manual availability mark for one staff member on one date."""

    availability_id: int = 0
    staff_id: int
    available_date: date
    is_available: bool = False


class ShiftSwapRequest(BaseModel):
    swap_request_id: int = 0
    requesting_staff_id: int
    target_staff_id: int
    source_shift_date: date
    source_shift_type_id: int
    target_shift_date: date
    target_shift_type_id: int
    status_id: int = ShiftSwapStatuses.PENDING
    requested_at: datetime = Field(default_factory=datetime.now)
    responded_at: Optional[datetime] = None
    response_note: str = ""
