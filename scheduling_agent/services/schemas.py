"""
Filters and read models returned by the business services.

Read models carry resolved names next to ids so tool handlers can hand
them straight to the assistant.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Filters
# =============================================================================


class LeaveRequestFilter(BaseModel):
    leave_request_id: Optional[int] = None
    staff_id: Optional[int] = None
    leave_status_id: Optional[int] = None
    leave_type_id: Optional[int] = None
    start_date: Optional[date] = Field(
        default=None, description="Keep requests ending on or after this date"
    )
    end_date: Optional[date] = Field(
        default=None, description="Keep requests starting on or before this date"
    )


class ShiftFilter(BaseModel):
    planned_shift_id: Optional[int] = None
    department_id: Optional[int] = None
    staff_id: Optional[int] = None
    shift_type_id: Optional[int] = None
    shift_status_id: Optional[int] = None
    slot_number: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None


class ShiftSwapFilter(BaseModel):
    status_id: Optional[int] = None
    requester_staff_id: Optional[int] = None
    target_staff_id: Optional[int] = None
    requester_shift_type_id: Optional[int] = None
    target_shift_type_id: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None


# =============================================================================
# Read models
# =============================================================================


class DepartmentView(BaseModel):
    department_id: int
    department_name: str


class StaffView(BaseModel):
    staff_id: int
    staff_name: str
    role_id: int
    role_name: str = ""
    staff_department_id: int
    staff_department_name: str = ""


class LeaveRequestDetails(BaseModel):
    leave_request_id: int
    staff_id: int
    staff_name: str = ""
    staff_department_id: Optional[int] = None
    staff_department_name: str = ""
    leave_start: date
    leave_end: date
    leave_status_id: int
    leave_status_name: str = ""
    leave_type_id: int
    leave_type_name: str = ""


class PlannedShiftDetail(BaseModel):
    planned_shift_id: int
    shift_date: date
    slot_number: int
    shift_type_id: int
    shift_type_name: str = ""
    department_id: int
    department_name: str = ""
    shift_status_id: int
    shift_status_name: str = ""
    assigned_staff_id: Optional[int] = None
    assigned_staff_name: str = ""
    assigned_staff_department_name: str = ""


class ShiftSwapView(BaseModel):
    swap_request_id: int
    requesting_staff_id: int
    requesting_staff_name: str = "Unknown"
    target_staff_id: int
    target_staff_name: str = "Unknown"
    source_shift_date: date
    source_shift_type_id: int
    source_shift_type_name: str = "N/A"
    source_department_id: int = 0
    source_department_name: str = "N/A"
    target_shift_date: date
    target_shift_type_id: int
    target_shift_type_name: str = "N/A"
    target_department_id: int = 0
    target_department_name: str = "N/A"
    status_id: int
    status_name: str = ""
    requested_at: datetime
    responded_at: Optional[datetime] = None
    response_note: str = ""


class ShiftReplacementOptions(BaseModel):
    """An unassigned shift together with staff who could cover it."""

    planned_shift_id: int
    shift_date: date
    shift_type_id: int
    shift_type_name: str = ""
    department_id: int
    department_name: str = ""
    replacements: List[dict] = Field(default_factory=list)


class QuickReply(BaseModel):
    label: str
    value: str = Field(description="Message sent to the assistant when the reply is picked")


class DailySummary(BaseModel):
    """Scheduler's start-of-day overview of the coming week."""

    summary_message: str
    quick_replies: List[QuickReply] = Field(default_factory=list)
    uncovered_shifts: int = 0
    pending_leave_requests: int = 0
    pending_swap_requests: int = 0
