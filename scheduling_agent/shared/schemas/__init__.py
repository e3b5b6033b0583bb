"""Domain entity schemas."""

from scheduling_agent.shared.schemas.entities import (
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
    ShiftSwapRequest,
    ShiftSwapStatuses,
    ShiftType,
    ShiftTypes,
    Staff,
    StaffAvailability,
)

__all__ = [
    "Department",
    "LeaveRequest",
    "LeaveRequestStatuses",
    "LeaveStatus",
    "LeaveType",
    "LeaveTypes",
    "PlannedShift",
    "Role",
    "ShiftStatus",
    "ShiftStatuses",
    "ShiftSwapRequest",
    "ShiftSwapStatuses",
    "ShiftType",
    "ShiftTypes",
    "Staff",
    "StaffAvailability",
]
