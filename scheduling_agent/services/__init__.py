"""Business services behind the scheduling tools."""

from scheduling_agent.services.department import DepartmentService
from scheduling_agent.services.insights import AgentInsightsService
from scheduling_agent.services.leave import LeaveRequestService
from scheduling_agent.services.shift_swap import ShiftSwapService
from scheduling_agent.services.shifts import PlannedShiftService
from scheduling_agent.services.staff import StaffService
from scheduling_agent.services.user_context import (
    UserContext,
    current_user,
    user_scope,
)

__all__ = [
    "AgentInsightsService",
    "DepartmentService",
    "LeaveRequestService",
    "PlannedShiftService",
    "ShiftSwapService",
    "StaffService",
    "UserContext",
    "current_user",
    "user_scope",
]
