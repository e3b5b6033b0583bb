"""One handler class per tool."""

from typing import List

from scheduling_agent.tools.base import ToolHandler
from scheduling_agent.tools.context import ToolContext
from scheduling_agent.tools.handlers.leave import (
    ApproveOrRejectLeaveRequestHandler,
    CancelLeaveRequestHandler,
    FetchLeaveRequestHandler,
    SubmitLeaveRequestHandler,
)
from scheduling_agent.tools.handlers.resolvers import (
    ResolveDepartmentInfoHandler,
    ResolveEntitiesHandler,
    ResolveLoggedInUserRoleHandler,
    ResolveNaturalLanguageDateHandler,
    ResolveRelativeDateHandler,
    ResolveStaffInfoByNameHandler,
    ResolveStaffReferenceHandler,
)
from scheduling_agent.tools.handlers.shifts import (
    AddNewPlannedShiftHandler,
    AssignShiftToStaffHandler,
    FilterShiftScheduleHandler,
    UnassignShiftFromStaffHandler,
)
from scheduling_agent.tools.handlers.staff import SearchAvailableStaffHandler
from scheduling_agent.tools.handlers.swaps import (
    FetchShiftSwapRequestHandler,
    SubmitShiftSwapRequestHandler,
)


def default_handlers(ctx: ToolContext) -> List[ToolHandler]:
    """Every scheduling tool, wired to the shared collaborators."""
    return [
        # Resolvers
        ResolveEntitiesHandler(ctx),
        ResolveStaffReferenceHandler(),
        ResolveStaffInfoByNameHandler(ctx),
        ResolveDepartmentInfoHandler(ctx),
        ResolveLoggedInUserRoleHandler(ctx),
        ResolveRelativeDateHandler(),
        ResolveNaturalLanguageDateHandler(),
        # Staff and shifts
        SearchAvailableStaffHandler(ctx),
        FilterShiftScheduleHandler(ctx),
        AddNewPlannedShiftHandler(ctx),
        AssignShiftToStaffHandler(ctx),
        UnassignShiftFromStaffHandler(ctx),
        # Leave
        FetchLeaveRequestHandler(ctx),
        SubmitLeaveRequestHandler(ctx),
        CancelLeaveRequestHandler(ctx),
        ApproveOrRejectLeaveRequestHandler(ctx),
        # Swaps
        SubmitShiftSwapRequestHandler(ctx),
        FetchShiftSwapRequestHandler(ctx),
    ]
