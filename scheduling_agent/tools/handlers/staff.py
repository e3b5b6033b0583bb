"""Staff availability tool."""

import logging

from pydantic import ValidationError

from scheduling_agent.services.shifts import NOT_AUTHORIZED
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.contracts import AvailabilityFilter, ToolResult
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler, integer, iso_date, schema
from scheduling_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)


class SearchAvailableStaffHandler(ToolHandler):
    name = "searchAvailableStaff"
    description = (
        "Finds staff members who are free and eligible to work during a given date "
        "or date range, optionally filtered by shift type id and department id. "
        "Staff on approved leave, marked unavailable, or at risk of back-to-back "
        "shifts are excluded."
    )
    parameters = schema(
        {
            "startDate": iso_date("Start date of the availability window (YYYY-MM-DD)."),
            "endDate": iso_date(
                "End date of the availability window (YYYY-MM-DD). Same as startDate "
                "for a single day."
            ),
            "shiftTypeId": integer("Optional. Shift type id (Morning = 1, Evening = 2, Night = 3)."),
            "departmentId": integer("Optional. Department id to restrict the search to."),
        },
        required=["startDate", "endDate"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        if not current_user().is_scheduler:
            return ToolResult.fail(NOT_AUTHORIZED)

        try:
            availability_filter = AvailabilityFilter(
                start_date=args.require_date("startDate"),
                end_date=args.require_date("endDate"),
                shift_type_id=args.get_int("shiftTypeId"),
                department_id=args.get_int("departmentId"),
            )
        except ValidationError:
            return ToolResult.fail("❌ startDate must be on or before endDate.")

        result = await self._ctx.availability.search(availability_filter)
        if result.all_empty and result.fatigue_check_applied:
            logger.info("No staff available with fatigue check, retrying without it")
            result = await self._ctx.availability.search(
                availability_filter.model_copy(update={"apply_fatigue_check": False})
            )

        if result.all_empty:
            return ToolResult.fail("No available staff found for the given criteria.")

        message = "✅ Available staff found."
        if not result.fatigue_check_applied:
            message += " ⚠️ Nobody was free without back-to-back shift risk; fatigue check was relaxed."
        return ToolResult.ok(
            message,
            data={
                "fatigueCheckApplied": result.fatigue_check_applied,
                "availableStaff": result.non_empty_by_date(),
            },
        )
