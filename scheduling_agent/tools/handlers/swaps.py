"""Shift swap tools."""

from scheduling_agent.services.schemas import ShiftSwapFilter
from scheduling_agent.shared.contracts import ToolResult
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler, integer, iso_date, schema
from scheduling_agent.tools.context import ToolContext


class SubmitShiftSwapRequestHandler(ToolHandler):
    name = "submitShiftSwapRequest"
    description = (
        "Requests a swap between a shift held by the requesting staff member and a "
        "shift held by another staff member. The request starts as Pending."
    )
    parameters = schema(
        {
            "requestingStaffId": integer("Id of the staff member requesting the swap."),
            "targetStaffId": integer("Id of the staff member asked to swap."),
            "sourceShiftDate": iso_date("Date of the requester's shift (YYYY-MM-DD)."),
            "sourceShiftTypeId": integer("Shift type id of the requester's shift."),
            "targetShiftDate": iso_date("Date of the target staff member's shift (YYYY-MM-DD)."),
            "targetShiftTypeId": integer("Shift type id of the target shift."),
        },
        required=[
            "requestingStaffId",
            "targetStaffId",
            "sourceShiftDate",
            "sourceShiftTypeId",
            "targetShiftDate",
            "targetShiftTypeId",
        ],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        swap = await self._ctx.swaps.submit_swap_request(
            requesting_staff_id=args.require_positive_int("requestingStaffId"),
            target_staff_id=args.require_positive_int("targetStaffId"),
            source_shift_date=args.require_date("sourceShiftDate"),
            source_shift_type_id=args.require_positive_int("sourceShiftTypeId"),
            target_shift_date=args.require_date("targetShiftDate"),
            target_shift_type_id=args.require_positive_int("targetShiftTypeId"),
        )
        return ToolResult.ok("✅ Shift swap request submitted.", data=swap.model_dump(mode="json"))


class FetchShiftSwapRequestHandler(ToolHandler):
    name = "fetchShiftSwapRequest"
    description = "Lists shift swap requests, optionally filtered by status, staff, shift type or dates."
    parameters = schema(
        {
            "statusId": integer("Optional. Pending = 1, Approved = 2, Rejected = 3."),
            "requesterStaffId": integer("Optional. Requesting staff id."),
            "targetStaffId": integer("Optional. Target staff id."),
            "requesterShiftTypeId": integer("Optional. Shift type id of the requester's shift."),
            "targetShiftTypeId": integer("Optional. Shift type id of the target shift."),
            "fromDate": iso_date("Optional. Earliest source shift date."),
            "toDate": iso_date("Optional. Latest target shift date."),
        }
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        swaps = await self._ctx.swaps.fetch_swap_requests(
            ShiftSwapFilter(
                status_id=args.get_int("statusId"),
                requester_staff_id=args.get_int("requesterStaffId"),
                target_staff_id=args.get_int("targetStaffId"),
                requester_shift_type_id=args.get_int("requesterShiftTypeId"),
                target_shift_type_id=args.get_int("targetShiftTypeId"),
                from_date=args.get_date("fromDate"),
                to_date=args.get_date("toDate"),
            )
        )
        if not swaps:
            return ToolResult.fail("No shift swap requests found.")
        return ToolResult.ok(
            f"✅ Found {len(swaps)} shift swap request(s).",
            data=[s.model_dump(mode="json") for s in swaps],
        )
