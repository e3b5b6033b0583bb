"""Leave request tools."""

import logging
from typing import List, Optional

from scheduling_agent.resolution.entity_resolver import tokenize
from scheduling_agent.resolution.synonyms import LEAVE_STATUS_SYNONYMS
from scheduling_agent.services.schemas import (
    LeaveRequestFilter,
    ShiftFilter,
    ShiftReplacementOptions,
)
from scheduling_agent.shared.contracts import AvailabilityFilter, ToolResult
from scheduling_agent.shared.schemas import LeaveRequestStatuses
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler, integer, iso_date, schema, string
from scheduling_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)

MAX_REPLACEMENTS = 3


class FetchLeaveRequestHandler(ToolHandler):
    name = "fetchLeaveRequest"
    description = (
        "Retrieves leave requests using optional filters: staff id, leave status id, "
        "leave type id or date range. Employees only see their own requests."
    )
    parameters = schema(
        {
            "leaveRequestId": integer("Optional. A specific leave request id."),
            "staffId": integer("Optional. Staff id."),
            "leaveStatusId": integer("Optional. Pending = 1, Approved = 2, Rejected = 3."),
            "leaveTypeId": integer("Optional. Sick = 1, Casual = 2, Vacation = 3."),
            "startDate": iso_date("Optional. Keep requests ending on or after this date."),
            "endDate": iso_date("Optional. Keep requests starting on or before this date."),
        }
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        requests = await self._ctx.leave.fetch_leave_requests(
            LeaveRequestFilter(
                leave_request_id=args.get_int("leaveRequestId"),
                staff_id=args.get_int("staffId"),
                leave_status_id=args.get_int("leaveStatusId"),
                leave_type_id=args.get_int("leaveTypeId"),
                start_date=args.get_date("startDate"),
                end_date=args.get_date("endDate"),
            )
        )
        if not requests:
            return ToolResult.fail("No leave requests found for the given criteria.")
        return ToolResult.ok(
            f"✅ Found {len(requests)} leave request(s).",
            data=[r.model_dump(mode="json") for r in requests],
        )


class SubmitLeaveRequestHandler(ToolHandler):
    name = "submitLeaveRequest"
    description = (
        "Submits a new leave request when a staff member applies for leave or says "
        "they are unavailable on specific dates. The request starts as Pending."
    )
    parameters = schema(
        {
            "staffId": integer("The id of the staff member applying for leave."),
            "leaveStart": iso_date("Leave start date (YYYY-MM-DD)."),
            "leaveEnd": iso_date("Leave end date (YYYY-MM-DD)."),
            "leaveType": string("Type of leave, e.g. Sick, Casual, Vacation."),
        },
        required=["staffId", "leaveStart", "leaveEnd", "leaveType"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        staff_id = args.require_positive_int("staffId")
        leave_start = args.require_date("leaveStart")
        leave_end = args.require_date("leaveEnd")
        leave_type_text = args.require_str("leaveType")

        lowered = leave_type_text.lower()
        leave_type = self._ctx.resolver.resolve_leave_type(
            lowered, tokenize(lowered), self._ctx.lookup.snapshot
        )
        if leave_type is None:
            return ToolResult.fail(
                f"❌ Unknown leave type '{leave_type_text}'. Use Sick, Casual or Vacation."
            )

        request = await self._ctx.leave.submit_leave_request(
            staff_id, leave_start, leave_end, leave_type.leave_type_id
        )
        return ToolResult.ok(
            "✅ Leave request submitted and pending approval.",
            data=request.model_dump(mode="json"),
        )


class CancelLeaveRequestHandler(ToolHandler):
    name = "cancelLeaveRequest"
    description = (
        "Cancels a previously submitted leave request, identified by staff id and "
        "the exact leave dates."
    )
    parameters = schema(
        {
            "staffId": integer("The id of the staff member whose leave is cancelled."),
            "leaveStart": iso_date("Leave start date (YYYY-MM-DD)."),
            "leaveEnd": iso_date("Leave end date (YYYY-MM-DD)."),
        },
        required=["staffId", "leaveStart", "leaveEnd"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        staff_id = args.require_positive_int("staffId")
        leave_start = args.require_date("leaveStart")
        leave_end = args.require_date("leaveEnd")
        if leave_end < leave_start:
            return ToolResult.fail("leaveEnd must be on or after leaveStart.")

        cancelled = await self._ctx.leave.cancel_leave_request(staff_id, leave_start, leave_end)
        return ToolResult.ok(
            "✅ Leave request cancelled successfully.", data=cancelled.model_dump(mode="json")
        )


def parse_decision(text: Optional[str]) -> Optional[LeaveRequestStatuses]:
    """Map 'Approved'/'approve'/'deny'... to Approved or Rejected."""
    if not text:
        return None
    canonical = LEAVE_STATUS_SYNONYMS.get(text.strip().lower())
    if canonical == "Approved":
        return LeaveRequestStatuses.APPROVED
    if canonical == "Rejected":
        return LeaveRequestStatuses.REJECTED
    return None


class ApproveOrRejectLeaveRequestHandler(ToolHandler):
    name = "approveOrRejectLeaveRequest"
    description = (
        "Approves or rejects a pending leave request. Provide leaveRequestId, or "
        "staffId with the leave dates. On approval the staff member's shifts in the "
        "leave period are unassigned and replacement candidates are suggested."
    )
    parameters = schema(
        {
            "newStatus": string("Either 'Approved' or 'Rejected'."),
            "leaveRequestId": integer("Optional. The leave request id."),
            "staffId": integer("Optional. Staff id of the request."),
            "startDate": iso_date("Optional. Leave start date."),
            "endDate": iso_date("Optional. Leave end date."),
        },
        required=["newStatus"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        new_status = parse_decision(args.get_str("newStatus"))
        if new_status is None:
            return ToolResult.fail(
                "❌ Invalid or missing `newStatus`. It must be either 'Approved' or 'Rejected'."
            )

        matches = await self._ctx.leave.fetch_leave_requests(
            LeaveRequestFilter(
                leave_request_id=args.get_int("leaveRequestId"),
                staff_id=args.get_int("staffId"),
                start_date=args.get_date("startDate"),
                end_date=args.get_date("endDate"),
                leave_status_id=LeaveRequestStatuses.PENDING,
            )
        )
        if not matches:
            return ToolResult.fail("❌ No matching pending leave request found.")

        updated = await self._ctx.leave.update_status(matches[0].leave_request_id, new_status)

        impacted: List[ShiftReplacementOptions] = []
        if new_status == LeaveRequestStatuses.APPROVED:
            impacted = await self._release_shifts(
                updated.staff_id, updated.leave_start, updated.leave_end
            )

        return ToolResult.ok(
            f"✅ Leave request has been successfully **{new_status.name.lower()}**.",
            data={
                "leaveRequest": updated.model_dump(mode="json"),
                "impactedShifts": [option.model_dump(mode="json") for option in impacted],
            },
        )

    async def _release_shifts(self, staff_id, leave_start, leave_end) -> List[ShiftReplacementOptions]:
        shifts = await self._ctx.shifts.fetch_filtered_shifts(
            ShiftFilter(staff_id=staff_id, from_date=leave_start, to_date=leave_end)
        )
        options = []
        for shift in shifts:
            await self._ctx.shifts.unassign_shift(shift.planned_shift_id)
            result = await self._ctx.availability.search(
                AvailabilityFilter(
                    start_date=shift.shift_date,
                    end_date=shift.shift_date,
                    shift_type_id=shift.shift_type_id,
                    department_id=shift.department_id,
                )
            )
            candidates = result.for_date(shift.shift_date)[:MAX_REPLACEMENTS]
            options.append(
                ShiftReplacementOptions(
                    planned_shift_id=shift.planned_shift_id,
                    shift_date=shift.shift_date,
                    shift_type_id=shift.shift_type_id,
                    shift_type_name=shift.shift_type_name,
                    department_id=shift.department_id,
                    department_name=shift.department_name,
                    replacements=[c.model_dump(mode="json") for c in candidates],
                )
            )
        logger.info(f"Released {len(options)} shift(s) for staff {staff_id} on approved leave")
        return options
