"""Planned shift tools."""

from scheduling_agent.services.schemas import ShiftFilter
from scheduling_agent.shared.contracts import ToolResult
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler, integer, iso_date, schema
from scheduling_agent.tools.context import ToolContext


class FilterShiftScheduleHandler(ToolHandler):
    name = "filterShiftSchedule"
    description = (
        "Retrieves planned shifts using optional filters: department id, staff id, "
        "shift type id, shift status id and date range. Employees only see their "
        "own shifts."
    )
    parameters = schema(
        {
            "plannedShiftId": integer("Optional. A specific planned shift id."),
            "departmentId": integer("Optional. Department id."),
            "staffId": integer("Optional. Assigned staff id."),
            "shiftTypeId": integer("Optional. Shift type id (Morning = 1, Evening = 2, Night = 3)."),
            "shiftStatusId": integer(
                "Optional. Shift status id (Scheduled = 1, Assigned = 2, Completed = 3, "
                "Cancelled = 4, Vacant = 5)."
            ),
            "fromDate": iso_date("Optional. Start of the date range (inclusive)."),
            "toDate": iso_date("Optional. End of the date range (inclusive)."),
        }
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        shifts = await self._ctx.shifts.fetch_filtered_shifts(
            ShiftFilter(
                planned_shift_id=args.get_int("plannedShiftId"),
                department_id=args.get_int("departmentId"),
                staff_id=args.get_int("staffId"),
                shift_type_id=args.get_int("shiftTypeId"),
                shift_status_id=args.get_int("shiftStatusId"),
                from_date=args.get_date("fromDate"),
                to_date=args.get_date("toDate"),
            )
        )
        if not shifts:
            return ToolResult.fail("No shifts found for the given criteria.")
        return ToolResult.ok(
            f"✅ Found {len(shifts)} shift(s).",
            data=[s.model_dump(mode="json") for s in shifts],
        )


class AddNewPlannedShiftHandler(ToolHandler):
    name = "addNewPlannedShift"
    description = (
        "Adds a new vacant planned shift for a date, shift type, department and slot "
        "number, without assigning staff."
    )
    parameters = schema(
        {
            "shiftDate": iso_date("Date of the shift (YYYY-MM-DD)."),
            "shiftTypeId": integer("Shift type id."),
            "departmentId": integer("Department id."),
            "slotNumber": integer("Slot number within the shift, starting at 1."),
        },
        required=["shiftDate", "shiftTypeId", "departmentId", "slotNumber"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        shift = await self._ctx.shifts.add_planned_shift(
            shift_date=args.require_date("shiftDate"),
            shift_type_id=args.require_positive_int("shiftTypeId"),
            department_id=args.require_positive_int("departmentId"),
            slot_number=args.require_positive_int("slotNumber"),
        )
        return ToolResult.ok("✅ New vacant shift added.", data=shift.model_dump(mode="json"))


class AssignShiftToStaffHandler(ToolHandler):
    name = "assignShiftToStaff"
    description = (
        "Assigns a staff member to a vacant planned shift. Fails if the shift is "
        "taken, the staff member has leave that day, or already works a shift of "
        "the same type that day."
    )
    parameters = schema(
        {
            "plannedShiftId": integer("The planned shift id."),
            "staffId": integer("The staff id to assign."),
        },
        required=["plannedShiftId", "staffId"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        shift = await self._ctx.shifts.assign_shift(
            args.require_positive_int("plannedShiftId"),
            args.require_positive_int("staffId"),
        )
        return ToolResult.ok(
            f"✅ Shift assigned to {shift.assigned_staff_name}.",
            data=shift.model_dump(mode="json"),
        )


class UnassignShiftFromStaffHandler(ToolHandler):
    name = "unassignShiftFromStaff"
    description = (
        "Removes the assigned staff member from a planned shift and marks it vacant."
    )
    parameters = schema(
        {"plannedShiftId": integer("The planned shift id.")}, required=["plannedShiftId"]
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        shift = await self._ctx.shifts.unassign_shift(args.require_positive_int("plannedShiftId"))
        return ToolResult.ok("✅ Staff unassigned from the shift.", data=shift.model_dump(mode="json"))
