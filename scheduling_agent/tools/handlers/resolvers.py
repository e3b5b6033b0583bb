"""Helper tools that turn free text into ids and dates."""

import logging

from scheduling_agent.resolution import (
    parse_natural_dates,
    resolve_relative_date,
    resolve_staff_reference,
)
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.contracts import ToolResult
from scheduling_agent.tools.arguments import ToolArguments
from scheduling_agent.tools.base import ToolHandler, schema, string
from scheduling_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)


class ResolveEntitiesHandler(ToolHandler):
    name = "resolveEntities"
    description = (
        "Resolves a free-text phrase into known entities in one call: department, "
        "shift type, shift status, leave status, leave type, the caller's own staff "
        "record (for 'me'/'my') and the caller's role. Call this before tools that "
        "need ids."
    )
    parameters = schema(
        {"phrase": string("The user's phrase, e.g. 'approved sick leave in cardiology'.")},
        required=["phrase"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        phrase = args.get_str("phrase")
        if phrase is None:
            return ToolResult.fail("❌ A phrase is required to resolve entities.")

        entities = self._ctx.resolver.resolve(phrase)
        if entities.is_empty():
            return ToolResult.ok("ℹ️ No known entities found in the phrase.", data={})
        return ToolResult.ok(
            "✅ Entities resolved.",
            data=entities.model_dump(mode="json", exclude_none=True),
        )


class ResolveStaffReferenceHandler(ToolHandler):
    name = "resolveStaffReference"
    description = (
        "Resolves a self-reference in a prompt ('me', 'my shift', 'I am') to the "
        "caller's staff id. Other phrases are returned as a name fragment."
    )
    parameters = schema(
        {"phrase": string("The phrase that refers to a person.")}, required=["phrase"]
    )

    async def handle(self, args: ToolArguments) -> ToolResult:
        phrase = args.get_str("phrase")
        if phrase is None:
            return ToolResult.fail("❌ A phrase is required to resolve staff reference.")

        reference = resolve_staff_reference(phrase)
        if reference.is_self:
            return ToolResult.ok(
                "✅ Resolved to current user.",
                data={"staffId": reference.staff_id, "isSelf": True},
            )
        return ToolResult.ok(
            "ℹ️ Resolved phrase without self-reference.",
            data={"originalPhrase": reference.original_phrase, "isSelf": False},
        )


class ResolveStaffInfoByNameHandler(ToolHandler):
    name = "resolveStaffInfoByName"
    description = "Finds active staff members whose name contains the given text."
    parameters = schema(
        {"namePart": string("Full or partial staff name.")}, required=["namePart"]
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        name_part = args.require_str("namePart")
        matches = self._ctx.staff.fetch_active_staff_by_name(name_part)
        if not matches:
            return ToolResult.fail(f"❌ No active staff found matching '{name_part}'.")
        return ToolResult.ok(
            f"✅ Found {len(matches)} staff member(s).",
            data=[m.model_dump(mode="json") for m in matches],
        )


class ResolveDepartmentInfoHandler(ToolHandler):
    name = "resolveDepartmentInfo"
    description = "Finds a department by full or partial name and returns its id."
    parameters = schema(
        {"departmentName": string("Full or partial department name.")},
        required=["departmentName"],
    )

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        name = args.require_str("departmentName")
        department = self._ctx.departments.fetch_department_info(name)
        if department is None:
            return ToolResult.fail(f"❌ No department found matching '{name}'.")
        return ToolResult.ok("✅ Department resolved.", data=department.model_dump(mode="json"))


class ResolveLoggedInUserRoleHandler(ToolHandler):
    name = "resolveLoggedInUserRole"
    description = "Returns the role and staff id of the user you are talking to."

    def __init__(self, ctx: ToolContext):
        self._ctx = ctx

    async def handle(self, args: ToolArguments) -> ToolResult:
        user = current_user()
        role = self._ctx.lookup.snapshot.role_by_name(user.role)
        if role is None:
            return ToolResult.fail("❌ Could not determine the logged-in user's role.")
        return ToolResult.ok(
            f"✅ Logged-in user is a {role.role_name}.",
            data={"staffId": user.staff_id, "roleId": role.role_id, "roleName": role.role_name},
        )


class ResolveRelativeDateHandler(ToolHandler):
    name = "resolveRelativeDate"
    description = (
        "Resolves relative date phrases such as 'today', 'tomorrow', 'next week', "
        "'last weekend' or 'next monday' to concrete dates (YYYY-MM-DD)."
    )
    parameters = schema(
        {"phrase": string("The relative date phrase.")}, required=["phrase"]
    )

    async def handle(self, args: ToolArguments) -> ToolResult:
        phrase = args.get_str("phrase")
        if phrase is None:
            return ToolResult.fail("❌ Date phrase is required.")

        start, end = resolve_relative_date(phrase)
        if start == end:
            data = {"resolvedDate": start.isoformat()}
        else:
            data = {"startDate": start.isoformat(), "endDate": end.isoformat()}
        return ToolResult.ok("✅ Resolved relative date.", data=data)


class ResolveNaturalLanguageDateHandler(ToolHandler):
    name = "resolveNaturalLanguageDate"
    description = (
        "Resolves explicit dates or date ranges written in natural language, e.g. "
        "'14th Aug to 18 Aug 2025' or '2025-08-14', into a start and end date."
    )
    parameters = schema(
        {"naturalDate": string("The date or date range as written by the user.")},
        required=["naturalDate"],
    )

    async def handle(self, args: ToolArguments) -> ToolResult:
        text = args.get_str("naturalDate")
        if text is None:
            return ToolResult.fail("Date input is required.")

        dates = parse_natural_dates(text)
        if not dates:
            logger.warning(f"Unable to parse date(s) from input '{text}'")
            return ToolResult.fail(f"Could not resolve date(s) from input: '{text}'")

        return ToolResult.ok(
            "✅ Resolved date range.",
            data={
                "input": text,
                "startDate": dates[0].isoformat(),
                "endDate": dates[-1].isoformat(),
            },
        )
