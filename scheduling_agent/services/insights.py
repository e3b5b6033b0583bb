"""
Daily scheduler summary.

Counts what needs a scheduler's attention over the next seven days (vacant
shifts, pending leave and pending swap requests) and phrases it as a short
greeting with quick replies the chat client can send back as messages.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.store import DataStore
from scheduling_agent.services.leave import LeaveRequestService
from scheduling_agent.services.schemas import (
    DailySummary,
    LeaveRequestFilter,
    QuickReply,
    ShiftFilter,
    ShiftSwapFilter,
)
from scheduling_agent.services.shift_swap import ShiftSwapService
from scheduling_agent.services.shifts import PlannedShiftService
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.schemas import (
    LeaveRequestStatuses,
    ShiftStatuses,
    ShiftSwapStatuses,
)

logger = logging.getLogger(__name__)

SUMMARY_DAYS = 7
DATE_FORMAT = "%d %b %Y"


def greeting_for(hour: int) -> str:
    if 5 <= hour < 12:
        return "👋 Good morning!"
    if 12 <= hour < 17:
        return "👋 Good afternoon!"
    return "👋 Good evening!"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}s are" if count > 1 else f"{count} {noun} is"


class AgentInsightsService:
    def __init__(
        self,
        shifts: PlannedShiftService,
        leave: LeaveRequestService,
        swaps: ShiftSwapService,
    ):
        self._shifts = shifts
        self._leave = leave
        self._swaps = swaps

    @classmethod
    def from_store(cls, store: DataStore, lookup: LookupCache) -> "AgentInsightsService":
        return cls(
            PlannedShiftService(store.planned_shifts, store.leave_requests, lookup),
            LeaveRequestService(store.leave_requests, lookup),
            ShiftSwapService(store.swap_requests, store.planned_shifts, lookup),
        )

    async def daily_summary(self, now: Optional[datetime] = None) -> Optional[DailySummary]:
        """
        Build the scheduler's summary for the week starting today.

        Args:
            now: Current local time; picks the greeting and anchors the week

        Returns:
            The summary, or None when the current user is not a scheduler.
        """
        if not current_user().is_scheduler:
            return None

        now = now or datetime.now()
        today = now.date()
        week_end = today + timedelta(days=SUMMARY_DAYS - 1)

        uncovered = await self._shifts.fetch_filtered_shifts(
            ShiftFilter(from_date=today, to_date=week_end, shift_status_id=ShiftStatuses.VACANT)
        )
        pending_leave = await self._leave.fetch_leave_requests(
            LeaveRequestFilter(
                start_date=today,
                end_date=week_end,
                leave_status_id=LeaveRequestStatuses.PENDING,
            )
        )
        pending_swaps = await self._swaps.fetch_swap_requests(
            ShiftSwapFilter(status_id=ShiftSwapStatuses.PENDING, from_date=today)
        )

        summary = DailySummary(
            summary_message=self._message(
                greeting_for(now.hour), len(uncovered), len(pending_leave), len(pending_swaps)
            ),
            quick_replies=self._quick_replies(
                today, week_end, len(uncovered), len(pending_leave), len(pending_swaps)
            ),
            uncovered_shifts=len(uncovered),
            pending_leave_requests=len(pending_leave),
            pending_swap_requests=len(pending_swaps),
        )
        logger.info(
            f"[owner={current_user().staff_id}] Daily summary: {summary.uncovered_shifts} vacant, "
            f"{summary.pending_leave_requests} leave, {summary.pending_swap_requests} swaps"
        )
        return summary

    @staticmethod
    def _message(greeting: str, uncovered: int, pending_leave: int, pending_swaps: int) -> str:
        lines = []
        if uncovered:
            lines.append(
                f"• 🕒 {_plural(uncovered, 'shift')} currently unassigned and may affect coverage."
            )
        if pending_leave:
            lines.append(
                f"• 📥 {_plural(pending_leave, 'leave request')} still awaiting your approval."
            )
        if pending_swaps:
            lines.append(
                f"• 🔄 {_plural(pending_swaps, 'shift swap request')} pending your review."
            )

        if not lines:
            return (
                f"{greeting} ✅ Everything looks good today! "
                "No uncovered shifts or pending leave requests. 👏\n\n"
                "👀 You can still:\n"
                "• View shift calendar\n"
                "• Manage staff availability\n"
                "• Review upcoming schedules"
            )
        return (
            f"{greeting} Here's a quick summary of today's staffing status:\n\n"
            + "\n".join(lines)
            + "\n\n👉 Would you like to take action on any of these?"
        )

    @staticmethod
    def _quick_replies(
        today: date, week_end: date, uncovered: int, pending_leave: int, pending_swaps: int
    ) -> List[QuickReply]:
        start, end = today.strftime(DATE_FORMAT), week_end.strftime(DATE_FORMAT)
        replies = []
        if uncovered:
            replies.append(
                QuickReply(
                    label="📅 Review Coverage",
                    value=f"Show unassigned shifts from {start} to {end}",
                )
            )
        if pending_leave:
            replies.append(
                QuickReply(
                    label="✅ Leave Requests",
                    value=f"Show pending leave requests from {start} to {end}",
                )
            )
        if pending_swaps:
            replies.append(
                QuickReply(
                    label="🔄 Shift Swaps",
                    value=f"Show pending shift swap requests from {start}",
                )
            )
        return replies
