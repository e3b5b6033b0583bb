"""
Tests for the scheduler's daily summary.

Uses the seeded roster anchored on Monday 2 June 2025. Within the first
seven days it has two vacant shifts (days 1 and 2) and one pending leave
request (staff 6, day 3), and no swap requests.
"""

import asyncio
from datetime import date, datetime, timedelta

from scheduling_agent.data import empty_store
from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.seed import build_demo_store
from scheduling_agent.services import AgentInsightsService
from scheduling_agent.services.insights import greeting_for
from scheduling_agent.services.user_context import EMPLOYEE, SCHEDULER, UserContext, user_scope
from scheduling_agent.shared.schemas import ShiftSwapRequest, ShiftTypes

TODAY = date(2025, 6, 2)
MORNING = datetime(2025, 6, 2, 9, 0)


# ============================================================================
# Test Fixtures
# ============================================================================


def _make_service(store=None):
    store = store or build_demo_store(today=TODAY)
    lookup = LookupCache()
    asyncio.run(lookup.refresh(store))
    return AgentInsightsService.from_store(store, lookup), store


def _summary(service, role=SCHEDULER, now=MORNING):
    with user_scope(UserContext(staff_id=1, role=role)):
        return asyncio.run(service.daily_summary(now=now))


# ============================================================================
# Summary
# ============================================================================


class TestDailySummary:
    """Tests for AgentInsightsService.daily_summary."""

    def test_counts_for_coming_week(self):
        service, _ = _make_service()

        summary = _summary(service)

        assert summary.uncovered_shifts == 2
        assert summary.pending_leave_requests == 1
        assert summary.pending_swap_requests == 0
        assert summary.summary_message.startswith("👋 Good morning!")
        assert "2 shifts are currently unassigned" in summary.summary_message
        assert "1 leave request is still awaiting your approval" in summary.summary_message

    def test_quick_replies_follow_counts(self):
        service, _ = _make_service()

        summary = _summary(service)

        assert [reply.label for reply in summary.quick_replies] == [
            "📅 Review Coverage",
            "✅ Leave Requests",
        ]
        assert summary.quick_replies[0].value == (
            "Show unassigned shifts from 02 Jun 2025 to 08 Jun 2025"
        )

    def test_pending_swap_counted(self):
        service, store = _make_service()
        asyncio.run(
            store.swap_requests.add(
                ShiftSwapRequest(
                    requesting_staff_id=2,
                    target_staff_id=3,
                    source_shift_date=TODAY,
                    source_shift_type_id=ShiftTypes.MORNING,
                    target_shift_date=TODAY,
                    target_shift_type_id=ShiftTypes.NIGHT,
                )
            )
        )

        summary = _summary(service)

        assert summary.pending_swap_requests == 1
        assert "1 shift swap request is pending your review" in summary.summary_message
        assert summary.quick_replies[-1].value == "Show pending shift swap requests from 02 Jun 2025"

    def test_later_shifts_not_counted(self):
        """Only the seven days starting today are counted."""
        service, _ = _make_service()

        summary = _summary(service, now=MORNING - timedelta(days=6))

        # Window 27 May .. 2 Jun only reaches day 0, which has no vacant shift
        assert summary.uncovered_shifts == 0

    def test_nothing_pending(self):
        service, _ = _make_service(empty_store())

        summary = _summary(service, now=datetime(2025, 6, 2, 20, 0))

        assert summary.summary_message.startswith("👋 Good evening! ✅ Everything looks good today!")
        assert summary.quick_replies == []

    def test_employee_gets_nothing(self):
        service, _ = _make_service()

        assert _summary(service, role=EMPLOYEE) is None


class TestGreeting:
    def test_greeting_by_hour(self):
        assert greeting_for(5) == "👋 Good morning!"
        assert greeting_for(12) == "👋 Good afternoon!"
        assert greeting_for(16) == "👋 Good afternoon!"
        assert greeting_for(17) == "👋 Good evening!"
        assert greeting_for(2) == "👋 Good evening!"
