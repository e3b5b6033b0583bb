"""
Tests for the availability search and fatigue rules.

The seeded roster, anchored on Monday 2 June 2025 (day 0):

- Staff 2 works day 0 Morning and staff 3 works day 0 Night (Emergency)
- Staff 4 works day 1 Evening (Cardiology)
- Staff 5 has approved leave for days 1-3
- Staff 6 has pending leave on day 3
- Staff 7 is marked unavailable on day 2
- Staff 8 is inactive
"""

import asyncio
from datetime import date, timedelta

from scheduling_agent.availability import AvailabilitySearch, has_fatigue_risk, is_adjacent
from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.seed import build_demo_store
from scheduling_agent.shared.contracts import AvailabilityFilter
from scheduling_agent.shared.schemas import PlannedShift, ShiftStatuses, ShiftTypes

TODAY = date(2025, 6, 2)


# ============================================================================
# Test Fixtures
# ============================================================================


def _day(offset):
    return TODAY + timedelta(days=offset)


def _make_search():
    """Create a search over the seeded store. Returns (search, store)."""
    store = build_demo_store(today=TODAY)
    lookup = LookupCache()
    asyncio.run(lookup.refresh(store))
    search = AvailabilitySearch(
        lookup, store.planned_shifts, store.leave_requests, store.availability
    )
    return search, store


def _ids(result, day):
    return {s.staff_id for s in result.for_date(day)}


def _run_search(search, **kwargs):
    return asyncio.run(search.search(AvailabilityFilter(**kwargs)))


# ============================================================================
# Search
# ============================================================================


class TestAvailabilitySearch:
    """Tests for AvailabilitySearch.search."""

    def test_one_entry_per_date_in_order(self):
        """Every date of the range is present, ascending."""
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(4))

        assert [d.date for d in result.days] == [_day(i) for i in range(5)]

    def test_empty_dates_are_kept(self):
        """A filter nobody matches still yields one (empty) entry per date."""
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(2), department_id=99)

        assert len(result.days) == 3
        assert result.all_empty
        assert result.non_empty_by_date() == {}

    def test_inactive_staff_never_listed(self):
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(4))

        for day in result.days:
            assert 8 not in {s.staff_id for s in day.available_staff}

    def test_department_filter(self):
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(0), department_id=2)

        assert _ids(result, _day(0)) == {4, 5}

    def test_approved_leave_excludes(self):
        """Staff 5 is excluded on every day of the approved leave only."""
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(4))

        assert 5 in _ids(result, _day(0))
        for offset in (1, 2, 3):
            assert 5 not in _ids(result, _day(offset))
        assert 5 in _ids(result, _day(4))

    def test_pending_leave_does_not_exclude(self):
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(3), end_date=_day(3))

        assert 6 in _ids(result, _day(3))

    def test_unavailability_excludes(self):
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(1), end_date=_day(3))

        assert 7 in _ids(result, _day(1))
        assert 7 not in _ids(result, _day(2))

    def test_night_then_morning_with_fatigue_check(self):
        """A Night shift yesterday rules out a Morning shift today."""
        search, _ = _make_search()
        result = _run_search(
            search,
            start_date=_day(1),
            end_date=_day(1),
            shift_type_id=ShiftTypes.MORNING,
        )

        ids = _ids(result, _day(1))
        assert 3 not in ids
        # Staff 4 holds an adjacent Evening shift the same day
        assert 4 not in ids
        assert 2 in ids

    def test_night_then_morning_without_fatigue_check(self):
        search, _ = _make_search()
        result = _run_search(
            search,
            start_date=_day(1),
            end_date=_day(1),
            shift_type_id=ShiftTypes.MORNING,
            apply_fatigue_check=False,
        )

        assert {3, 4} <= _ids(result, _day(1))
        assert not result.fatigue_check_applied

    def test_fatigue_needs_shift_type(self):
        """Without a shift type no fatigue rule applies."""
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(0))

        assert {2, 3} <= _ids(result, _day(0))

    def test_cancelled_shift_ignored(self):
        """A cancelled Night shift does not block the next Morning."""
        search, store = _make_search()
        asyncio.run(
            store.planned_shifts.add(
                PlannedShift(
                    shift_date=_day(4),
                    shift_type_id=ShiftTypes.NIGHT,
                    department_id=1,
                    shift_status_id=ShiftStatuses.CANCELLED,
                    assigned_staff_id=2,
                )
            )
        )
        result = _run_search(
            search,
            start_date=_day(5),
            end_date=_day(5),
            shift_type_id=ShiftTypes.MORNING,
        )

        assert 2 in _ids(result, _day(5))

    def test_entries_carry_names(self):
        search, _ = _make_search()
        result = _run_search(search, start_date=_day(0), end_date=_day(0), department_id=4)

        (entry,) = result.for_date(_day(0))
        assert entry.staff_name == "Lena Novak"
        assert entry.role_name == "Employee"
        assert entry.department_name == "Intensive Care Unit"


# ============================================================================
# Fatigue rules
# ============================================================================


class TestFatigueRules:
    """Tests for is_adjacent and has_fatigue_risk."""

    def test_adjacency_is_symmetric(self):
        for a in ShiftTypes:
            for b in ShiftTypes:
                assert is_adjacent(a, b) == is_adjacent(b, a)

    def test_same_type_same_day(self):
        shifts = [
            PlannedShift(
                shift_date=TODAY,
                shift_type_id=ShiftTypes.EVENING,
                department_id=1,
                assigned_staff_id=2,
                shift_status_id=ShiftStatuses.SCHEDULED,
            )
        ]

        assert has_fatigue_risk(shifts, 2, TODAY, ShiftTypes.EVENING)
        assert not has_fatigue_risk(shifts, 3, TODAY, ShiftTypes.EVENING)

    def test_night_before_only_blocks_morning(self):
        shifts = [
            PlannedShift(
                shift_date=TODAY - timedelta(days=1),
                shift_type_id=ShiftTypes.NIGHT,
                department_id=1,
                assigned_staff_id=2,
                shift_status_id=ShiftStatuses.SCHEDULED,
            )
        ]

        assert has_fatigue_risk(shifts, 2, TODAY, ShiftTypes.MORNING)
        assert not has_fatigue_risk(shifts, 2, TODAY, ShiftTypes.EVENING)
