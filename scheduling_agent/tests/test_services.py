"""
Tests for the leave, shift, swap, staff and department services.

Uses the seeded roster anchored on Monday 2 June 2025 (day 0). Shift ids
follow seed order:

    1: day 0 Morning Emergency (staff 2)     5: day 2 Night Cardiology (vacant)
    2: day 0 Night Emergency (staff 3)       6: day 3 Morning Pediatrics (staff 6)
    3: day 1 Morning Emergency (vacant)      7: day 3 Evening ICU (staff 7)
    4: day 1 Evening Cardiology (staff 4)

Leave: 1 = staff 5 approved days 1-3, 2 = staff 6 pending day 3.
"""

import asyncio
from datetime import date, timedelta

import pytest

from scheduling_agent.data import empty_store
from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.seed import build_demo_store
from scheduling_agent.services import (
    DepartmentService,
    LeaveRequestService,
    PlannedShiftService,
    ShiftSwapService,
    StaffService,
)
from scheduling_agent.services.schemas import LeaveRequestFilter, ShiftFilter, ShiftSwapFilter
from scheduling_agent.services.user_context import EMPLOYEE, SCHEDULER, UserContext, user_scope
from scheduling_agent.shared.exceptions import BusinessRuleViolation
from scheduling_agent.shared.schemas import (
    Department,
    LeaveRequestStatuses,
    LeaveTypes,
    ShiftStatuses,
    ShiftTypes,
)

TODAY = date(2025, 6, 2)


# ============================================================================
# Test Fixtures
# ============================================================================


def _day(offset):
    return TODAY + timedelta(days=offset)


def _make_store():
    """Create the seeded store and a refreshed lookup cache."""
    store = build_demo_store(today=TODAY)
    lookup = LookupCache()
    asyncio.run(lookup.refresh(store))
    return store, lookup


def _scheduler():
    return user_scope(UserContext(staff_id=1, role=SCHEDULER))


def _employee(staff_id):
    return user_scope(UserContext(staff_id=staff_id, role=EMPLOYEE))


# ============================================================================
# Leave
# ============================================================================


class TestLeaveRequestService:
    """Tests for LeaveRequestService."""

    def _service(self):
        store, lookup = _make_store()
        return LeaveRequestService(store.leave_requests, lookup), store

    def test_scheduler_sees_all(self):
        service, _ = self._service()
        with _scheduler():
            requests = asyncio.run(service.fetch_leave_requests(LeaveRequestFilter()))

        assert {r.staff_id for r in requests} == {5, 6}
        assert requests[0].leave_start >= requests[-1].leave_start

    def test_employee_restricted_to_self(self):
        service, _ = self._service()
        with _employee(5):
            requests = asyncio.run(service.fetch_leave_requests(LeaveRequestFilter()))

        assert [r.staff_id for r in requests] == [5]
        assert requests[0].leave_status_name == "Approved"
        assert requests[0].staff_department_name == "Cardiology"

    def test_employee_cannot_view_others(self):
        service, _ = self._service()
        with _employee(5):
            with pytest.raises(BusinessRuleViolation, match="only allowed to view your own"):
                asyncio.run(service.fetch_leave_requests(LeaveRequestFilter(staff_id=6)))

    def test_submit_creates_pending(self):
        service, store = self._service()
        with _employee(2):
            details = asyncio.run(
                service.submit_leave_request(2, _day(10), _day(12), LeaveTypes.CASUAL)
            )

        assert details.leave_status_id == LeaveRequestStatuses.PENDING
        assert details.leave_type_name == "Casual"
        assert len(store.leave_requests) == 3

    def test_submit_for_someone_else_rejected(self):
        service, _ = self._service()
        with _employee(2):
            with pytest.raises(BusinessRuleViolation, match="only submit leave requests for yourself"):
                asyncio.run(service.submit_leave_request(3, _day(10), _day(10), LeaveTypes.SICK))

    def test_submit_duplicate_rejected(self):
        service, _ = self._service()
        with _scheduler():
            with pytest.raises(BusinessRuleViolation, match="already exists"):
                asyncio.run(service.submit_leave_request(5, _day(1), _day(3), LeaveTypes.SICK))

    def test_submit_inverted_range_rejected(self):
        service, _ = self._service()
        with _employee(2):
            with pytest.raises(BusinessRuleViolation):
                asyncio.run(service.submit_leave_request(2, _day(5), _day(4), LeaveTypes.SICK))

    def test_cancel_removes_request(self):
        service, store = self._service()
        with _employee(6):
            cancelled = asyncio.run(service.cancel_leave_request(6, _day(3), _day(3)))

        assert cancelled.leave_request_id == 2
        assert asyncio.run(store.leave_requests.get_by_id(2)) is None

    def test_cancel_missing_request(self):
        service, _ = self._service()
        with _employee(6):
            with pytest.raises(BusinessRuleViolation, match="No existing leave request"):
                asyncio.run(service.cancel_leave_request(6, _day(4), _day(4)))

    def test_update_status_requires_scheduler(self):
        service, _ = self._service()
        with _employee(6):
            with pytest.raises(BusinessRuleViolation, match="not authorized"):
                asyncio.run(service.update_status(2, LeaveRequestStatuses.APPROVED))

    def test_update_status_only_from_pending(self):
        service, _ = self._service()
        with _scheduler():
            with pytest.raises(BusinessRuleViolation, match="Only pending"):
                asyncio.run(service.update_status(1, LeaveRequestStatuses.REJECTED))

    def test_update_status_approves(self):
        service, _ = self._service()
        with _scheduler():
            updated = asyncio.run(service.update_status(2, LeaveRequestStatuses.APPROVED))

        assert updated.leave_status_name == "Approved"


# ============================================================================
# Shifts
# ============================================================================


class TestPlannedShiftService:
    """Tests for PlannedShiftService."""

    def _service(self):
        store, lookup = _make_store()
        return PlannedShiftService(store.planned_shifts, store.leave_requests, lookup), store

    def test_employee_sees_only_own_shifts(self):
        service, _ = self._service()
        with _employee(3):
            shifts = asyncio.run(service.fetch_filtered_shifts(ShiftFilter()))

        assert [s.planned_shift_id for s in shifts] == [2]
        assert shifts[0].shift_type_name == "Night"
        assert shifts[0].assigned_staff_name == "Maria Lopez"

    def test_employee_cannot_view_others(self):
        service, _ = self._service()
        with _employee(3):
            with pytest.raises(BusinessRuleViolation):
                asyncio.run(service.fetch_filtered_shifts(ShiftFilter(staff_id=2)))

    def test_filter_ordering(self):
        service, _ = self._service()
        with _scheduler():
            shifts = asyncio.run(
                service.fetch_filtered_shifts(ShiftFilter(from_date=_day(0), to_date=_day(1)))
            )

        assert [s.planned_shift_id for s in shifts] == [1, 2, 3, 4]

    def test_filter_by_status(self):
        service, _ = self._service()
        with _scheduler():
            shifts = asyncio.run(
                service.fetch_filtered_shifts(ShiftFilter(shift_status_id=ShiftStatuses.VACANT))
            )

        assert {s.planned_shift_id for s in shifts} == {3, 5}

    def test_add_planned_shift_is_vacant(self):
        service, _ = self._service()
        with _scheduler():
            shift = asyncio.run(service.add_planned_shift(_day(6), ShiftTypes.NIGHT, 3, slot_number=2))

        assert shift.planned_shift_id == 8
        assert shift.shift_status_name == "Vacant"
        assert shift.assigned_staff_id is None
        assert shift.slot_number == 2

    def test_add_requires_scheduler(self):
        service, _ = self._service()
        with _employee(2):
            with pytest.raises(BusinessRuleViolation, match="not authorized"):
                asyncio.run(service.add_planned_shift(_day(6), ShiftTypes.NIGHT, 3))

    def test_assign_vacant_shift(self):
        service, _ = self._service()
        with _scheduler():
            shift = asyncio.run(service.assign_shift(3, 1))

        assert shift.assigned_staff_id == 1
        assert shift.shift_status_id == ShiftStatuses.SCHEDULED

    def test_assign_taken_shift(self):
        service, _ = self._service()
        with _scheduler():
            with pytest.raises(BusinessRuleViolation, match="another staff member"):
                asyncio.run(service.assign_shift(1, 3))
            with pytest.raises(BusinessRuleViolation, match="same staff member"):
                asyncio.run(service.assign_shift(1, 2))

    def test_assign_blocked_by_pending_leave(self):
        service, _ = self._service()
        with _scheduler():
            new_shift = asyncio.run(service.add_planned_shift(_day(3), ShiftTypes.NIGHT, 3))
            with pytest.raises(BusinessRuleViolation, match="has a leave"):
                asyncio.run(service.assign_shift(new_shift.planned_shift_id, 6))

    def test_assign_blocked_by_same_type_same_day(self):
        service, _ = self._service()
        with _scheduler():
            new_shift = asyncio.run(
                service.add_planned_shift(_day(0), ShiftTypes.MORNING, 2, slot_number=2)
            )
            with pytest.raises(BusinessRuleViolation, match="same time"):
                asyncio.run(service.assign_shift(new_shift.planned_shift_id, 2))

    def test_assign_missing_shift(self):
        service, _ = self._service()
        with _scheduler():
            with pytest.raises(BusinessRuleViolation, match="not found"):
                asyncio.run(service.assign_shift(99, 2))

    def test_unassign_marks_vacant(self):
        service, _ = self._service()
        with _scheduler():
            shift = asyncio.run(service.unassign_shift(1))

        assert shift.assigned_staff_id is None
        assert shift.shift_status_name == "Vacant"


# ============================================================================
# Swaps
# ============================================================================


class TestShiftSwapService:
    """Tests for ShiftSwapService."""

    def _service(self):
        store, lookup = _make_store()
        return ShiftSwapService(store.swap_requests, store.planned_shifts, lookup)

    def _submit(self, service, requester=2, target=3):
        return asyncio.run(
            service.submit_swap_request(
                requester, target, _day(0), ShiftTypes.MORNING, _day(0), ShiftTypes.NIGHT
            )
        )

    def test_submit_and_fetch(self):
        service = self._service()
        with _employee(2):
            view = self._submit(service)
            fetched = asyncio.run(service.fetch_swap_requests(ShiftSwapFilter(requester_staff_id=2)))

        assert view.status_name == "Pending"
        assert view.requesting_staff_name == "Daniel Okafor"
        assert view.target_department_name == "Emergency"
        assert [v.swap_request_id for v in fetched] == [view.swap_request_id]

    def test_duplicate_rejected(self):
        service = self._service()
        with _employee(2):
            self._submit(service)
            with pytest.raises(BusinessRuleViolation, match="already exists"):
                self._submit(service)

    def test_source_shift_must_be_held(self):
        service = self._service()
        with _scheduler():
            with pytest.raises(BusinessRuleViolation, match="Source shift"):
                self._submit(service, requester=4)

    def test_employee_cannot_file_for_others(self):
        service = self._service()
        with _employee(3):
            with pytest.raises(BusinessRuleViolation):
                self._submit(service)


# ============================================================================
# Lookups
# ============================================================================


class TestLookups:
    """Tests for DepartmentService and StaffService."""

    def test_department_partial_name(self):
        _, lookup = _make_store()
        department = DepartmentService(lookup).fetch_department_info("card")

        assert department.department_id == 2

    def test_department_not_found(self):
        _, lookup = _make_store()

        assert DepartmentService(lookup).fetch_department_info("radiology") is None

    def test_department_empty_name(self):
        _, lookup = _make_store()
        with pytest.raises(BusinessRuleViolation):
            DepartmentService(lookup).fetch_department_info("  ")

    def test_staff_by_name_skips_inactive(self):
        _, lookup = _make_store()
        service = StaffService(lookup)

        assert service.fetch_active_staff_by_name("victor") == []
        (maria,) = service.fetch_active_staff_by_name("lopez")
        assert maria.staff_id == 3
        assert maria.staff_department_name == "Emergency"


# ============================================================================
# Repositories and lookup cache
# ============================================================================


class TestRepositoryAndLookup:
    """Tests for InMemoryRepository and LookupCache."""

    def test_add_assigns_ids(self):
        store = empty_store()
        first = asyncio.run(store.departments.add(Department(department_id=0, department_name="A")))
        second = asyncio.run(store.departments.add(Department(department_id=0, department_name="B")))

        assert (first.department_id, second.department_id) == (1, 2)
        assert len(store.departments) == 2

    def test_update_missing_raises(self):
        store = empty_store()
        with pytest.raises(KeyError):
            asyncio.run(store.departments.update(Department(department_id=5, department_name="X")))

    def test_refresh_swaps_snapshot(self):
        """A refresh installs a new snapshot and leaves the old one untouched."""
        store, lookup = _make_store()
        before = lookup.snapshot
        asyncio.run(
            store.departments.add(Department(department_id=0, department_name="Radiology"))
        )

        asyncio.run(lookup.refresh(store))

        assert len(before.departments) == 4
        assert len(lookup.snapshot.departments) == 5
        assert lookup.snapshot is not before
