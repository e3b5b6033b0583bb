"""
Planned shift rules: filtering with employee visibility, creation,
assignment and unassignment.
"""

import logging
from datetime import date
from typing import List

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.repository import Repository
from scheduling_agent.services.schemas import PlannedShiftDetail, ShiftFilter
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.exceptions import BusinessRuleViolation
from scheduling_agent.shared.schemas import (
    LeaveRequest,
    LeaveRequestStatuses,
    PlannedShift,
    ShiftStatuses,
)

logger = logging.getLogger(__name__)

NOT_AUTHORIZED = "🚫 Oops! You're not authorized to perform this action."


def require_scheduler() -> None:
    if not current_user().is_scheduler:
        raise BusinessRuleViolation(NOT_AUTHORIZED)


class PlannedShiftService:
    def __init__(
        self,
        shift_repo: Repository[PlannedShift],
        leave_repo: Repository[LeaveRequest],
        lookup: LookupCache,
    ):
        self._shift_repo = shift_repo
        self._leave_repo = leave_repo
        self._lookup = lookup

    async def fetch_filtered_shifts(self, shift_filter: ShiftFilter) -> List[PlannedShiftDetail]:
        """
        Fetch shifts matching the filter, ordered by date, type and slot.

        Employees only ever see their own shifts.

        Raises:
            BusinessRuleViolation: If an employee asks for another staff member's shifts.
        """
        user = current_user()
        if user.is_employee:
            if shift_filter.staff_id is not None and shift_filter.staff_id != user.staff_id:
                raise BusinessRuleViolation(
                    "🚫 You're only allowed to view your own shift schedule."
                )
            shift_filter = shift_filter.model_copy(update={"staff_id": user.staff_id})

        f = shift_filter
        shifts = [
            s
            for s in await self._shift_repo.get_all()
            if (f.planned_shift_id is None or s.planned_shift_id == f.planned_shift_id)
            and (f.slot_number is None or s.slot_number == f.slot_number)
            and (f.from_date is None or s.shift_date >= f.from_date)
            and (f.to_date is None or s.shift_date <= f.to_date)
            and (f.department_id is None or s.department_id == f.department_id)
            and (f.shift_type_id is None or s.shift_type_id == f.shift_type_id)
            and (f.shift_status_id is None or s.shift_status_id == f.shift_status_id)
            and (f.staff_id is None or s.assigned_staff_id == f.staff_id)
        ]
        shifts.sort(key=lambda s: (s.shift_date, s.shift_type_id, s.slot_number))
        return [self.to_detail(s) for s in shifts]

    async def add_planned_shift(
        self, shift_date: date, shift_type_id: int, department_id: int, slot_number: int = 1
    ) -> PlannedShiftDetail:
        """Create a new vacant, unassigned shift. Scheduler only."""
        require_scheduler()
        snapshot = self._lookup.snapshot
        if snapshot.department_by_id(department_id) is None:
            raise BusinessRuleViolation(f"Invalid DepartmentId: {department_id}")
        if snapshot.shift_type_by_id(shift_type_id) is None:
            raise BusinessRuleViolation(f"Invalid ShiftTypeId: {shift_type_id}")

        stored = await self._shift_repo.add(
            PlannedShift(
                shift_date=shift_date,
                shift_type_id=shift_type_id,
                department_id=department_id,
                slot_number=slot_number,
                shift_status_id=ShiftStatuses.VACANT,
                assigned_staff_id=None,
            )
        )
        await self._shift_repo.save()
        logger.info(f"Planned shift {stored.planned_shift_id} added for {shift_date}")
        return self.to_detail(stored)

    async def assign_shift(self, planned_shift_id: int, staff_id: int) -> PlannedShiftDetail:
        """
        Assign ``staff_id`` to a vacant shift. Scheduler only.

        Raises:
            BusinessRuleViolation: If the shift does not exist or is taken, the
                staff member has pending or approved leave that day, or already
                holds a shift of the same type that day.
        """
        require_scheduler()
        shift = await self._shift_repo.get_by_id(planned_shift_id)
        if shift is None:
            raise BusinessRuleViolation("❌ Shift information not found.")
        if self._lookup.snapshot.staff_by_id(staff_id) is None:
            raise BusinessRuleViolation(f"❌ Staff ID {staff_id} does not exist.")

        if shift.assigned_staff_id == staff_id:
            raise BusinessRuleViolation(
                "❌ The same staff member is already assigned to this shift."
            )
        if shift.assigned_staff_id is not None:
            raise BusinessRuleViolation(
                f"❌ Shift is already assigned to another staff member "
                f"(ID {shift.assigned_staff_id})."
            )

        for leave in await self._leave_repo.get_all():
            if (
                leave.staff_id == staff_id
                and leave.covers(shift.shift_date)
                and leave.leave_status_id
                in (LeaveRequestStatuses.PENDING, LeaveRequestStatuses.APPROVED)
            ):
                raise BusinessRuleViolation(
                    f"❌ Staff ID {staff_id} has a leave (pending/approved) on "
                    f"{shift.shift_date.isoformat()}."
                )

        for other in await self._shift_repo.get_all():
            if (
                other.planned_shift_id != planned_shift_id
                and other.assigned_staff_id == staff_id
                and other.shift_date == shift.shift_date
                and other.shift_type_id == shift.shift_type_id
                and other.shift_status_id != ShiftStatuses.CANCELLED
            ):
                raise BusinessRuleViolation(
                    f"❌ Staff ID {staff_id} is already assigned to another shift at the same time."
                )

        updated = await self._shift_repo.update(
            shift.model_copy(
                update={
                    "assigned_staff_id": staff_id,
                    "shift_status_id": int(ShiftStatuses.SCHEDULED),
                }
            )
        )
        await self._shift_repo.save()
        logger.info(f"Planned shift {planned_shift_id} assigned to staff {staff_id}")
        return self.to_detail(updated)

    async def unassign_shift(self, planned_shift_id: int) -> PlannedShiftDetail:
        """Remove the assignee and mark the shift vacant. Scheduler only."""
        require_scheduler()
        shift = await self._shift_repo.get_by_id(planned_shift_id)
        if shift is None:
            raise BusinessRuleViolation(
                f"Planned shift with ID {planned_shift_id} not found."
            )

        updated = await self._shift_repo.update(
            shift.model_copy(
                update={
                    "assigned_staff_id": None,
                    "shift_status_id": int(ShiftStatuses.VACANT),
                }
            )
        )
        await self._shift_repo.save()
        logger.info(f"Planned shift {planned_shift_id} unassigned")
        return self.to_detail(updated)

    def to_detail(self, shift: PlannedShift) -> PlannedShiftDetail:
        snapshot = self._lookup.snapshot
        shift_type = snapshot.shift_type_by_id(shift.shift_type_id)
        department = snapshot.department_by_id(shift.department_id)
        status = snapshot.shift_status_by_id(shift.shift_status_id)
        staff = snapshot.staff_by_id(shift.assigned_staff_id)
        staff_department = (
            snapshot.department_by_id(staff.staff_department_id) if staff else None
        )
        return PlannedShiftDetail(
            planned_shift_id=shift.planned_shift_id,
            shift_date=shift.shift_date,
            slot_number=shift.slot_number,
            shift_type_id=shift.shift_type_id,
            shift_type_name=shift_type.shift_type_name if shift_type else "",
            department_id=shift.department_id,
            department_name=department.department_name if department else "",
            shift_status_id=shift.shift_status_id,
            shift_status_name=status.shift_status_name if status else "",
            assigned_staff_id=shift.assigned_staff_id,
            assigned_staff_name=staff.staff_name if staff else "",
            assigned_staff_department_name=staff_department.department_name
            if staff_department
            else "",
        )
