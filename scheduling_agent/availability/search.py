"""
Constraint-based availability search.

For every date of the requested range the active staff snapshot is
filtered, in order, by department, manual unavailability, approved leave
and (optionally) the fatigue rules. Dates where nobody qualifies are kept
with an empty list.
"""

import logging
from datetime import timedelta
from typing import List

from scheduling_agent.availability.fatigue import has_fatigue_risk
from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.repository import Repository
from scheduling_agent.shared.contracts import (
    AvailabilityFilter,
    AvailabilityResult,
    AvailableStaff,
    DayAvailability,
)
from scheduling_agent.shared.schemas import (
    LeaveRequest,
    LeaveRequestStatuses,
    PlannedShift,
    StaffAvailability,
)

logger = logging.getLogger(__name__)


class AvailabilitySearch:
    """Answers "who can work" questions over a date range."""

    def __init__(
        self,
        lookup: LookupCache,
        shift_repo: Repository[PlannedShift],
        leave_repo: Repository[LeaveRequest],
        availability_repo: Repository[StaffAvailability],
    ):
        self._lookup = lookup
        self._shift_repo = shift_repo
        self._leave_repo = leave_repo
        self._availability_repo = availability_repo

    async def search(self, availability_filter: AvailabilityFilter) -> AvailabilityResult:
        """
        Compute eligible staff for each date in the filter's range.

        Args:
            availability_filter: Date range plus optional shift type and department

        Returns:
            AvailabilityResult with exactly one entry per date, ascending.
        """
        f = availability_filter
        snapshot = self._lookup.snapshot
        department_names = snapshot.department_names()

        shifts = await self._shift_repo.get_all()
        approved_leave = [
            leave
            for leave in await self._leave_repo.get_all()
            if leave.leave_status_id == LeaveRequestStatuses.APPROVED
        ]
        unavailable = {
            (mark.staff_id, mark.available_date)
            for mark in await self._availability_repo.get_all()
            if not mark.is_available
        }
        check_fatigue = f.apply_fatigue_check and f.shift_type_id is not None

        days: List[DayAvailability] = []
        for offset in range(f.day_count):
            day = f.start_date + timedelta(days=offset)
            eligible = []
            for staff in snapshot.active_staff:
                if f.department_id is not None and staff.staff_department_id != f.department_id:
                    continue
                if (staff.staff_id, day) in unavailable:
                    continue
                if any(
                    leave.staff_id == staff.staff_id and leave.covers(day)
                    for leave in approved_leave
                ):
                    continue
                if check_fatigue and has_fatigue_risk(
                    shifts, staff.staff_id, day, f.shift_type_id
                ):
                    continue

                role = snapshot.role_by_id(staff.role_id)
                eligible.append(
                    AvailableStaff(
                        staff_id=staff.staff_id,
                        staff_name=staff.staff_name,
                        role_id=staff.role_id,
                        role_name=role.role_name if role else "",
                        department_id=staff.staff_department_id,
                        department_name=department_names.get(staff.staff_department_id, ""),
                    )
                )
            days.append(DayAvailability(date=day, available_staff=tuple(eligible)))

        logger.info(
            f"Availability search {f.start_date} to {f.end_date}: "
            f"{sum(len(d.available_staff) for d in days)} staff-days eligible "
            f"(fatigue check {'on' if check_fatigue else 'off'})"
        )
        return AvailabilityResult(days=tuple(days), fatigue_check_applied=f.apply_fatigue_check)
