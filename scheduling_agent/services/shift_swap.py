"""Shift swap requests between two staff members."""

import logging
from datetime import date, datetime
from typing import List, Optional

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.repository import Repository
from scheduling_agent.services.schemas import ShiftSwapFilter, ShiftSwapView
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.exceptions import BusinessRuleViolation
from scheduling_agent.shared.schemas import (
    PlannedShift,
    ShiftSwapRequest,
    ShiftSwapStatuses,
)

logger = logging.getLogger(__name__)


def _find_held_shift(
    shifts: List[PlannedShift], staff_id: int, shift_date: date, shift_type_id: int
) -> Optional[PlannedShift]:
    return next(
        (
            s
            for s in shifts
            if s.assigned_staff_id == staff_id
            and s.shift_date == shift_date
            and s.shift_type_id == shift_type_id
        ),
        None,
    )


class ShiftSwapService:
    def __init__(
        self,
        swap_repo: Repository[ShiftSwapRequest],
        shift_repo: Repository[PlannedShift],
        lookup: LookupCache,
    ):
        self._swap_repo = swap_repo
        self._shift_repo = shift_repo
        self._lookup = lookup

    async def submit_swap_request(
        self,
        requesting_staff_id: int,
        target_staff_id: int,
        source_shift_date: date,
        source_shift_type_id: int,
        target_shift_date: date,
        target_shift_type_id: int,
    ) -> ShiftSwapView:
        """
        Record a pending swap of two assigned shifts.

        Raises:
            BusinessRuleViolation: If either shift is not held by the named staff
                member, an employee files on someone else's behalf, or an
                equivalent request is already pending or approved.
        """
        user = current_user()
        if user.is_employee and requesting_staff_id != user.staff_id:
            raise BusinessRuleViolation(
                "🚫 You can only request swaps for your own shifts."
            )

        shifts = await self._shift_repo.get_all()
        if _find_held_shift(shifts, requesting_staff_id, source_shift_date, source_shift_type_id) is None:
            raise BusinessRuleViolation(
                "Source shift does not exist for the requesting staff."
            )
        if _find_held_shift(shifts, target_staff_id, target_shift_date, target_shift_type_id) is None:
            raise BusinessRuleViolation("Target shift does not exist for the selected staff.")

        for existing in await self._swap_repo.get_all():
            if (
                existing.requesting_staff_id == requesting_staff_id
                and existing.target_staff_id == target_staff_id
                and existing.source_shift_date == source_shift_date
                and existing.source_shift_type_id == source_shift_type_id
                and existing.target_shift_date == target_shift_date
                and existing.target_shift_type_id == target_shift_type_id
                and existing.status_id != ShiftSwapStatuses.REJECTED
            ):
                raise BusinessRuleViolation(
                    "A similar shift swap request already exists and is pending or approved."
                )

        stored = await self._swap_repo.add(
            ShiftSwapRequest(
                requesting_staff_id=requesting_staff_id,
                target_staff_id=target_staff_id,
                source_shift_date=source_shift_date,
                source_shift_type_id=source_shift_type_id,
                target_shift_date=target_shift_date,
                target_shift_type_id=target_shift_type_id,
                status_id=ShiftSwapStatuses.PENDING,
                requested_at=datetime.now(),
            )
        )
        await self._swap_repo.save()
        logger.info(
            f"Shift swap {stored.swap_request_id} requested by staff {requesting_staff_id}"
        )
        return self._to_view(stored, shifts)

    async def fetch_swap_requests(self, swap_filter: ShiftSwapFilter) -> List[ShiftSwapView]:
        f = swap_filter
        requests = [
            r
            for r in await self._swap_repo.get_all()
            if (f.status_id is None or r.status_id == f.status_id)
            and (f.requester_staff_id is None or r.requesting_staff_id == f.requester_staff_id)
            and (f.target_staff_id is None or r.target_staff_id == f.target_staff_id)
            and (
                f.requester_shift_type_id is None
                or r.source_shift_type_id == f.requester_shift_type_id
            )
            and (f.target_shift_type_id is None or r.target_shift_type_id == f.target_shift_type_id)
            and (f.from_date is None or r.source_shift_date >= f.from_date)
            and (f.to_date is None or r.target_shift_date <= f.to_date)
        ]
        shifts = await self._shift_repo.get_all()
        return [self._to_view(r, shifts) for r in requests]

    def _to_view(self, request: ShiftSwapRequest, shifts: List[PlannedShift]) -> ShiftSwapView:
        snapshot = self._lookup.snapshot
        requester = snapshot.staff_by_id(request.requesting_staff_id)
        target = snapshot.staff_by_id(request.target_staff_id)
        source_type = snapshot.shift_type_by_id(request.source_shift_type_id)
        target_type = snapshot.shift_type_by_id(request.target_shift_type_id)

        source_shift = _find_held_shift(
            shifts, request.requesting_staff_id, request.source_shift_date, request.source_shift_type_id
        )
        target_shift = _find_held_shift(
            shifts, request.target_staff_id, request.target_shift_date, request.target_shift_type_id
        )
        source_department = snapshot.department_by_id(
            source_shift.department_id if source_shift else None
        )
        target_department = snapshot.department_by_id(
            target_shift.department_id if target_shift else None
        )

        return ShiftSwapView(
            swap_request_id=request.swap_request_id,
            requesting_staff_id=request.requesting_staff_id,
            requesting_staff_name=requester.staff_name if requester else "Unknown",
            target_staff_id=request.target_staff_id,
            target_staff_name=target.staff_name if target else "Unknown",
            source_shift_date=request.source_shift_date,
            source_shift_type_id=request.source_shift_type_id,
            source_shift_type_name=source_type.shift_type_name if source_type else "N/A",
            source_department_id=source_department.department_id if source_department else 0,
            source_department_name=source_department.department_name
            if source_department
            else "N/A",
            target_shift_date=request.target_shift_date,
            target_shift_type_id=request.target_shift_type_id,
            target_shift_type_name=target_type.shift_type_name if target_type else "N/A",
            target_department_id=target_department.department_id if target_department else 0,
            target_department_name=target_department.department_name
            if target_department
            else "N/A",
            status_id=request.status_id,
            status_name=ShiftSwapStatuses(request.status_id).name.title(),
            requested_at=request.requested_at,
            responded_at=request.responded_at,
            response_note=request.response_note,
        )
