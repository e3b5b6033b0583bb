"""
Leave request rules.

Employees may only see, submit and cancel their own requests. Only a
scheduler may move a request out of Pending.
"""

import logging
from datetime import date
from typing import List, Optional

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.data.repository import Repository
from scheduling_agent.services.schemas import LeaveRequestDetails, LeaveRequestFilter
from scheduling_agent.services.user_context import current_user
from scheduling_agent.shared.exceptions import BusinessRuleViolation
from scheduling_agent.shared.schemas import LeaveRequest, LeaveRequestStatuses

logger = logging.getLogger(__name__)

# Statuses that block a second request for the same period
ACTIVE_STATUSES = (LeaveRequestStatuses.PENDING, LeaveRequestStatuses.APPROVED)


class LeaveRequestService:
    def __init__(self, leave_repo: Repository[LeaveRequest], lookup: LookupCache):
        self._leave_repo = leave_repo
        self._lookup = lookup

    async def fetch_leave_requests(
        self, leave_filter: LeaveRequestFilter
    ) -> List[LeaveRequestDetails]:
        """
        Fetch leave requests matching the filter, newest leave first.

        Employees are always restricted to their own requests.

        Raises:
            BusinessRuleViolation: If an employee asks for someone else's requests.
        """
        user = current_user()
        if user.is_employee:
            if leave_filter.staff_id is not None and leave_filter.staff_id != user.staff_id:
                raise BusinessRuleViolation(
                    "🚫 You're only allowed to view your own leave requests."
                )
            leave_filter = leave_filter.model_copy(update={"staff_id": user.staff_id})

        requests = await self._leave_repo.get_all()
        f = leave_filter
        matches = [
            r
            for r in requests
            if (f.leave_request_id is None or r.leave_request_id == f.leave_request_id)
            and (f.staff_id is None or r.staff_id == f.staff_id)
            and (f.leave_status_id is None or r.leave_status_id == f.leave_status_id)
            and (f.leave_type_id is None or r.leave_type_id == f.leave_type_id)
            and (f.start_date is None or r.leave_end >= f.start_date)
            and (f.end_date is None or r.leave_start <= f.end_date)
        ]
        matches.sort(key=lambda r: r.leave_start, reverse=True)
        return [self._to_details(r) for r in matches]

    async def find_active_request(
        self, staff_id: int, leave_start: date, leave_end: date
    ) -> Optional[LeaveRequest]:
        """Pending or approved request with exactly these dates, if any."""
        for request in await self._leave_repo.get_all():
            if (
                request.staff_id == staff_id
                and request.leave_start == leave_start
                and request.leave_end == leave_end
                and request.leave_status_id in ACTIVE_STATUSES
            ):
                return request
        return None

    async def submit_leave_request(
        self, staff_id: int, leave_start: date, leave_end: date, leave_type_id: int
    ) -> LeaveRequestDetails:
        """
        Submit a new Pending leave request.

        Raises:
            BusinessRuleViolation: On a request for someone else (employees),
                an inverted range or a duplicate request.
        """
        user = current_user()
        if user.is_employee and staff_id != user.staff_id:
            raise BusinessRuleViolation(
                "🚫 You can only submit leave requests for yourself. "
                "If you're trying to request leave for someone else, please contact a Scheduler."
            )
        if leave_end < leave_start:
            raise BusinessRuleViolation("❌ Leave end date must be on or after the start date.")
        if self._lookup.snapshot.leave_type_by_id(leave_type_id) is None:
            raise BusinessRuleViolation(f"❌ Unknown leave type id {leave_type_id}.")

        if await self.find_active_request(staff_id, leave_start, leave_end) is not None:
            raise BusinessRuleViolation(
                "Leave already exists for the same date for this employee."
            )

        stored = await self._leave_repo.add(
            LeaveRequest(
                staff_id=staff_id,
                leave_start=leave_start,
                leave_end=leave_end,
                leave_type_id=leave_type_id,
                leave_status_id=LeaveRequestStatuses.PENDING,
            )
        )
        await self._leave_repo.save()
        logger.info(
            f"Leave request {stored.leave_request_id} submitted for staff {staff_id} "
            f"({leave_start} to {leave_end})"
        )
        return self._to_details(stored)

    async def cancel_leave_request(
        self, staff_id: int, leave_start: date, leave_end: date
    ) -> LeaveRequestDetails:
        """
        Delete the active request for ``staff_id`` covering exactly these dates.

        Raises:
            BusinessRuleViolation: If no such request exists or an employee
                targets someone else's request.
        """
        user = current_user()
        if user.is_employee and staff_id != user.staff_id:
            raise BusinessRuleViolation("❌ You are not authorized to cancel this leave request.")

        existing = await self.find_active_request(staff_id, leave_start, leave_end)
        if existing is None:
            raise BusinessRuleViolation(
                "No existing leave request found for the given period."
            )

        await self._leave_repo.delete(existing.leave_request_id)
        await self._leave_repo.save()
        logger.info(f"Leave request {existing.leave_request_id} cancelled")
        return self._to_details(existing)

    async def update_status(
        self, leave_request_id: int, new_status: LeaveRequestStatuses
    ) -> LeaveRequestDetails:
        """
        Approve or reject a pending request. Scheduler only.

        Raises:
            BusinessRuleViolation: If the caller is not a scheduler, the request
                does not exist or it is no longer pending.
        """
        if not current_user().is_scheduler:
            raise BusinessRuleViolation("🚫 Oops! You're not authorized to perform this action.")

        request = await self._leave_repo.get_by_id(leave_request_id)
        if request is None:
            raise BusinessRuleViolation("Leave request not found.")
        if request.leave_status_id != LeaveRequestStatuses.PENDING:
            raise BusinessRuleViolation("Only pending leave requests can be updated.")
        if request.leave_status_id == new_status:
            raise BusinessRuleViolation(
                "The current status and the target status cannot be the same."
            )

        updated = await self._leave_repo.update(
            request.model_copy(update={"leave_status_id": int(new_status)})
        )
        await self._leave_repo.save()
        logger.info(f"Leave request {leave_request_id} set to {new_status.name}")
        return self._to_details(updated)

    def _to_details(self, request: LeaveRequest) -> LeaveRequestDetails:
        snapshot = self._lookup.snapshot
        staff = snapshot.staff_by_id(request.staff_id)
        department = snapshot.department_by_id(
            staff.staff_department_id if staff else None
        )
        status = snapshot.leave_status_by_id(request.leave_status_id)
        leave_type = snapshot.leave_type_by_id(request.leave_type_id)
        return LeaveRequestDetails(
            leave_request_id=request.leave_request_id,
            staff_id=request.staff_id,
            staff_name=staff.staff_name if staff else "",
            staff_department_id=department.department_id if department else None,
            staff_department_name=department.department_name if department else "",
            leave_start=request.leave_start,
            leave_end=request.leave_end,
            leave_status_id=request.leave_status_id,
            leave_status_name=status.leave_status_name if status else "",
            leave_type_id=request.leave_type_id,
            leave_type_name=leave_type.leave_type_name if leave_type else "",
        )
