"""
Read-only lookup tables shared by every chat turn.

A LookupSnapshot is built once from the repositories and never mutated.
LookupCache holds the current snapshot; refresh() builds a new one and swaps
the single reference, so readers always see a complete, consistent set of
tables.
"""

import logging
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from scheduling_agent.data.store import DataStore
from scheduling_agent.shared.schemas import (
    Department,
    LeaveStatus,
    LeaveType,
    Role,
    ShiftStatus,
    ShiftType,
    Staff,
)

logger = logging.getLogger(__name__)


class LookupSnapshot(BaseModel):
    """Immutable copy of the reference tables, in repository order."""

    model_config = ConfigDict(frozen=True)

    staff: Tuple[Staff, ...] = ()
    departments: Tuple[Department, ...] = ()
    roles: Tuple[Role, ...] = ()
    shift_types: Tuple[ShiftType, ...] = ()
    shift_statuses: Tuple[ShiftStatus, ...] = ()
    leave_types: Tuple[LeaveType, ...] = ()
    leave_statuses: Tuple[LeaveStatus, ...] = ()

    @property
    def active_staff(self) -> Tuple[Staff, ...]:
        return tuple(s for s in self.staff if s.is_active)

    def staff_by_id(self, staff_id: Optional[int]) -> Optional[Staff]:
        return next((s for s in self.staff if s.staff_id == staff_id), None)

    def department_by_id(self, department_id: Optional[int]) -> Optional[Department]:
        return next(
            (d for d in self.departments if d.department_id == department_id), None
        )

    def role_by_id(self, role_id: Optional[int]) -> Optional[Role]:
        return next((r for r in self.roles if r.role_id == role_id), None)

    def role_by_name(self, name: Optional[str]) -> Optional[Role]:
        if not name:
            return None
        return next(
            (r for r in self.roles if r.role_name.lower() == name.lower()), None
        )

    def shift_type_by_id(self, shift_type_id: Optional[int]) -> Optional[ShiftType]:
        return next(
            (t for t in self.shift_types if t.shift_type_id == shift_type_id), None
        )

    def shift_type_by_name(self, name: str) -> Optional[ShiftType]:
        return next(
            (
                t
                for t in self.shift_types
                if t.shift_type_name.lower() == name.lower()
            ),
            None,
        )

    def shift_status_by_id(self, status_id: Optional[int]) -> Optional[ShiftStatus]:
        return next(
            (s for s in self.shift_statuses if s.shift_status_id == status_id), None
        )

    def shift_status_by_name(self, name: str) -> Optional[ShiftStatus]:
        return next(
            (
                s
                for s in self.shift_statuses
                if s.shift_status_name.lower() == name.lower()
            ),
            None,
        )

    def leave_type_by_id(self, leave_type_id: Optional[int]) -> Optional[LeaveType]:
        return next(
            (t for t in self.leave_types if t.leave_type_id == leave_type_id), None
        )

    def leave_type_by_name(self, name: str) -> Optional[LeaveType]:
        return next(
            (
                t
                for t in self.leave_types
                if t.leave_type_name.lower() == name.lower()
            ),
            None,
        )

    def leave_status_by_id(self, status_id: Optional[int]) -> Optional[LeaveStatus]:
        return next(
            (s for s in self.leave_statuses if s.leave_status_id == status_id), None
        )

    def leave_status_by_name(self, name: str) -> Optional[LeaveStatus]:
        return next(
            (
                s
                for s in self.leave_statuses
                if s.leave_status_name.lower() == name.lower()
            ),
            None,
        )

    def department_names(self) -> Dict[int, str]:
        return {d.department_id: d.department_name for d in self.departments}


async def load_snapshot(store: DataStore) -> LookupSnapshot:
    """Read every reference table from the repositories into a new snapshot."""
    return LookupSnapshot(
        staff=tuple(await store.staff.get_all()),
        departments=tuple(await store.departments.get_all()),
        roles=tuple(await store.roles.get_all()),
        shift_types=tuple(await store.shift_types.get_all()),
        shift_statuses=tuple(await store.shift_statuses.get_all()),
        leave_types=tuple(await store.leave_types.get_all()),
        leave_statuses=tuple(await store.leave_statuses.get_all()),
    )


class LookupCache:
    """Holder of the current LookupSnapshot."""

    def __init__(self, snapshot: Optional[LookupSnapshot] = None):
        self._snapshot = snapshot or LookupSnapshot()

    @property
    def snapshot(self) -> LookupSnapshot:
        return self._snapshot

    async def refresh(self, store: DataStore) -> LookupSnapshot:
        """
        Rebuild the snapshot from the repositories and swap it in.

        Args:
            store: Repositories to read the reference tables from

        Returns:
            The newly installed snapshot.
        """
        snapshot = await load_snapshot(store)
        self._snapshot = snapshot
        logger.info(
            f"Lookup cache refreshed: {len(snapshot.staff)} staff, "
            f"{len(snapshot.departments)} departments"
        )
        return snapshot
