"""Staff lookups."""

from typing import List

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.services.schemas import StaffView

MAX_NAME_MATCHES = 10


class StaffService:
    def __init__(self, lookup: LookupCache):
        self._lookup = lookup

    def fetch_active_staff_by_name(self, name_part: str) -> List[StaffView]:
        """Active staff whose name contains ``name_part``, sorted by name."""
        if not name_part or not name_part.strip():
            return []

        snapshot = self._lookup.snapshot
        needle = name_part.strip().lower()
        matches = sorted(
            (s for s in snapshot.active_staff if needle in s.staff_name.lower()),
            key=lambda s: s.staff_name,
        )

        views = []
        for staff in matches[:MAX_NAME_MATCHES]:
            role = snapshot.role_by_id(staff.role_id)
            department = snapshot.department_by_id(staff.staff_department_id)
            views.append(
                StaffView(
                    staff_id=staff.staff_id,
                    staff_name=staff.staff_name,
                    role_id=staff.role_id,
                    role_name=role.role_name if role else "",
                    staff_department_id=staff.staff_department_id,
                    staff_department_name=department.department_name
                    if department
                    else "",
                )
            )
        return views
