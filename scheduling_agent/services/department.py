"""Department lookup by partial name."""

import logging
from typing import Optional

from scheduling_agent.data.lookup_cache import LookupCache
from scheduling_agent.services.schemas import DepartmentView
from scheduling_agent.shared.exceptions import BusinessRuleViolation

logger = logging.getLogger(__name__)


class DepartmentService:
    def __init__(self, lookup: LookupCache):
        self._lookup = lookup

    def fetch_department_info(self, name_part: str) -> Optional[DepartmentView]:
        """
        Find the first department whose name contains ``name_part``.

        Raises:
            BusinessRuleViolation: If the name is empty.
        """
        if not name_part or not name_part.strip():
            raise BusinessRuleViolation("❌ Department name cannot be null or empty.")

        needle = name_part.strip().lower()
        for department in self._lookup.snapshot.departments:
            if needle in department.department_name.lower():
                logger.info(
                    f"Department resolved: {department.department_id} - "
                    f"{department.department_name}"
                )
                return DepartmentView(**department.model_dump())

        logger.warning(f"No department found matching input '{name_part}'")
        return None
