"""
Best-effort view over a tool call's JSON arguments.

``get_*`` accessors never raise: a missing or wrongly typed value comes back
as None. ``require_*`` accessors raise MissingArgumentError, which the
registry turns into a ``success: false`` envelope.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from scheduling_agent.shared.exceptions import MissingArgumentError

DATE_FORMAT = "%Y-%m-%d"


class ToolArguments:
    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values = dict(values or {})

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def raw(self) -> Dict[str, Any]:
        return dict(self._values)

    def get_str(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None

    def get_int(self, name: str) -> Optional[int]:
        value = self._values.get(name)
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return int(value.strip())
        return None

    def get_date(self, name: str) -> Optional[date]:
        value = self.get_str(name)
        if value is None:
            return None
        try:
            # Accept a full timestamp but keep only its date part
            return datetime.strptime(value[:10], DATE_FORMAT).date()
        except ValueError:
            return None

    def require_str(self, name: str) -> str:
        value = self.get_str(name)
        if value is None:
            raise MissingArgumentError(name, "a non-empty string")
        return value

    def require_int(self, name: str) -> int:
        value = self.get_int(name)
        if value is None:
            raise MissingArgumentError(name, "an integer")
        return value

    def require_positive_int(self, name: str) -> int:
        value = self.get_int(name)
        if value is None or value <= 0:
            raise MissingArgumentError(name, "a positive integer")
        return value

    def require_date(self, name: str) -> date:
        value = self.get_date(name)
        if value is None:
            raise MissingArgumentError(name, "a date in YYYY-MM-DD format")
        return value
