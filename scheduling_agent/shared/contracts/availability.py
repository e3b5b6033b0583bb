"""
Availability search contracts.

AvailabilityFilter is the query, AvailabilityResult the per-date answer.
A result always has one entry per calendar date in the filter range, in
ascending order, even when nobody is available on that date.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AvailabilityFilter(BaseModel):
    """Query for staff availability over an inclusive date range."""

    start_date: date = Field(description="First date of the window (inclusive)")
    end_date: date = Field(description="Last date of the window (inclusive)")
    shift_type_id: Optional[int] = Field(
        default=None, description="Shift type the staff would work"
    )
    department_id: Optional[int] = Field(
        default=None, description="Restrict to staff of this department"
    )
    apply_fatigue_check: bool = Field(
        default=True,
        description="Reject staff with back-to-back shift risk for the requested type",
    )

    @model_validator(mode="after")
    def _check_range(self) -> "AvailabilityFilter":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1


class AvailableStaff(BaseModel):
    """One eligible staff member on one date."""

    model_config = ConfigDict(frozen=True)

    staff_id: int
    staff_name: str
    role_id: int
    role_name: str = ""
    department_id: int
    department_name: str = ""


class DayAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    available_staff: Tuple[AvailableStaff, ...] = ()


class AvailabilityResult(BaseModel):
    """Date-ordered availability for every date of the searched range."""

    model_config = ConfigDict(frozen=True)

    days: Tuple[DayAvailability, ...] = ()
    fatigue_check_applied: bool = True

    @property
    def all_empty(self) -> bool:
        return all(len(day.available_staff) == 0 for day in self.days)

    def for_date(self, day: date) -> List[AvailableStaff]:
        for entry in self.days:
            if entry.date == day:
                return list(entry.available_staff)
        return []

    def non_empty_by_date(self) -> Dict[str, List[dict]]:
        """Map ISO date to staff dicts, skipping dates with nobody available."""
        return {
            entry.date.isoformat(): [s.model_dump() for s in entry.available_staff]
            for entry in self.days
            if entry.available_staff
        }
