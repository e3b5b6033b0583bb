"""
Shift-adjacency fatigue rules.

Two rules apply when a staff member is considered for a shift type on a date:

- Same day: holding the same type, or any type adjacent to it, is a
  back-to-back risk. Adjacency is symmetric: Morning/Evening,
  Evening/Night and Night/Morning.
- Previous day: a Night shift on the day before rules out a Morning shift.
"""

from datetime import date, timedelta
from typing import FrozenSet, Iterable, Set, Tuple

from scheduling_agent.shared.schemas import PlannedShift, ShiftStatuses, ShiftTypes

ADJACENT_PAIRS: FrozenSet[Tuple[int, int]] = frozenset(
    {
        (ShiftTypes.MORNING, ShiftTypes.EVENING),
        (ShiftTypes.EVENING, ShiftTypes.MORNING),
        (ShiftTypes.EVENING, ShiftTypes.NIGHT),
        (ShiftTypes.NIGHT, ShiftTypes.EVENING),
        (ShiftTypes.NIGHT, ShiftTypes.MORNING),
        (ShiftTypes.MORNING, ShiftTypes.NIGHT),
    }
)


def is_adjacent(held_type: int, requested_type: int) -> bool:
    return (held_type, requested_type) in ADJACENT_PAIRS


def held_shift_types(shifts: Iterable[PlannedShift], staff_id: int, day: date) -> Set[int]:
    """Shift types ``staff_id`` holds on ``day``, ignoring cancelled shifts."""
    return {
        s.shift_type_id
        for s in shifts
        if s.assigned_staff_id == staff_id
        and s.shift_date == day
        and s.shift_status_id != ShiftStatuses.CANCELLED
    }


def has_fatigue_risk(
    shifts: Iterable[PlannedShift], staff_id: int, day: date, requested_type: int
) -> bool:
    """
    True when giving ``staff_id`` a ``requested_type`` shift on ``day`` would
    break a fatigue rule.
    """
    shifts = list(shifts)
    for held in held_shift_types(shifts, staff_id, day):
        if held == requested_type or is_adjacent(held, requested_type):
            return True

    if requested_type == ShiftTypes.MORNING:
        previous = held_shift_types(shifts, staff_id, day - timedelta(days=1))
        if ShiftTypes.NIGHT in previous:
            return True

    return False
