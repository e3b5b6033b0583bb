"""
Date phrase helpers.

resolve_relative_date handles fixed phrases relative to today ("tomorrow",
"next week", "next monday"). parse_natural_dates handles already delimited
dates such as "14th Aug to 18 Aug 2025" or "2025-08-14".
"""

import calendar
import logging
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

WEEKDAYS = [name.lower() for name in calendar.day_name]

_ORDINAL = re.compile(r"\b(\d{1,2})(st|nd|rd|th)\b", re.IGNORECASE)
_COMMA_YEAR = re.compile(r",\s*(\d{4})\b")
_RANGE_SPLIT = re.compile(r"\s+(?:to|and|-)\s+|\s*,\s*", re.IGNORECASE)

FORMATS_WITH_YEAR = (
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%d",
)

FORMATS_WITHOUT_YEAR = (
    "%d %b",
    "%d %B",
    "%b %d",
    "%B %d",
)


def _add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def next_weekday(start: date, weekday: int) -> date:
    """Next date falling on ``weekday`` (Monday=0), strictly after ``start``."""
    days_ahead = (weekday - start.weekday()) % 7
    return start + timedelta(days=days_ahead or 7)


def last_weekday_before(start: date, weekday: int) -> date:
    """Most recent date falling on ``weekday``, strictly before ``start``."""
    days_back = (start.weekday() - weekday) % 7
    return start - timedelta(days=days_back or 7)


def resolve_relative_date(phrase: str, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Resolve a relative phrase to an inclusive (start, end) range.

    Single-day phrases return the same date twice. Unrecognized phrases
    resolve to today.
    """
    today = today or date.today()
    text = " ".join(phrase.lower().split())

    single_days = {
        "today": 0,
        "tomorrow": 1,
        "yesterday": -1,
        "day after tomorrow": 2,
        "day before yesterday": -2,
    }
    if text in single_days:
        day = today + timedelta(days=single_days[text])
        return day, day

    if text == "this week":
        return today, today + timedelta(days=6)
    if text == "next week":
        return today + timedelta(days=7), today + timedelta(days=13)
    if text in ("last week", "previous week"):
        return today - timedelta(days=7), today - timedelta(days=1)
    if text == "next month":
        day = _add_months(today, 1)
        return day, day
    if text in ("last month", "previous month"):
        day = _add_months(today, -1)
        return day, day
    if text == "this weekend":
        saturday = next_weekday(today, calendar.SATURDAY)
        return saturday, saturday + timedelta(days=1)
    if text == "last weekend":
        saturday = last_weekday_before(today, calendar.SATURDAY)
        return saturday, saturday + timedelta(days=1)

    if text.startswith("next "):
        day_name = text[len("next "):].strip()
        if day_name in WEEKDAYS:
            day = next_weekday(today, WEEKDAYS.index(day_name))
            return day, day

    logger.warning(f"Unrecognized relative date phrase '{phrase}', defaulting to today")
    return today, today


def _parse_with_year(candidate: str) -> Optional[date]:
    for fmt in FORMATS_WITH_YEAR:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    return None


def _parse_month_day(candidate: str) -> Optional[date]:
    # Parsed against a leap year so 29 Feb is accepted
    for fmt in FORMATS_WITHOUT_YEAR:
        try:
            return datetime.strptime(f"{candidate} 2000", f"{fmt} %Y").date()
        except ValueError:
            continue
    return None


def _roll_forward(month_day: date, today: date) -> Optional[date]:
    for year in (today.year, today.year + 1, today.year + 4):
        try:
            resolved = month_day.replace(year=year)
        except ValueError:
            continue
        if resolved >= today:
            return resolved
    return None


def _borrow_year(month_day: date, anchor: date, anchor_follows: bool) -> Optional[date]:
    """Place ``month_day`` in the year of an explicit date in the same phrase."""
    year = anchor.year
    if anchor_follows and (month_day.month, month_day.day) > (anchor.month, anchor.day):
        year -= 1
    elif not anchor_follows and (month_day.month, month_day.day) < (anchor.month, anchor.day):
        year += 1
    try:
        return month_day.replace(year=year)
    except ValueError:
        return None


def parse_natural_dates(text: str, today: Optional[date] = None) -> List[date]:
    """
    Parse every date found in a delimited phrase, in ascending order.

    Ordinal suffixes are stripped ("14th" -> "14") and the phrase is split
    on "to", "and", " - " and commas. A date without a year takes the year
    of the nearest explicit date in the same phrase, preferring the one after
    it ("14 Aug to 18 Aug 2025" is one range in 2025; "28 Dec to 3 Jan 2026"
    starts in 2025). When the phrase has no explicit year at all, the date
    takes the current year, or the next one when it has already passed.

    Returns:
        Sorted list of parsed dates (empty when nothing could be parsed).
    """
    today = today or date.today()
    cleaned = _ORDINAL.sub(r"\1", text.strip())
    cleaned = _COMMA_YEAR.sub(r" \1", cleaned)

    # (explicit date, month-day) per part; exactly one is set
    parsed_parts = []
    for part in _RANGE_SPLIT.split(cleaned):
        candidate = " ".join(part.split())
        if not candidate:
            continue
        explicit = _parse_with_year(candidate)
        if explicit is not None:
            parsed_parts.append((explicit, None))
            continue
        month_day = _parse_month_day(candidate)
        if month_day is not None:
            parsed_parts.append((None, month_day))

    dates = []
    for index, (explicit, month_day) in enumerate(parsed_parts):
        if explicit is not None:
            dates.append(explicit)
            continue

        following = next((e for e, _ in parsed_parts[index + 1:] if e is not None), None)
        preceding = next((e for e, _ in reversed(parsed_parts[:index]) if e is not None), None)
        if following is not None:
            resolved = _borrow_year(month_day, following, anchor_follows=True)
        elif preceding is not None:
            resolved = _borrow_year(month_day, preceding, anchor_follows=False)
        else:
            resolved = _roll_forward(month_day, today)

        if resolved is not None:
            dates.append(resolved)
    return sorted(dates)
