"""Pure calendar arithmetic - no I/O dependencies.

Dates are always local wall-clock calendar days. Nothing here goes through a
timestamp or a timezone, so a `YYYY-MM-DD` string can never shift by a day.
"""

import calendar
import re
from datetime import date, datetime, timedelta

ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class InvalidDateError(ValueError):
    """Raised when a date string is not a real YYYY-MM-DD calendar date."""

    pass


def normalize(value: date | datetime) -> date:
    """Drop the time of day, keeping the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_iso_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD string into a date.

    The year, month and day components are read directly from the string.
    Raises InvalidDateError for anything else, including impossible dates
    like 2024-02-30.
    """
    if not isinstance(value, str):
        raise InvalidDateError(f"Expected a YYYY-MM-DD string, got {value!r}")
    match = ISO_DATE_RE.match(value.strip())
    if not match:
        raise InvalidDateError(f"Not a YYYY-MM-DD date: {value!r}")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"Not a calendar date: {value!r} ({e})") from e


def format_iso_date(value: date | datetime) -> str:
    return normalize(value).strftime("%Y-%m-%d")


def day_of_week(value: date | datetime) -> int:
    """Day of week with Sunday=0 through Saturday=6."""
    return (normalize(value).weekday() + 1) % 7


def day_of_month(value: date | datetime) -> int:
    return normalize(value).day


def is_same_day(a: date | datetime, b: date | datetime) -> bool:
    return normalize(a) == normalize(b)


def add_days(value: date | datetime, days: int) -> date:
    return normalize(value) + timedelta(days=days)


def start_of_week(value: date | datetime, week_starts_on: int = 0) -> date:
    """First day of the week containing `value` (0=Sunday start)."""
    d = normalize(value)
    offset = (day_of_week(d) - week_starts_on) % 7
    return d - timedelta(days=offset)


def end_of_week(value: date | datetime, week_starts_on: int = 0) -> date:
    """Last day of the week containing `value`."""
    return start_of_week(value, week_starts_on) + timedelta(days=6)


def start_of_month(value: date | datetime) -> date:
    return normalize(value).replace(day=1)


def end_of_month(value: date | datetime) -> date:
    d = normalize(value)
    _, last_day = calendar.monthrange(d.year, d.month)
    return d.replace(day=last_day)


def days_between(start: date | datetime, end: date | datetime) -> list[date]:
    """Every day from start to end inclusive, ascending. Empty if end < start."""
    first, last = normalize(start), normalize(end)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def month_grid(year: int, month: int) -> list[date | None]:
    """
    Calendar grid cells for a month, Sunday-first, 7 columns.

    Leading cells before the 1st are None (one per weekday before it),
    followed by one date per day of the month.
    """
    first = date(year, month, 1)
    _, last_day = calendar.monthrange(year, month)
    cells: list[date | None] = [None] * day_of_week(first)
    cells.extend(date(year, month, day) for day in range(1, last_day + 1))
    return cells


def last_n_days(anchor: date | datetime, n: int, ascending: bool = True) -> list[date]:
    """The n calendar days ending at anchor (inclusive)."""
    end = normalize(anchor)
    days = [end - timedelta(days=i) for i in range(max(n, 0))]
    if ascending:
        days.reverse()
    return days
