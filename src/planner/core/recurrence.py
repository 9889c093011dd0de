"""Recurrence rules and the due-date evaluator - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .dates import InvalidDateError, day_of_week, format_iso_date, normalize, parse_iso_date

if TYPE_CHECKING:
    from .tasks import Task

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class InvalidRecurrenceError(ValueError):
    """Raised when a recurrence rule would be inconsistent."""

    pass


def _check_end_date(end_date: date | None) -> None:
    if end_date is not None and not isinstance(end_date, date):
        raise InvalidRecurrenceError(f"end_date must be a date, got {end_date!r}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Daily:
    """Due every day from the anchor date."""

    end_date: date | None = None

    def __post_init__(self):
        _check_end_date(self.end_date)


@dataclass(frozen=True)
class Weekly:
    """Due on a fixed set of weekdays (0=Sunday..6=Saturday)."""

    days_of_week: frozenset[int]
    end_date: date | None = None

    def __post_init__(self):
        try:
            days = frozenset(self.days_of_week)
        except TypeError as e:
            raise InvalidRecurrenceError(f"Weekdays must be a collection of integers: {e}") from e
        if not days:
            raise InvalidRecurrenceError("Weekly recurrence needs at least one weekday")
        for day in days:
            if not _is_int(day) or not 0 <= day <= 6:
                raise InvalidRecurrenceError(f"Weekday must be an integer 0-6, got {day!r}")
        object.__setattr__(self, "days_of_week", days)
        _check_end_date(self.end_date)


@dataclass(frozen=True)
class Monthly:
    """Due on one day number of every month. No clamping for short months."""

    day_of_month: int
    end_date: date | None = None

    def __post_init__(self):
        if not _is_int(self.day_of_month) or not 1 <= self.day_of_month <= 31:
            raise InvalidRecurrenceError(
                f"Day of month must be an integer 1-31, got {self.day_of_month!r}"
            )
        _check_end_date(self.end_date)


@dataclass(frozen=True)
class MalformedRecurrence:
    """
    A stored recurrence payload that fits none of the rule shapes.

    Never due. Keeps the raw payload so saving the task list loses nothing.
    """

    raw: Any = field(default=None)
    reason: str = ""


Recurrence = Daily | Weekly | Monthly


def recurrence_from_dict(data: Any) -> Recurrence:
    """
    Build a rule from a stored record: {type, daysOfWeek?, dayOfMonth?, endDate?}.

    Raises InvalidRecurrenceError if the record is inconsistent.
    """
    if not isinstance(data, dict):
        raise InvalidRecurrenceError(f"Recurrence must be an object, got {data!r}")

    end_date = None
    if data.get("endDate"):
        try:
            end_date = parse_iso_date(data["endDate"])
        except InvalidDateError as e:
            raise InvalidRecurrenceError(f"Bad recurrence end date: {e}") from e

    match data.get("type"):
        case "daily":
            return Daily(end_date=end_date)
        case "weekly":
            days = data.get("daysOfWeek")
            if not isinstance(days, (list, tuple, set, frozenset)):
                raise InvalidRecurrenceError("Weekly recurrence is missing daysOfWeek")
            return Weekly(days, end_date=end_date)
        case "monthly":
            if data.get("dayOfMonth") is None:
                raise InvalidRecurrenceError("Monthly recurrence is missing dayOfMonth")
            return Monthly(data["dayOfMonth"], end_date=end_date)
        case other:
            raise InvalidRecurrenceError(f"Unknown recurrence type: {other!r}")


def recurrence_to_dict(rule: Recurrence | MalformedRecurrence) -> Any:
    """Serialize a rule back to its stored record shape."""
    if isinstance(rule, MalformedRecurrence):
        return rule.raw

    match rule:
        case Daily():
            data: dict[str, Any] = {"type": "daily"}
        case Weekly(days_of_week=days):
            data = {"type": "weekly", "daysOfWeek": sorted(days)}
        case Monthly(day_of_month=day):
            data = {"type": "monthly", "dayOfMonth": day}

    if rule.end_date:
        data["endDate"] = format_iso_date(rule.end_date)
    return data


def with_end_date(rule: Recurrence, end_date: date | None) -> Recurrence:
    """Copy of a rule with a different inclusive end date."""
    return replace(rule, end_date=end_date)


def describe(rule: Recurrence | MalformedRecurrence) -> str:
    """Short human label for a rule."""
    match rule:
        case Daily():
            label = "Daily"
        case Weekly(days_of_week=days):
            label = f"Weekly ({', '.join(WEEKDAY_NAMES[d] for d in sorted(days))})"
        case Monthly(day_of_month=day):
            label = f"Monthly (day {day})"
        case _:
            return "Invalid recurrence"

    if rule.end_date:
        label += f" until {format_iso_date(rule.end_date)}"
    return label


def occurs_on(rule: Recurrence | MalformedRecurrence, anchor: date, target: date) -> bool:
    """Whether a rule anchored on `anchor` has an occurrence on `target`."""
    if isinstance(rule, MalformedRecurrence):
        return False

    # Never before the anchor, even when the weekday or day number matches
    if target < anchor:
        return False
    if rule.end_date and target > rule.end_date:
        return False

    match rule:
        case Daily():
            return True
        case Weekly(days_of_week=days):
            return day_of_week(target) in days
        case Monthly(day_of_month=day):
            return target.day == day
        case _:
            return False


def is_due(task: "Task", target: date | datetime | str) -> bool:
    """
    Whether a task has an occurrence on the target day.

    Pure and total: a missing anchor date, an unparseable target string or a
    malformed recurrence all mean "not due".
    """
    if isinstance(target, str):
        try:
            target = parse_iso_date(target)
        except InvalidDateError:
            return False
    if not isinstance(target, date) or not isinstance(task.date, date):
        return False

    target_day = normalize(target)
    anchor = normalize(task.date)

    if task.recurrence is None:
        return anchor == target_day
    return occurs_on(task.recurrence, anchor, target_day)
