"""Pure aggregation over task occurrences - no I/O dependencies.

Every view here is built by asking the recurrence evaluator about one
(task, day) pair at a time. Days are computed independently; task lists are
small enough that O(days x tasks) is fine.
"""

from dataclasses import dataclass
from datetime import date

from .dates import days_between, end_of_month, last_n_days, normalize, start_of_month
from .recurrence import is_due
from .tasks import Task

DEFAULT_PERIOD_DAYS = 30
DEFAULT_HISTORY_DAYS = 7


@dataclass(frozen=True)
class CompletionStats:
    """Completed vs. total occurrences."""

    completed: int
    total: int

    @property
    def percentage(self) -> float:
        """Completion rate 0-100. Zero when there is nothing due."""
        if self.total <= 0:
            return 0.0
        return self.completed / self.total * 100

    @property
    def rounded_percentage(self) -> int:
        return round(self.percentage)


@dataclass(frozen=True)
class Occurrence:
    """One due day of a task."""

    task: Task
    date: date

    @property
    def completed(self) -> bool:
        # Shared flag: every occurrence of a recurring task reports the same value
        return self.task.completed


@dataclass(frozen=True)
class DaySummary:
    """Completion numbers for a single day."""

    date: date
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.completed / self.total * 100


@dataclass(frozen=True)
class Achievement:
    """A badge unlocked by period stats."""

    key: str
    label: str
    unlocked: bool


def tasks_for_date(tasks: list[Task], day: date) -> list[Task]:
    """Tasks due on a day, in their original order."""
    return [t for t in tasks if is_due(t, day)]


def tasks_for_date_range(tasks: list[Task], start: date, end: date) -> list[tuple[date, list[Task]]]:
    """Due tasks for each day of an inclusive range, ascending."""
    return [(day, tasks_for_date(tasks, day)) for day in days_between(start, end)]


def _count(due: list[Task]) -> CompletionStats:
    return CompletionStats(completed=sum(1 for t in due if t.completed), total=len(due))


def completion_stats(tasks: list[Task], day: date) -> CompletionStats:
    """Completed vs. due tasks on a single day."""
    return _count(tasks_for_date(tasks, day))


def period_occurrences(
    tasks: list[Task],
    anchor: date,
    days: int = DEFAULT_PERIOD_DAYS,
) -> list[Occurrence]:
    """
    One occurrence per (task, due day) over the `days` days ending at anchor.

    A recurring task contributes one entry per due day in the window, each
    carrying the task's single completion flag. Newest day first.
    """
    return [
        Occurrence(task=t, date=day)
        for day in last_n_days(anchor, days, ascending=False)
        for t in tasks
        if is_due(t, day)
    ]


def period_stats(tasks: list[Task], anchor: date, days: int = DEFAULT_PERIOD_DAYS) -> CompletionStats:
    """Completion totals over a rolling window ending at anchor."""
    occurrences = period_occurrences(tasks, anchor, days)
    return CompletionStats(
        completed=sum(1 for o in occurrences if o.completed),
        total=len(occurrences),
    )


def daily_history(tasks: list[Task], anchor: date, days: int = DEFAULT_HISTORY_DAYS) -> list[DaySummary]:
    """Per-day completion for the last `days` days, oldest first (for charts)."""
    history = []
    for day in last_n_days(anchor, days):
        stats = completion_stats(tasks, day)
        history.append(DaySummary(date=day, completed=stats.completed, total=stats.total))
    return history


def month_occurrences(tasks: list[Task], year: int, month: int) -> dict[date, list[Task]]:
    """Days of a month that have at least one due task, with those tasks."""
    first = date(year, month, 1)
    return {
        day: due
        for day, due in tasks_for_date_range(tasks, start_of_month(first), end_of_month(first))
        if due
    }


def achievements(stats: CompletionStats) -> list[Achievement]:
    """Badges for a period: 50% streak, 10 completed, high productivity."""
    rate = stats.rounded_percentage
    return [
        Achievement("streak_50", "50% streak", rate >= 50),
        Achievement("completed_10", "10 tasks completed", stats.completed >= 10),
        Achievement("high_productivity", "High productivity", rate >= 80),
    ]


def today_summary(tasks: list[Task], today: date) -> tuple[list[Task], CompletionStats]:
    """Tasks due today plus today's completion numbers."""
    due = tasks_for_date(tasks, normalize(today))
    return due, _count(due)
