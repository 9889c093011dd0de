"""Functional core - pure business logic with no I/O."""

from .dates import InvalidDateError, month_grid, last_n_days, normalize, parse_iso_date
from .recurrence import Daily, Weekly, Monthly, Recurrence, InvalidRecurrenceError, is_due
from .tasks import Task
from .stats import CompletionStats, completion_stats, period_stats, tasks_for_date, tasks_for_date_range
from .intent import ParsedIntent, parse_assistant_reply, resolve_date_token, task_from_intent
from .chat import ChatMessage, Conversation, Role

__all__ = [
    # Dates
    "InvalidDateError",
    "month_grid",
    "last_n_days",
    "normalize",
    "parse_iso_date",
    # Recurrence
    "Daily",
    "Weekly",
    "Monthly",
    "Recurrence",
    "InvalidRecurrenceError",
    "is_due",
    # Tasks
    "Task",
    # Stats
    "CompletionStats",
    "completion_stats",
    "period_stats",
    "tasks_for_date",
    "tasks_for_date_range",
    # Intent
    "ParsedIntent",
    "parse_assistant_reply",
    "resolve_date_token",
    "task_from_intent",
    # Chat
    "ChatMessage",
    "Conversation",
    "Role",
]
