"""Pure task domain logic - no I/O dependencies."""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

from .dates import InvalidDateError, format_iso_date, parse_iso_date
from .recurrence import (
    InvalidRecurrenceError,
    MalformedRecurrence,
    Recurrence,
    describe,
    recurrence_from_dict,
    recurrence_to_dict,
)

logger = logging.getLogger(__name__)


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Task:
    """A dated task, optionally repeating on a recurrence rule."""

    id: str
    title: str
    date: date | None
    completed: bool = False
    created_at: datetime | None = None
    recurrence: Recurrence | MalformedRecurrence | None = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    def recurrence_label(self) -> str:
        """Human-readable recurrence, or empty string for one-off tasks."""
        if self.recurrence is None:
            return ""
        return describe(self.recurrence)

    def toggled(self) -> "Task":
        """
        Copy with the completion flag flipped.

        A recurring task has a single flag shared by all its occurrences.
        """
        return replace(self, completed=not self.completed)

    @classmethod
    def create(
        cls,
        title: str,
        on: date,
        recurrence: Recurrence | None = None,
        now: datetime | None = None,
        task_id: str | None = None,
    ) -> "Task":
        """Create a new, not yet completed task anchored on `on`."""
        title = title.strip()
        if not title:
            raise ValueError("Task title must not be empty")
        return cls(
            id=task_id or new_task_id(),
            title=title,
            date=on,
            completed=False,
            created_at=now or datetime.now(),
            recurrence=recurrence,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """
        Create Task from a stored record.

        Only a missing id or title is an error. A bad date or recurrence is
        logged and kept in a degraded form that is never due.
        """
        task_id = data.get("id")
        title = data.get("title")
        if not task_id or not isinstance(title, str) or not title.strip():
            raise ValueError(f"Task record needs an id and a title: {data!r}")

        anchor = None
        try:
            anchor = parse_iso_date(data.get("date"))
        except InvalidDateError as e:
            logger.warning(f"Task {task_id} has an unusable date: {e}")

        created_at = None
        if data.get("createdAt"):
            try:
                created_at = datetime.fromisoformat(data["createdAt"].replace("Z", "+00:00"))
            except (ValueError, AttributeError):
                logger.warning(f"Task {task_id} has an unusable createdAt: {data['createdAt']!r}")

        recurrence = None
        if data.get("recurrence") is not None:
            try:
                recurrence = recurrence_from_dict(data["recurrence"])
            except InvalidRecurrenceError as e:
                logger.warning(f"Task {task_id} has a malformed recurrence: {e}")
                recurrence = MalformedRecurrence(raw=data["recurrence"], reason=str(e))

        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            logger.warning(f"Task {task_id} has an unusable completed flag: {completed!r}")
            completed = False

        return cls(
            id=str(task_id),
            title=title,
            date=anchor,
            completed=completed,
            created_at=created_at,
            recurrence=recurrence,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored record shape."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "date": format_iso_date(self.date) if self.date else None,
        }
        if self.recurrence is not None:
            data["recurrence"] = recurrence_to_dict(self.recurrence)
        return data


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    """Look up a task by id."""
    return next((t for t in tasks if t.id == task_id), None)
