"""Owned, versioned in-memory task collection backed by a TaskStore."""

import logging
from dataclasses import fields, replace
from datetime import date
from typing import Callable

from .core.dates import normalize
from .core.recurrence import Daily, Monthly, Weekly
from .core.tasks import Task, find_task
from .ports.task_store import TaskStore

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[Task, ...]], None]

IMMUTABLE_FIELDS = {"id", "created_at"}


class TaskNotFoundError(KeyError):
    """Raised when no task has the requested id."""

    pass


def _checked_changes(changes: dict) -> dict:
    """Validate new field values so a stored task always stays consistent."""
    checked = dict(changes)
    if "title" in checked:
        title = checked["title"]
        if not isinstance(title, str) or not title.strip():
            raise ValueError("Task title must not be empty")
        checked["title"] = title.strip()
    if "date" in checked:
        value = checked["date"]
        if value is not None and not isinstance(value, date):
            raise ValueError(f"Task date must be a date, got {value!r}")
        if value is not None:
            checked["date"] = normalize(value)
    if "recurrence" in checked:
        rule = checked["recurrence"]
        if rule is not None and not isinstance(rule, (Daily, Weekly, Monthly)):
            raise ValueError(f"Not a recurrence rule: {rule!r}")
    if "completed" in checked and not isinstance(checked["completed"], bool):
        raise ValueError(f"Task completed flag must be a bool, got {checked['completed']!r}")
    return checked


class TaskBook:
    """
    The single owner of the task list at runtime.

    Readers get an immutable snapshot. Every mutation builds a new list,
    saves it whole through the store, then swaps the snapshot, bumps the
    version and notifies subscribers. If the save fails nothing changes.
    """

    def __init__(self, store: TaskStore):
        self.store = store
        self._tasks: tuple[Task, ...] = ()
        self._version = 0
        self._listeners: list[Listener] = []

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def version(self) -> int:
        return self._version

    def get(self, task_id: str) -> Task:
        task = find_task(list(self._tasks), task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for new snapshots. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _swap(self, tasks: list[Task]) -> None:
        self._tasks = tuple(tasks)
        self._version += 1
        for listener in list(self._listeners):
            listener(self._tasks)

    def load(self) -> tuple[Task, ...]:
        """Replace the snapshot with the store's contents."""
        self._swap(self.store.load())
        logger.debug(f"Loaded {len(self._tasks)} tasks (version {self._version})")
        return self._tasks

    def replace(self, tasks: list[Task]) -> tuple[Task, ...]:
        """Save a whole new task list and make it current."""
        tasks = list(tasks)
        self.store.save(tasks)
        self._swap(tasks)
        return self._tasks

    def add(self, task: Task) -> Task:
        if find_task(list(self._tasks), task.id) is not None:
            raise ValueError(f"Duplicate task id: {task.id}")
        self.replace([*self._tasks, task])
        return task

    def update(self, task_id: str, **changes) -> Task:
        """Apply field changes to one task. id and created_at never change."""
        known = {f.name for f in fields(Task)}
        for name in changes:
            if name not in known:
                raise TypeError(f"Unknown task field: {name}")
            if name in IMMUTABLE_FIELDS:
                raise ValueError(f"Task field {name} is immutable")
        changes = _checked_changes(changes)

        updated = replace(self.get(task_id), **changes)
        self.replace([updated if t.id == task_id else t for t in self._tasks])
        return updated

    def toggle(self, task_id: str) -> Task:
        """Flip a task's completion flag (shared by all its occurrences)."""
        toggled = self.get(task_id).toggled()
        self.replace([toggled if t.id == task_id else t for t in self._tasks])
        return toggled

    def delete(self, task_id: str) -> Task:
        task = self.get(task_id)
        self.replace([t for t in self._tasks if t.id != task_id])
        return task
