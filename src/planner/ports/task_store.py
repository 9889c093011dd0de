"""Task store interface."""

from typing import Protocol

from planner.core.tasks import Task


class TaskStore(Protocol):
    """Interface for persisting the whole task list in any backend."""

    def load(self) -> list[Task]:
        """Load every stored task."""
        ...

    def save(self, tasks: list[Task]) -> None:
        """Replace the stored task list with `tasks`."""
        ...
