"""JSON file task storage adapter."""

import json
import logging
import os
import tempfile
from pathlib import Path

from planner.core.tasks import Task

logger = logging.getLogger(__name__)


class TaskStoreError(RuntimeError):
    """Raised when the task file cannot be read or written."""

    pass


class JsonTaskStore:
    """
    File-based task storage.

    Implements TaskStore protocol. The whole list lives in one JSON array and
    every save replaces the file; the last writer wins.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> list[Task]:
        """Load every stored task. A missing file is an empty list."""
        if not self.path.exists():
            return []

        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read tasks from {self.path}: {e}")
            raise TaskStoreError(f"Failed to read tasks from {self.path}: {e}") from e

        if not isinstance(records, list):
            raise TaskStoreError(f"Expected a JSON array in {self.path}")

        tasks = []
        for record in records:
            if not isinstance(record, dict):
                logger.warning(f"Skipping non-object task record: {record!r}")
                continue
            try:
                tasks.append(Task.from_dict(record))
            except ValueError as e:
                logger.warning(f"Skipping task record: {e}")
        return tasks

    def save(self, tasks: list[Task]) -> None:
        """Replace the stored task list."""
        payload = json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".tasks-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                _discard(tmp_name)
            logger.error(f"Failed to save tasks to {self.path}: {e}")
            raise TaskStoreError(f"Failed to save tasks to {self.path}: {e}") from e


def _discard(name: str) -> None:
    try:
        os.unlink(name)
    except FileNotFoundError:
        pass
