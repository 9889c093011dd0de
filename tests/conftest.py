"""Shared fixtures."""

from datetime import date

import pytest

from planner.adapters.json_store import TaskStoreError
from planner.task_book import TaskBook


class MemoryTaskStore:
    """In-memory TaskStore that records every save."""

    def __init__(self, tasks=None):
        self.tasks = list(tasks or [])
        self.saves = []
        self.fail_on_save = False

    def load(self):
        return list(self.tasks)

    def save(self, tasks):
        if self.fail_on_save:
            raise TaskStoreError("disk full")
        self.tasks = list(tasks)
        self.saves.append(list(tasks))


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def store():
    return MemoryTaskStore()


@pytest.fixture
def book(store):
    task_book = TaskBook(store)
    task_book.load()
    return task_book
