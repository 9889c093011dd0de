"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore
from .chat_service import ChatService

__all__ = [
    "TaskStore",
    "ChatService",
]
