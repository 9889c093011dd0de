"""Adapters - I/O implementations of ports."""

from .json_store import JsonTaskStore, TaskStoreError
from .chat_completions import ChatCompletionsService, ChatServiceError

__all__ = [
    "JsonTaskStore",
    "TaskStoreError",
    "ChatCompletionsService",
    "ChatServiceError",
]
