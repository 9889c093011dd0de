"""Chat assistant interface."""

from typing import Protocol


class ChatService(Protocol):
    """Interface for a remote chat-completion assistant."""

    def send(self, user_text: str, history: list[dict[str, str]]) -> str:
        """Send a user message after `history` ({role, content} dicts). Returns raw reply text."""
        ...
