"""Conversation model for the planning assistant."""

import uuid
from dataclasses import dataclass, field
from enum import Enum


class Role(Enum):
    """Who authored a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the conversation."""

    id: str
    text: str
    role: Role

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER

    def to_history(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.text}


@dataclass
class Conversation:
    """Messages in insertion order. Never reordered or deduplicated."""

    messages: list[ChatMessage] = field(default_factory=list)

    def _add(self, text: str, role: Role) -> ChatMessage:
        message = ChatMessage(id=uuid.uuid4().hex, text=text, role=role)
        self.messages.append(message)
        return message

    def add_user(self, text: str) -> ChatMessage:
        return self._add(text, Role.USER)

    def add_assistant(self, text: str) -> ChatMessage:
        return self._add(text, Role.ASSISTANT)

    def history(self) -> list[dict[str, str]]:
        """The {role, content} list sent to a chat endpoint."""
        return [m.to_history() for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)
