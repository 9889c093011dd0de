"""Shared workflow layer between the CLI and any other front end.

Wires adapters to the pure core: chat replies become tasks, tasks go into
the task book, and collaborator failures turn into user-facing messages.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from .adapters.chat_completions import ChatCompletionsService, ChatServiceError
from .adapters.json_store import JsonTaskStore, TaskStoreError
from .config import Config
from .core.chat import Conversation
from .core.dates import InvalidDateError
from .core.intent import parse_assistant_reply, resolve_date_token, task_from_intent
from .core.recurrence import Recurrence
from .core.tasks import Task
from .ports.chat_service import ChatService
from .task_book import TaskBook

logger = logging.getLogger(__name__)

CHAT_ERROR_REPLY = "Sorry, something went wrong. Check your connection and your API token."
STORE_ERROR_REPLY = "Sorry, the task could not be saved."


@dataclass
class ChatOutcome:
    """What a single chat send produced."""

    reply: str
    task: Task | None = None
    anomalies: list[str] = field(default_factory=list)


def get_task_book(config: Config) -> TaskBook:
    """Build a loaded task book from config."""
    book = TaskBook(JsonTaskStore(config.tasks_path))
    book.load()
    return book


def get_chat_service(config: Config) -> ChatCompletionsService:
    return ChatCompletionsService(config)


def create_task(
    book: TaskBook,
    title: str,
    date_token: str | None = None,
    recurrence: Recurrence | None = None,
    today: date | None = None,
) -> Task:
    """Add a task dated by a TODAY/TOMORROW/YYYY-MM-DD token."""
    today = today or date.today()
    task = Task.create(title, resolve_date_token(date_token, today), recurrence=recurrence)
    return book.add(task)


def send_chat_message(
    text: str,
    conversation: Conversation,
    chat: ChatService,
    book: TaskBook,
    today: date | None = None,
) -> ChatOutcome:
    """
    Send a user message, record the reply, and add any task it describes.

    The task's date is resolved against `today` at this point, not when the
    assistant wrote its reply.
    """
    history = conversation.history()
    conversation.add_user(text)

    try:
        raw = chat.send(text, history)
    except ChatServiceError as e:
        logger.error(f"Chat failed: {e}")
        conversation.add_assistant(CHAT_ERROR_REPLY)
        return ChatOutcome(reply=CHAT_ERROR_REPLY)

    intent = parse_assistant_reply(raw)
    outcome = ChatOutcome(reply=intent.text, anomalies=list(intent.anomalies))

    if intent.has_task:
        try:
            task = task_from_intent(intent, today or date.today(), now=datetime.now())
            outcome.task = book.add(task)
        except InvalidDateError as e:
            logger.warning(f"Assistant gave an invalid date: {e}")
            outcome.reply = f"{intent.text}\n(Task not added: invalid date {intent.date!r}.)"
        except TaskStoreError as e:
            logger.error(f"Failed to save task from chat: {e}")
            outcome.reply = STORE_ERROR_REPLY

    conversation.add_assistant(outcome.reply)
    return outcome
