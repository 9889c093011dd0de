"""Structured intent extraction from assistant replies - no I/O dependencies.

The assistant is prompted to answer task requests in a line grammar:

    TASK: <title>
    DATE: <TODAY|TOMORROW|YYYY-MM-DD>              (optional)
    RECURRENCE: <DAILY|WEEKLY:d[,d...]|MONTHLY:n>  (optional)
    RESPONSE: <reply text>

Anything else is a plain conversational reply.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .dates import normalize, parse_iso_date
from .recurrence import Daily, InvalidRecurrenceError, Monthly, Recurrence, Weekly
from .tasks import Task

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Task added successfully!"

TODAY = "TODAY"
TOMORROW = "TOMORROW"


def _field_pattern(name: str) -> re.Pattern:
    # First marker at the start of the text or after whitespace, value is the
    # rest of that line. SUBTASK: and UPDATE: are not markers.
    return re.compile(rf"(?<!\S){name}:[ \t]*([^\r\n]*)")


TASK_RE = _field_pattern("TASK")
DATE_RE = _field_pattern("DATE")
RECURRENCE_RE = _field_pattern("RECURRENCE")
RESPONSE_RE = _field_pattern("RESPONSE")


@dataclass(frozen=True)
class ParsedIntent:
    """What the assistant asked for, plus the text to show the user."""

    text: str
    task: str | None = None
    date: str | None = None
    recurrence: Recurrence | None = None
    anomalies: tuple[str, ...] = ()

    @property
    def has_task(self) -> bool:
        return self.task is not None


def _find(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip()


def _parse_int(token: str) -> int:
    token = token.strip()
    if not re.fullmatch(r"[+-]?\d+", token):
        raise InvalidRecurrenceError(f"Not an integer: {token!r}")
    return int(token)


def parse_recurrence_token(token: str) -> Recurrence | None:
    """
    Parse DAILY, WEEKLY:d[,d...] or MONTHLY:n.

    Returns None for any other token. Raises InvalidRecurrenceError when the
    keyword is recognized but its payload is not (non-numeric or out of range).
    """
    token = token.strip()
    if token == "DAILY":
        return Daily()

    if token.startswith("WEEKLY:"):
        payload = token.split(":", 1)[1]
        return Weekly(frozenset(_parse_int(part) for part in payload.split(",")))

    if token.startswith("MONTHLY:"):
        return Monthly(_parse_int(token.split(":", 1)[1]))

    return None


def parse_assistant_reply(text: str) -> ParsedIntent:
    """
    Extract a task-creation intent from raw assistant text.

    Pure and total. Without a TASK: line the whole reply comes back unchanged
    as plain text. DATE:, RECURRENCE: and RESPONSE: are each optional and
    matched independently; a bad RECURRENCE: payload is dropped and reported
    in `anomalies`.
    """
    if not isinstance(text, str):
        return ParsedIntent(text="" if text is None else str(text))

    title = _find(TASK_RE, text)
    if not title:
        return ParsedIntent(text=text)

    reply = _find(RESPONSE_RE, text)
    date_token = _find(DATE_RE, text) or None

    recurrence = None
    anomalies: list[str] = []
    recurrence_token = _find(RECURRENCE_RE, text)
    if recurrence_token:
        try:
            recurrence = parse_recurrence_token(recurrence_token)
        except InvalidRecurrenceError as e:
            logger.debug(f"Dropping recurrence {recurrence_token!r}: {e}")
            anomalies.append(f"Ignored recurrence {recurrence_token!r}: {e}")
        else:
            if recurrence is None:
                logger.debug(f"Unrecognized recurrence token {recurrence_token!r}")

    return ParsedIntent(
        text=reply or FALLBACK_REPLY,
        task=title,
        date=date_token,
        recurrence=recurrence,
        anomalies=tuple(anomalies),
    )


def resolve_date_token(token: str | None, today: date) -> date:
    """
    Turn a DATE: token into a calendar date relative to `today`.

    Call this when the task is actually created, so TOMORROW means tomorrow
    from now. Explicit dates must be valid YYYY-MM-DD (InvalidDateError).
    """
    today = normalize(today)
    if token is None or token.strip() in ("", TODAY):
        return today
    if token.strip() == TOMORROW:
        return today + timedelta(days=1)
    return parse_iso_date(token)


def task_from_intent(
    intent: ParsedIntent,
    today: date,
    now: datetime | None = None,
    task_id: str | None = None,
) -> Task:
    """Build a new task from a parsed intent, resolving its date against today."""
    if not intent.has_task:
        raise ValueError("Intent does not describe a task")
    return Task.create(
        title=intent.task,
        on=resolve_date_token(intent.date, today),
        recurrence=intent.recurrence,
        now=now,
        task_id=task_id,
    )
