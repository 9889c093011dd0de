"""Planner CLI - tasks, calendar, stats and the planning assistant."""

import json
import logging
import sys
from datetime import date

import click

from .adapters.json_store import TaskStoreError
from .config import load_config
from .core.chat import Conversation
from .core.dates import InvalidDateError, format_iso_date, month_grid, parse_iso_date
from .core.intent import parse_recurrence_token
from .core.recurrence import InvalidRecurrenceError, with_end_date
from .core.stats import (
    achievements,
    daily_history,
    month_occurrences,
    period_stats,
    today_summary,
)
from .core.tasks import Task
from .task_book import TaskBook, TaskNotFoundError
from .workflows import create_task, get_chat_service, get_task_book, send_chat_message

ID_DISPLAY_LENGTH = 8


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_book() -> TaskBook:
    try:
        return get_task_book(load_config())
    except TaskStoreError as e:
        _fail(str(e))


def _resolve_id(book: TaskBook, prefix: str) -> str:
    """Match a full id or a unique id prefix."""
    matches = [t.id for t in book.tasks if t.id.startswith(prefix)]
    if prefix in matches:
        return prefix
    if len(matches) != 1:
        raise TaskNotFoundError(prefix)
    return matches[0]


def _parse_date_option(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return parse_iso_date(value)
    except InvalidDateError as e:
        raise click.BadParameter(str(e))


def _task_line(task: Task) -> str:
    mark = "x" if task.completed else " "
    repeat = f"  ({task.recurrence_label()})" if task.recurrence else ""
    return f"[{mark}] {task.id[:ID_DISPLAY_LENGTH]}  {task.title}{repeat}"


@click.group()
@click.version_option(package_name="planner")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Planner - tasks, reminders and a planning assistant."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.argument("title")
@click.option("--date", "date_token", default=None, help="TODAY, TOMORROW or YYYY-MM-DD")
@click.option("--repeat", default=None, help="DAILY, WEEKLY:1,3 or MONTHLY:5")
@click.option("--until", default=None, help="Last day of the recurrence (YYYY-MM-DD)")
def add(title: str, date_token: str | None, repeat: str | None, until: str | None):
    """Add a task."""
    recurrence = None
    if repeat:
        try:
            recurrence = parse_recurrence_token(repeat)
        except InvalidRecurrenceError as e:
            raise click.BadParameter(str(e), param_hint="--repeat")
        if recurrence is None:
            raise click.BadParameter(f"Unknown recurrence {repeat!r}", param_hint="--repeat")
    if until:
        if recurrence is None:
            raise click.BadParameter("--until needs --repeat", param_hint="--until")
        recurrence = with_end_date(recurrence, _parse_date_option(until))

    book = _open_book()
    try:
        task = create_task(book, title, date_token, recurrence)
    except (ValueError, TaskStoreError) as e:
        _fail(str(e))

    click.echo(f"Added: {_task_line(task)} on {format_iso_date(task.date)}")


@main.command("list")
@click.option("--date", "-d", "target_date", default=None, help="Date (YYYY-MM-DD), defaults to today")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(target_date: str | None, as_json: bool):
    """List tasks due on a day."""
    day = _parse_date_option(target_date)
    book = _open_book()
    due, stats = today_summary(list(book.tasks), day)

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in due], indent=2))
        return

    if not due:
        click.echo(f"No tasks for {day.strftime('%A, %b %d')}.")
        return

    click.echo(f"{day.strftime('%A, %b %d')}  {stats.completed}/{stats.total} done\n")
    for task in due:
        click.echo(_task_line(task))


@main.command()
@click.argument("task_id")
def toggle(task_id: str):
    """Mark a task done (or not done)."""
    book = _open_book()
    try:
        task = book.toggle(_resolve_id(book, task_id))
    except TaskNotFoundError:
        _fail(f"No task matching {task_id!r}")
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(_task_line(task))


@main.command()
@click.argument("task_id")
def rm(task_id: str):
    """Delete a task."""
    book = _open_book()
    try:
        task = book.delete(_resolve_id(book, task_id))
    except TaskNotFoundError:
        _fail(f"No task matching {task_id!r}")
    except TaskStoreError as e:
        _fail(str(e))
    click.echo(f"Deleted: {task.title}")


@main.command()
@click.option("--month", "-m", default=None, help="Month as YYYY-MM, defaults to this month")
def calendar(month: str | None):
    """Show a month grid; days with tasks are marked with *."""
    today = date.today()
    if month:
        try:
            first = parse_iso_date(f"{month}-01")
        except InvalidDateError:
            raise click.BadParameter(f"Expected YYYY-MM, got {month!r}", param_hint="--month")
    else:
        first = today.replace(day=1)

    book = _open_book()
    marked = month_occurrences(list(book.tasks), first.year, first.month)

    click.echo(first.strftime("%B %Y").center(28))
    click.echo("".join(f"{name:>4}" for name in ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]))
    cells = month_grid(first.year, first.month)
    for start in range(0, len(cells), 7):
        row = ""
        for day in cells[start : start + 7]:
            if day is None:
                row += "    "
            else:
                row += f"{day.day:>3}{'*' if day in marked else ' '}"
        click.echo(row.rstrip())

    for day, due in marked.items():
        click.echo(f"\n### {day.strftime('%A, %B %d')}")
        for task in due:
            click.echo(f"  {_task_line(task)}")


@main.command()
@click.option("--days", default=None, type=int, help="Rolling window in days")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(days: int | None, as_json: bool):
    """Completion stats for today, the last 7 days and a rolling window."""
    config = load_config()
    window = days or config.stats_window_days
    today = date.today()
    book = _open_book()
    tasks = list(book.tasks)

    period = period_stats(tasks, today, window)
    _, today_stats = today_summary(tasks, today)
    history = daily_history(tasks, today)
    badges = achievements(period)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "window_days": window,
                    "completed": period.completed,
                    "total": period.total,
                    "completion_rate": period.rounded_percentage,
                    "today": {"completed": today_stats.completed, "total": today_stats.total},
                    "history": [
                        {"date": format_iso_date(d.date), "completed": d.completed, "total": d.total}
                        for d in history
                    ],
                    "achievements": {a.key: a.unlocked for a in badges},
                },
                indent=2,
            )
        )
        return

    click.echo(f"Last {window} days: {period.completed}/{period.total} done ({period.rounded_percentage}%)")
    click.echo(f"Today: {today_stats.completed}/{today_stats.total}\n")
    click.echo("Last 7 days:")
    for summary in history:
        bar = "#" * summary.completed + "." * (summary.total - summary.completed)
        click.echo(f"  {summary.date.strftime('%a %d')}  {summary.completed}/{summary.total}  {bar}")
    click.echo("\nAchievements:")
    for badge in badges:
        click.echo(f"  [{'x' if badge.unlocked else ' '}] {badge.label}")


@main.command()
@click.argument("message", required=False)
def chat(message: str | None):
    """Talk to the planning assistant. Without MESSAGE, start an interactive session."""
    config = load_config()
    book = _open_book()
    service = get_chat_service(config)
    conversation = Conversation()

    def send(text: str) -> None:
        outcome = send_chat_message(text, conversation, service, book)
        click.echo(outcome.reply)
        if outcome.task:
            click.echo(f"  + {_task_line(outcome.task)} on {format_iso_date(outcome.task.date)}")
        for note in outcome.anomalies:
            click.echo(f"  ! {note}", err=True)

    if message:
        send(message)
        return

    click.echo("Type 'exit' to quit.")
    while True:
        try:
            text = click.prompt("you", prompt_suffix="> ").strip()
        except click.Abort:
            click.echo()
            return
        if text.lower() in ("exit", "quit"):
            return
        if text:
            send(text)

