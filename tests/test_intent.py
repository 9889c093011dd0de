"""Tests for assistant reply parsing and date token resolution."""

from datetime import date, datetime

import pytest

from planner.core.dates import InvalidDateError
from planner.core.intent import (
    FALLBACK_REPLY,
    ParsedIntent,
    parse_assistant_reply,
    parse_recurrence_token,
    resolve_date_token,
    task_from_intent,
)
from planner.core.recurrence import Daily, InvalidRecurrenceError, Monthly, Weekly


class TestParseAssistantReply:
    def test_well_formed_block(self):
        intent = parse_assistant_reply("TASK: Academia\nRECURRENCE: DAILY\nRESPONSE: ok")
        assert intent.task == "Academia"
        assert intent.recurrence == Daily()
        assert intent.text == "ok"
        assert intent.date is None
        assert intent.anomalies == ()

    def test_plain_reply_returned_unchanged(self):
        raw = "  Sure! Here are some tips:\nRESPONSE: not a task\n"
        intent = parse_assistant_reply(raw)
        assert intent.text == raw
        assert intent.task is None
        assert intent.has_task is False
        assert intent.recurrence is None

    def test_all_fields(self):
        intent = parse_assistant_reply(
            "TASK: Meeting at 3pm\nDATE: TOMORROW\nRECURRENCE: WEEKLY:1,3\nRESPONSE: Added for tomorrow!"
        )
        assert intent.task == "Meeting at 3pm"
        assert intent.date == "TOMORROW"
        assert intent.recurrence == Weekly(frozenset({1, 3}))
        assert intent.text == "Added for tomorrow!"

    def test_fallback_reply_without_response(self):
        intent = parse_assistant_reply("TASK: Pay rent\nRECURRENCE: MONTHLY:5")
        assert intent.text == FALLBACK_REPLY
        assert intent.recurrence == Monthly(5)

    def test_fields_in_any_order_with_preamble(self):
        intent = parse_assistant_reply("Okay!\nRESPONSE: Done\nDATE: 2025-02-01\nTASK:   Buy milk  ")
        assert intent.task == "Buy milk"
        assert intent.date == "2025-02-01"
        assert intent.text == "Done"

    def test_date_kept_verbatim(self):
        assert parse_assistant_reply("TASK: x\nDATE: next friday").date == "next friday"

    def test_crlf_line_endings(self):
        intent = parse_assistant_reply("TASK: Gym\r\nRECURRENCE: DAILY\r\nRESPONSE: ok\r\n")
        assert intent.task == "Gym"
        assert intent.recurrence == Daily()
        assert intent.text == "ok"

    def test_empty_task_is_plain_reply(self):
        raw = "TASK:   \nRESPONSE: hi"
        intent = parse_assistant_reply(raw)
        assert intent.has_task is False
        assert intent.text == raw

    def test_first_match_wins(self):
        intent = parse_assistant_reply("TASK: first\nTASK: second\nRESPONSE: a\nRESPONSE: b")
        assert intent.task == "first"
        assert intent.text == "a"

    def test_markers_inside_words_are_ignored(self):
        raw = "SUBTASK: chop onions\nUPDATE: 2025-03-01\nRESPONSE: noted"
        intent = parse_assistant_reply(raw)
        assert intent.has_task is False
        assert intent.text == raw

    def test_prefixed_marker_does_not_shadow_real_one(self):
        intent = parse_assistant_reply("SUBTASK: chop\nTASK: Cook\nUPDATE: x\nDATE: TODAY")
        assert intent.task == "Cook"
        assert intent.date == "TODAY"

    def test_marker_after_leading_text_on_line(self):
        assert parse_assistant_reply("Sure! TASK: Gym\nRESPONSE: ok").task == "Gym"

    def test_non_numeric_weekday_is_rejected(self):
        intent = parse_assistant_reply("TASK: Study\nRECURRENCE: WEEKLY:1,x\nRESPONSE: ok")
        assert intent.task == "Study"
        assert intent.recurrence is None
        assert len(intent.anomalies) == 1
        assert "WEEKLY:1,x" in intent.anomalies[0]

    def test_non_numeric_month_day_is_rejected(self):
        intent = parse_assistant_reply("TASK: Rent\nRECURRENCE: MONTHLY:fifth")
        assert intent.recurrence is None
        assert intent.anomalies

    def test_unknown_recurrence_omitted(self):
        intent = parse_assistant_reply("TASK: Birthday\nRECURRENCE: YEARLY:01-15")
        assert intent.recurrence is None
        assert intent.anomalies == ()

    def test_never_raises_on_garbage(self):
        for raw in ["", "TASK:", "RECURRENCE: WEEKLY:", "\n\n\n", None]:
            assert isinstance(parse_assistant_reply(raw), ParsedIntent)


class TestParseRecurrenceToken:
    def test_daily(self):
        assert parse_recurrence_token("DAILY") == Daily()

    def test_weekly_with_spaces(self):
        assert parse_recurrence_token("WEEKLY: 0, 6") == Weekly(frozenset({0, 6}))

    def test_monthly(self):
        assert parse_recurrence_token("MONTHLY:31") == Monthly(31)

    @pytest.mark.parametrize("token", ["WEEKLY:", "WEEKLY:1,,3", "WEEKLY:8", "MONTHLY:0", "MONTHLY:32", "MONTHLY:1.5"])
    def test_bad_payload_raises(self, token):
        with pytest.raises(InvalidRecurrenceError):
            parse_recurrence_token(token)

    def test_other_token_is_none(self):
        assert parse_recurrence_token("daily") is None
        assert parse_recurrence_token("WEEKDAYS") is None


class TestResolveDateToken:
    def test_today_and_absent(self, today):
        assert resolve_date_token("TODAY", today) == today
        assert resolve_date_token(None, today) == today
        assert resolve_date_token("", today) == today

    def test_tomorrow(self, today):
        assert resolve_date_token("TOMORROW", today) == date(2025, 1, 16)

    def test_tomorrow_crosses_year(self):
        assert resolve_date_token("TOMORROW", date(2025, 12, 31)) == date(2026, 1, 1)

    def test_relative_to_call_time(self):
        # The same intent resolves differently on different days
        assert resolve_date_token("TOMORROW", datetime(2025, 3, 1, 23, 59)) == date(2025, 3, 2)

    def test_explicit_date(self, today):
        assert resolve_date_token("2025-02-01", today) == date(2025, 2, 1)

    @pytest.mark.parametrize("token", ["2025-02-30", "next week", "01/02/2025"])
    def test_invalid_explicit_date_rejected(self, token, today):
        with pytest.raises(InvalidDateError):
            resolve_date_token(token, today)


class TestTaskFromIntent:
    def test_builds_task(self, today):
        intent = parse_assistant_reply("TASK: Gym\nDATE: TOMORROW\nRECURRENCE: DAILY\nRESPONSE: ok")
        now = datetime(2025, 1, 15, 8, 0)
        task = task_from_intent(intent, today, now=now, task_id="abc")
        assert task.id == "abc"
        assert task.title == "Gym"
        assert task.date == date(2025, 1, 16)
        assert task.recurrence == Daily()
        assert task.created_at == now
        assert task.completed is False

    def test_requires_task(self, today):
        with pytest.raises(ValueError):
            task_from_intent(ParsedIntent(text="hello"), today)
