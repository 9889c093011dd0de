"""Tests for the chat-completions adapter."""

from unittest.mock import MagicMock

import pytest
import requests

from planner.adapters.chat_completions import EMPTY_REPLY, ChatCompletionsService, ChatServiceError
from planner.config import Config


@pytest.fixture
def config():
    return Config(chat_api_token="secret", chat_api_url="https://example.test/chat", chat_timeout=5)


def make_service(config, status=200, payload=None):
    service = ChatCompletionsService(config, system_prompt="be helpful")
    resp = MagicMock()
    resp.status_code = status
    resp.text = "error body"
    resp.json.return_value = payload
    service._session = MagicMock()
    service._session.post.return_value = resp
    return service


class TestChatCompletionsService:
    def test_sends_system_history_and_user(self, config):
        service = make_service(config, payload={"choices": [{"message": {"content": "TASK: Gym"}}]})
        history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]

        assert service.send("gym every day", history) == "TASK: Gym"

        args, kwargs = service._session.post.call_args
        assert args[0] == "https://example.test/chat"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 5
        body = kwargs["json"]
        assert body["model"] == "gpt-4o"
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 500
        assert body["messages"] == [
            {"role": "system", "content": "be helpful"},
            *history,
            {"role": "user", "content": "gym every day"},
        ]

    def test_missing_token(self):
        service = make_service(Config(chat_api_token=""))
        with pytest.raises(ChatServiceError, match="token"):
            service.send("hi", [])
        service._session.post.assert_not_called()

    def test_http_error(self, config):
        service = make_service(config, status=401)
        with pytest.raises(ChatServiceError, match="401"):
            service.send("hi", [])

    def test_network_error(self, config):
        service = make_service(config)
        service._session.post.side_effect = requests.ConnectionError("offline")
        with pytest.raises(ChatServiceError):
            service.send("hi", [])

    def test_invalid_json(self, config):
        service = make_service(config)
        service._session.post.return_value.json.side_effect = ValueError("bad json")
        with pytest.raises(ChatServiceError):
            service.send("hi", [])

    @pytest.mark.parametrize(
        "payload",
        [{"choices": []}, {"choices": [{"message": {"content": ""}}]}, {}, []],
    )
    def test_empty_reply_fallback(self, config, payload):
        assert make_service(config, payload=payload).send("hi", []) == EMPTY_REPLY
