"""Chat-completions API adapter - HTTP client for the planning assistant."""

import logging

import requests

from planner.config import Config, load_config
from planner.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

EMPTY_REPLY = "Sorry, I didn't understand."


class ChatServiceError(RuntimeError):
    """Raised when the assistant cannot be reached or answers with an error."""

    pass


class ChatCompletionsService:
    """
    OpenAI-compatible chat-completions adapter.

    Implements ChatService protocol. One blocking request per send, no
    retries. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, system_prompt: str = SYSTEM_PROMPT):
        self.config = config or load_config()
        self.system_prompt = system_prompt
        self._session = requests.Session()

    def _build_messages(self, user_text: str, history: list[dict[str, str]]) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            *history,
            {"role": "user", "content": user_text},
        ]

    def send(self, user_text: str, history: list[dict[str, str]]) -> str:
        """Send a user message after `history`. Returns raw reply text."""
        if not self.config.chat_api_token:
            raise ChatServiceError(
                "No chat API token. Set CHAT_API_TOKEN in planner.conf or PLANNER_CHAT_API_TOKEN."
            )

        try:
            resp = self._session.post(
                self.config.chat_api_url,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.config.chat_api_token}",
                },
                json={
                    "messages": self._build_messages(user_text, history),
                    "model": self.config.chat_model,
                    "temperature": self.config.chat_temperature,
                    "max_tokens": self.config.chat_max_tokens,
                },
                timeout=self.config.chat_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Chat request failed: {e}")
            raise ChatServiceError(f"Chat request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Chat API error {resp.status_code}: {resp.text}")
            raise ChatServiceError(f"Chat API error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ChatServiceError(f"Chat API returned invalid JSON: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        return content or EMPTY_REPLY
