"""Configuration management for Planner."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PLANNER_HOME = Path(os.environ.get("PLANNER_HOME", Path.home() / "planner"))
CONFIG_FILE = PLANNER_HOME / "config" / "planner.conf"
DATA_DIR = PLANNER_HOME / "data"

DEFAULT_CHAT_API_URL = "https://models.inference.ai.azure.com/chat/completions"


@dataclass
class Config:
    """Planner configuration."""

    tasks_file: str = ""
    chat_api_url: str = DEFAULT_CHAT_API_URL
    chat_model: str = "gpt-4o"
    chat_api_token: str = ""
    chat_temperature: float = 0.7
    chat_max_tokens: int = 500
    chat_timeout: int = 30
    stats_window_days: int = 30

    @property
    def tasks_path(self) -> Path:
        """Resolved location of the task list file."""
        if self.tasks_file:
            return Path(self.tasks_file).expanduser()
        return DATA_DIR / "tasks.json"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_number(key: str, value: str, kind: type, current):
    try:
        return kind(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {key.upper()} value: {value!r}")
        return current


def load_config(path: Path | None = None) -> Config:
    """Load configuration from planner.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "tasks_file":
                    config.tasks_file = value
                case "chat_api_url":
                    config.chat_api_url = value
                case "chat_model":
                    config.chat_model = value
                case "chat_api_token":
                    config.chat_api_token = value
                case "chat_temperature":
                    config.chat_temperature = _parse_number(key, value, float, config.chat_temperature)
                case "chat_max_tokens":
                    config.chat_max_tokens = _parse_number(key, value, int, config.chat_max_tokens)
                case "chat_timeout":
                    config.chat_timeout = _parse_number(key, value, int, config.chat_timeout)
                case "stats_window_days":
                    config.stats_window_days = _parse_number(key, value, int, config.stats_window_days)
                case _:
                    logger.debug(f"Unknown config key: {key}")

    if not config.chat_api_token:
        config.chat_api_token = os.environ.get("PLANNER_CHAT_API_TOKEN", "")

    return config
