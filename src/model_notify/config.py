"""Read-only view of the openclaw configuration document."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from model_notify.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT = "main"


def clean_string(value: Any) -> Optional[str]:
    """Trim a string value. Blank or non-string values become None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def clean_chat_id(value: Any) -> Optional[str]:
    """Normalize a chat id that may have been written as a JSON number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    return clean_string(value)


def _section(data: Any, key: str) -> dict[str, Any]:
    """Get a nested object, or an empty dict if absent or not an object."""
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class TelegramAccountConfig:
    """A named Telegram account under ``channels.telegram.accounts``."""

    bot_token: Optional[str] = None
    chat_id: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "TelegramAccountConfig":
        return cls(
            bot_token=clean_string(d.get("botToken")),
            chat_id=clean_chat_id(d.get("chatId")),
        )


@dataclass(frozen=True)
class TelegramConfig:
    """Telegram channel configuration."""

    bot_token: Optional[str] = None
    chat_id: Optional[str] = None
    accounts: Mapping[str, TelegramAccountConfig] = field(default_factory=dict)

    def account(self, name: str = DEFAULT_ACCOUNT) -> Optional[TelegramAccountConfig]:
        """Get a named account, if configured."""
        return self.accounts.get(name)


@dataclass(frozen=True)
class LoggingConfig:
    """Gateway logging configuration."""

    file: Optional[str] = None


@dataclass(frozen=True)
class OpenClawConfig:
    """The parts of ``openclaw.json`` this package reads."""

    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _default_file_reader(path: Path) -> Optional[dict[str, Any]]:
    """Default file reader that loads JSON from disk.

    Missing, unreadable or malformed files are treated as absent.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Ignoring unreadable config {path}: {e}")
        return None
    if not content.strip():
        return None
    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Ignoring malformed config {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


def parse_config(data: Optional[dict[str, Any]]) -> OpenClawConfig:
    """Build an OpenClawConfig from a decoded document.

    Sections with the wrong shape are ignored rather than rejected.
    """
    if not data:
        return OpenClawConfig()

    telegram_data = _section(_section(data, "channels"), "telegram")
    accounts_data = _section(telegram_data, "accounts")
    accounts = {
        name: TelegramAccountConfig.from_dict(account)
        for name, account in accounts_data.items()
        if isinstance(account, dict)
    }
    telegram = TelegramConfig(
        bot_token=clean_string(telegram_data.get("botToken")),
        chat_id=clean_chat_id(telegram_data.get("chatId")),
        accounts=accounts,
    )

    logging_data = _section(data, "logging")
    logging_config = LoggingConfig(file=clean_string(logging_data.get("file")))

    return OpenClawConfig(telegram=telegram, logging=logging_config)


def load_config(
    path: Optional[Path] = None,
    file_reader: Optional[Callable[[Path], Optional[dict[str, Any]]]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> OpenClawConfig:
    """Load the openclaw configuration document.

    Args:
        path: Path to config file. If None, uses ``<stateDir>/openclaw.json``.
        file_reader: Injectable file reader for testing.
        env: Environment mapping used to locate the state directory.

    Returns:
        OpenClawConfig with values from the file, or empty defaults.
    """
    config_path = path if path is not None else get_config_path(env)
    reader = file_reader or _default_file_reader
    return parse_config(reader(config_path))
