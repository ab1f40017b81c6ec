"""Resolve where model switch notifications are delivered."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from model_notify.config import DEFAULT_ACCOUNT, OpenClawConfig, load_config
from model_notify.log_tail import DEFAULT_TAIL_BYTES, recover_chat_id
from model_notify.paths import first_env_value, resolve_log_path

logger = logging.getLogger(__name__)

CHAT_ID_ENVS = (
    "OPENCLAW_TELEGRAM_CHAT_ID",
    "TELEGRAM_CHAT_ID",
    "TELEGRAM_NOTIFY_CHAT_ID",
)
TOKEN_ENVS = ("OPENCLAW_TELEGRAM_BOT_TOKEN", "TELEGRAM_BOT_TOKEN")


@dataclass(frozen=True)
class DeliveryTarget:
    """Bot token and chat id a notification is sent with."""

    token: Optional[str] = None
    chat_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.token and self.chat_id)


def first_present(*candidates: tuple[str, Optional[str]]) -> tuple[Optional[str], Optional[str]]:
    """Pick the first non-empty value from ``(source, value)`` pairs.

    Returns:
        ``(source, value)`` of the winner, or ``(None, None)``.
    """
    for source, value in candidates:
        if value:
            return source, value
    return None, None


def resolve_delivery_target(
    env: Optional[Mapping[str, str]] = None,
    config: Optional[OpenClawConfig] = None,
    log_path: Optional[Path] = None,
    tail_bytes: int = DEFAULT_TAIL_BYTES,
) -> DeliveryTarget:
    """Resolve the bot token and chat id.

    Each field is resolved independently. Environment overrides win over
    the ``main`` account, which wins over the channel-level values. When no
    chat id is configured anywhere, the gateway log is scanned for the
    most recent inbound chat.

    Args:
        env: Environment mapping. Defaults to ``os.environ``.
        config: Pre-loaded config document. Loaded from disk if None.
        log_path: Log file to scan. Defaults to the configured gateway log.
        tail_bytes: How much of the log tail to scan.

    Returns:
        A DeliveryTarget whose missing fields are None.
    """
    if config is None:
        config = load_config(env=env)

    telegram = config.telegram
    account = telegram.account(DEFAULT_ACCOUNT)

    token_source, token = first_present(
        ("env", first_env_value(TOKEN_ENVS, env)),
        (f"account:{DEFAULT_ACCOUNT}", account.bot_token if account else None),
        ("config", telegram.bot_token),
    )
    chat_source, chat_id = first_present(
        ("env", first_env_value(CHAT_ID_ENVS, env)),
        (f"account:{DEFAULT_ACCOUNT}", account.chat_id if account else None),
        ("config", telegram.chat_id),
    )

    if chat_id is None:
        path = log_path if log_path is not None else resolve_log_path(config.logging.file, env)
        chat_id = recover_chat_id(path, tail_bytes)
        if chat_id:
            chat_source = "log"

    logger.debug(
        "Resolved delivery target: token from %s, chat id from %s",
        token_source or "nowhere",
        chat_source or "nowhere",
    )
    return DeliveryTarget(token=token, chat_id=chat_id)
