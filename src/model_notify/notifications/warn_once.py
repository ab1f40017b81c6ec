"""Warnings that are only logged the first time they occur."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class WarnOnce:
    """Logs each warning key at most once for the lifetime of the instance.

    Keys identify a class of problem ("missing token", "send failed with
    429") so a misconfiguration is reported once instead of every turn.

    Usage:
        warn = WarnOnce()
        warn("telegram-token", "[model-notify] Missing Telegram bot token.")
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger
        self._keys: set[str] = set()

    def __call__(self, key: str, message: str) -> bool:
        """Log ``message`` unless ``key`` was already warned.

        Returns:
            True if the warning was logged, False if suppressed.
        """
        if key in self._keys:
            return False
        self._keys.add(key)
        self._log.warning(message)
        return True

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> frozenset[str]:
        """Keys warned so far."""
        return frozenset(self._keys)
