"""Delivery of model switch notifications."""

from .telegram import TelegramNotifier
from .warn_once import WarnOnce

__all__ = [
    "TelegramNotifier",
    "WarnOnce",
]
