"""Formatting utilities for CLI output."""

from typing import Optional

from model_notify.target import DeliveryTarget


def mask_token(token: Optional[str]) -> str:
    """Mask a bot token, keeping the bot id and the last few characters.

    Examples:
        >>> mask_token("123456:ABCDEFGHIJKLMNOP")
        '123456:****MNOP'
        >>> mask_token(None)
        '(not set)'
    """
    if not token:
        return "(not set)"
    bot_id, sep, secret = token.partition(":")
    if not sep:
        return "****" + token[-4:] if len(token) > 8 else "****"
    tail = secret[-4:] if len(secret) > 8 else ""
    return f"{bot_id}:****{tail}"


def format_target(target: DeliveryTarget) -> str:
    """Render a delivery target for display without exposing the token."""
    chat_id = target.chat_id or "(not set)"
    return f"token: {mask_token(target.token)}\nchat id: {chat_id}"
