"""Recover the last seen Telegram chat id from the gateway log.

The gateway logs every inbound Telegram update as
``telegram update: {...json...}``. When no chat id is configured we scan
the end of that log, newest line first, and take the chat of the most
recent update. Lines may be plain text or JSON log records whose message
sits under the ``"1"`` key.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_TAIL_BYTES = 512 * 1024

UPDATE_MARKER = "telegram update:"
RECORD_MESSAGE_KEY = "1"

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_PAYLOAD_RE = re.compile(r"telegram update: (\{.*\})")
# Chat id inside an update that was itself escaped into a JSON string.
_ESCAPED_CHAT_ID_RE = re.compile(r'"chat":\\\{\\"id\\":(-?\d+)')


def read_log_tail(path: Path, max_bytes: int = DEFAULT_TAIL_BYTES) -> str:
    """Read at most the last ``max_bytes`` of a file as text.

    Returns:
        Decoded tail, or an empty string if the file can't be read.
    """
    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            start = max(0, size - max_bytes)
            f.seek(start)
            data = f.read(size - start)
    except OSError as e:
        logger.debug(f"Could not read log tail {path}: {e}")
        return ""
    return data.decode("utf-8", errors="replace")


def _chat_id_from_update(update: Any) -> Any:
    """Get ``chat.id`` from a message or channel post update."""
    if not isinstance(update, dict):
        return None
    for kind in ("message", "channel_post"):
        entry = update.get(kind)
        chat = entry.get("chat") if isinstance(entry, dict) else None
        chat_id = chat.get("id") if isinstance(chat, dict) else None
        if chat_id is not None:
            return chat_id
    return None


def _format_chat_id(chat_id: Any) -> Optional[str]:
    if isinstance(chat_id, bool):
        return None
    if isinstance(chat_id, int):
        return str(chat_id)
    if isinstance(chat_id, float):
        return str(int(chat_id)) if chat_id.is_integer() else str(chat_id)
    if isinstance(chat_id, str) and chat_id.strip():
        return chat_id.strip()
    return None


def _line_text(line: str) -> str:
    """Unwrap a JSON log record to its message text, if it is one."""
    if not line.strip().startswith("{"):
        return line
    try:
        record = json.loads(line)
    except (ValueError, RecursionError):
        return line
    if isinstance(record, dict):
        message = record.get(RECORD_MESSAGE_KEY)
        if isinstance(message, str):
            return message
    return line


def extract_chat_id_from_line(line: str) -> Optional[str]:
    """Extract the chat id of a logged Telegram update.

    Args:
        line: One log line, plain or a JSON log record.

    Returns:
        Chat id as a string, or None if the line holds no usable update.
    """
    text = _line_text(line)
    if UPDATE_MARKER not in text:
        return None

    match = _PAYLOAD_RE.search(text)
    if not match:
        return None

    try:
        update = json.loads(match.group(1))
    except (ValueError, RecursionError):
        pass
    else:
        chat_id = _format_chat_id(_chat_id_from_update(update))
        if chat_id:
            return chat_id

    fallback = _ESCAPED_CHAT_ID_RE.search(text)
    if fallback:
        return fallback.group(1)
    return None


def recover_chat_id(
    path: Path, max_bytes: int = DEFAULT_TAIL_BYTES
) -> Optional[str]:
    """Find the chat id of the most recent update in the log tail.

    Args:
        path: Gateway log file.
        max_bytes: How much of the end of the file to scan.

    Returns:
        Most recent chat id, or None if none can be recovered.
    """
    tail = read_log_tail(path, max_bytes)
    if not tail:
        return None

    for line in reversed(_LINE_SPLIT_RE.split(tail)):
        chat_id = extract_chat_id_from_line(line)
        if chat_id:
            logger.debug(f"Recovered chat id from {path}")
            return chat_id
    return None
