"""Model identity signatures and switch messages."""

from typing import Optional

UNKNOWN_PROFILE = "unknown"


def profile_label(profile_id: Optional[str]) -> str:
    """Profile name, or ``unknown`` when there is none."""
    return profile_id if profile_id else UNKNOWN_PROFILE


def build_signature(
    provider: str, model_id: str, profile_id: Optional[str] = None
) -> str:
    """Canonical ``provider/model@profile`` string for change detection.

    Examples:
        >>> build_signature("openai", "gpt-5")
        'openai/gpt-5@unknown'
        >>> build_signature("openai", "gpt-5", "work")
        'openai/gpt-5@work'
    """
    return f"{provider}/{model_id}@{profile_label(profile_id)}"


def format_switch_message(
    provider: str, model_id: str, profile_id: Optional[str] = None
) -> str:
    """Notification text for a switch to the given model."""
    return f"Model switch -> {provider}/{model_id} @ {profile_label(profile_id)}"
