"""Last-good auth profile lookup from the agent's auth profile store."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from model_notify.paths import get_auth_profiles_path

logger = logging.getLogger(__name__)

# Provider ids the store is keyed under, by the spellings users type.
PROVIDER_ALIASES = {
    "z.ai": "zai",
    "z-ai": "zai",
    "opencode-zen": "opencode",
    "qwen": "qwen-portal",
    "kimi-code": "kimi-coding",
}


def normalize_provider_id(provider: str) -> str:
    """Normalize a provider id the way the auth store keys it.

    Examples:
        >>> normalize_provider_id(" Z.AI ")
        'zai'
        >>> normalize_provider_id("OpenAI")
        'openai'
    """
    normalized = provider.strip().lower()
    return PROVIDER_ALIASES.get(normalized, normalized)


@dataclass
class AuthProfileStore:
    """In-memory copy of ``auth-profiles.json``.

    Attributes:
        last_good: Normalized provider id -> last profile that authenticated.
    """

    last_good: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Any) -> "AuthProfileStore":
        """Create from the decoded document, skipping malformed entries."""
        if not isinstance(d, dict):
            return cls()
        raw = d.get("lastGood")
        if not isinstance(raw, dict):
            return cls()
        return cls(
            last_good={
                key: value.strip()
                for key, value in raw.items()
                if isinstance(value, str) and value.strip()
            }
        )

    @classmethod
    def load(cls, path: Path) -> "AuthProfileStore":
        """Load the store from disk. Missing or malformed files load empty."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No auth profile store at {path}")
            return cls()
        except (OSError, ValueError, RecursionError) as e:
            logger.debug(f"Ignoring unreadable auth profile store {path}: {e}")
            return cls()
        return cls.from_dict(data)

    def last_good_profile(self, provider: str) -> Optional[str]:
        """Get the last-good profile for a provider.

        The normalized id is tried first, then the id exactly as given, so
        stores written before normalization still resolve.
        """
        profile = self.last_good.get(normalize_provider_id(provider))
        if profile is None:
            profile = self.last_good.get(provider)
        return profile


def resolve_last_good_profile(
    provider: str,
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Look up the last-good auth profile for a provider.

    Args:
        provider: Provider id as reported by the agent.
        path: Store location. Defaults to ``<agentDir>/auth-profiles.json``.
        env: Environment mapping used to locate the agent directory.

    Returns:
        Profile name, or None if unknown.
    """
    store_path = path if path is not None else get_auth_profiles_path(env)
    return AuthProfileStore.load(store_path).last_good_profile(provider)
