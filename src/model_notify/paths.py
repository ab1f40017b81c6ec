"""Filesystem locations of the openclaw state, agent and log files."""

import os
from pathlib import Path
from typing import Mapping, Optional

STATE_DIR_ENV = "OPENCLAW_STATE_DIR"
AGENT_DIR_ENVS = ("OPENCLAW_AGENT_DIR", "PI_CODING_AGENT_DIR")

CONFIG_FILENAME = "openclaw.json"
AUTH_PROFILES_FILENAME = "auth-profiles.json"


def env_value(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Read an environment variable, trimmed. Blank values count as unset."""
    source = os.environ if env is None else env
    value = source.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def first_env_value(
    names: tuple[str, ...], env: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """Return the first non-blank value among the named variables."""
    for name in names:
        value = env_value(name, env)
        if value:
            return value
    return None


def expand_home(value: str) -> Path:
    """Expand a leading ``~`` to the user's home directory.

    Only ``~`` and ``~/...`` are handled; ``~user`` forms are not.
    """
    if not value.startswith("~"):
        return Path(value)
    home = Path.home()
    if value == "~":
        return home
    return home / value[2:]


def resolve_state_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Get the openclaw state directory.

    Args:
        env: Environment mapping. Defaults to ``os.environ``.

    Returns:
        ``$OPENCLAW_STATE_DIR`` if set, else ``~/.openclaw``.
    """
    from_env = env_value(STATE_DIR_ENV, env)
    if from_env:
        return expand_home(from_env)
    return Path.home() / ".openclaw"


def resolve_agent_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Get the agent directory holding the auth profile store."""
    from_env = first_env_value(AGENT_DIR_ENVS, env)
    if from_env:
        return expand_home(from_env)
    return resolve_state_dir(env) / "agents" / "main" / "agent"


def get_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Path to ``openclaw.json`` inside the state directory."""
    return resolve_state_dir(env) / CONFIG_FILENAME


def get_auth_profiles_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Path to ``auth-profiles.json`` inside the agent directory."""
    return resolve_agent_dir(env) / AUTH_PROFILES_FILENAME


def resolve_log_path(
    configured: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Path:
    """Get the gateway log file path.

    Args:
        configured: ``logging.file`` from the config document, if any.
        env: Environment mapping. Defaults to ``os.environ``.

    Returns:
        The configured file (home-expanded), else
        ``<stateDir>/workspace/logs/openclaw.log``.
    """
    if configured and configured.strip():
        return expand_home(configured.strip())
    return resolve_state_dir(env) / "workspace" / "logs" / "openclaw.log"
