"""Pytest configuration and shared fixtures."""

import json

import pytest


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Reset logging state before each test."""
    from model_notify.logging import reset_logging

    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def state_dir(tmp_path):
    """Empty openclaw state directory."""
    directory = tmp_path / "state"
    directory.mkdir()
    return directory


@pytest.fixture
def env(state_dir):
    """Environment pointing only at the temporary state directory."""
    return {"OPENCLAW_STATE_DIR": str(state_dir)}


@pytest.fixture
def write_json():
    """Write a JSON document, creating parent directories."""

    def _write(path, data):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data))
        return path

    return _write
