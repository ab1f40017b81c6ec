"""Tests for signature module."""

import pytest

from model_notify.signature import build_signature, format_switch_message


class TestBuildSignature:
    """Test signature construction."""

    def test_without_profile(self):
        assert build_signature("p", "m") == "p/m@unknown"

    def test_with_profile(self):
        assert build_signature("p", "m", "x") == "p/m@x"

    def test_empty_profile_is_unknown(self):
        assert build_signature("p", "m", "") == "p/m@unknown"

    def test_deterministic(self):
        assert build_signature("openai", "gpt-5", "a") == build_signature(
            "openai", "gpt-5", "a"
        )

    @pytest.mark.parametrize(
        "changed",
        [
            ("anthropic", "gpt-5", "work"),
            ("openai", "gpt-5-mini", "work"),
            ("openai", "gpt-5", "personal"),
            ("openai", "gpt-5", None),
        ],
    )
    def test_any_field_change_changes_signature(self, changed):
        assert build_signature(*changed) != build_signature("openai", "gpt-5", "work")


class TestFormatSwitchMessage:
    """Test notification text."""

    def test_unknown_profile(self):
        assert (
            format_switch_message("openai", "gpt-5")
            == "Model switch -> openai/gpt-5 @ unknown"
        )

    def test_known_profile(self):
        assert (
            format_switch_message("anthropic", "claude", "team")
            == "Model switch -> anthropic/claude @ team"
        )
