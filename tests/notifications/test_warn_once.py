"""Tests for WarnOnce."""

import logging

from model_notify.notifications.warn_once import WarnOnce


class TestWarnOnce:
    """Tests for one-shot keyed warnings."""

    def test_first_warning_is_logged(self, caplog):
        warn = WarnOnce()

        assert warn("key", "something is wrong") is True
        assert "something is wrong" in caplog.text
        assert "key" in warn

    def test_repeat_key_is_suppressed(self, caplog):
        warn = WarnOnce()

        warn("key", "first")
        assert warn("key", "second") is False

        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["first"]

    def test_distinct_keys_each_warn(self, caplog):
        warn = WarnOnce()

        warn("a", "problem a")
        warn("b", "problem b")

        assert len(warn) == 2
        assert warn.keys == frozenset({"a", "b"})
        assert len(caplog.records) == 2

    def test_uses_given_logger(self, caplog):
        log = logging.getLogger("model_notify.test")
        warn = WarnOnce(log)

        warn("k", "custom logger")

        assert caplog.records[0].name == "model_notify.test"
        assert caplog.records[0].levelno == logging.WARNING
