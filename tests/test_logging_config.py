"""Tests for log redaction."""

from __future__ import annotations

from acadcal.logging_config import _redact_secrets, get_logger


class TestRedactSecrets:
    """Tests for the secret redaction processor."""

    def test_masks_session_values(self) -> None:
        event = {"event": "request", "token": "abc", "Cookie": "a=b", "x_csrf_token": "xyz"}
        result = _redact_secrets(None, "info", event)
        assert result["token"] == "***"
        assert result["Cookie"] == "***"
        assert result["x_csrf_token"] == "***"
        assert result["event"] == "request"

    def test_leaves_empty_and_other_values(self) -> None:
        result = _redact_secrets(None, "info", {"token": "", "url": "https://portal.example.edu"})
        assert result == {"token": "", "url": "https://portal.example.edu"}

    def test_get_logger(self) -> None:
        assert get_logger("acadcal.test") is not None
