"""Tests for error classes and user-facing messages."""

from __future__ import annotations

import logging

import pytest

from lazylatex.errors import (
    BackendError,
    ConfigurationError,
    EmptyResultError,
    LazyLatexError,
    friendly_error_message,
    log_backend_error,
)


class TestFriendlyErrorMessage:
    """Every message is short and prefixed with the product name."""

    @pytest.mark.parametrize(
        ("error", "fragment"),
        [
            (ConfigurationError("No API key set"), "No API key set"),
            (EmptyResultError("x"), "LLM returned empty result"),
            (BackendError("x", status=401), "rejected the API key"),
            (BackendError("x", status=403), "rejected the API key"),
            (BackendError("x", status=429), "rate limited"),
            (BackendError("x", status=502), "server error (HTTP 502)"),
            (BackendError("timed out"), "LLM request failed: timed out"),
            (RuntimeError("?"), "unexpected error"),
        ],
    )
    def test_messages(self, error: BaseException, fragment: str) -> None:
        message = friendly_error_message(error)
        assert message.startswith("Lazy LaTeX: ")
        assert fragment in message

    def test_hierarchy(self) -> None:
        for cls in (ConfigurationError, BackendError, EmptyResultError):
            assert issubclass(cls, LazyLatexError)


class TestLogBackendError:
    """Tests for log_backend_error."""

    def test_logs_status_and_body(self, caplog: pytest.LogCaptureFixture) -> None:
        err = BackendError("failed", status=500, body="upstream exploded")
        with caplog.at_level(logging.ERROR, logger="lazylatex.errors"):
            log_backend_error(err, "Error on line 3.")
        assert "Error on line 3." in caplog.text
        assert "status=500" in caplog.text
        assert "upstream exploded" in caplog.text

    def test_logs_other_errors(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="lazylatex.errors"):
            log_backend_error(EmptyResultError("nothing"), "Manual conversion.")
        assert "Manual conversion. nothing" in caplog.text
