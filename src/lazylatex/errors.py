"""Error taxonomy for marker conversion.

Core modules raise these (or record them in outcome objects); only the
command handlers and the CLI turn them into user-facing messages via
``friendly_error_message``.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

MESSAGE_PREFIX = "Lazy LaTeX"


class LazyLatexError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationError(LazyLatexError):
    """Missing or invalid backend configuration (key, endpoint, model).

    Fatal for the current operation; never retried automatically.
    """


class BackendError(LazyLatexError):
    """The text-generation backend failed or answered in an unexpected shape.

    Attributes:
        status: HTTP status code, when the failure was a non-success response.
        body: Raw response text, kept for the log.
    """

    def __init__(self, message: str, *, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class EmptyResultError(LazyLatexError):
    """Generation succeeded but produced blank text."""


def friendly_error_message(err: BaseException) -> str:
    """Map an error to the short message shown to the user."""
    if isinstance(err, ConfigurationError):
        return f"{MESSAGE_PREFIX}: {err}. Check the llm settings."
    if isinstance(err, EmptyResultError):
        return f"{MESSAGE_PREFIX}: LLM returned empty result."
    if isinstance(err, BackendError):
        if err.status in (401, 403):
            return (
                f"{MESSAGE_PREFIX}: the LLM provider rejected the API key "
                f"(HTTP {err.status})."
            )
        if err.status == 429:
            return f"{MESSAGE_PREFIX}: rate limited by the LLM provider. Try again."
        if err.status is not None and err.status >= 500:
            return (
                f"{MESSAGE_PREFIX}: the LLM provider had a server error "
                f"(HTTP {err.status})."
            )
        return f"{MESSAGE_PREFIX}: LLM request failed: {err}"
    return f"{MESSAGE_PREFIX}: unexpected error. See the log for details."


def log_backend_error(err: BaseException, context: str) -> None:
    """Write a backend failure with status and response text to the log."""
    if isinstance(err, BackendError):
        logger.error(
            "%s %s (status=%s) body=%r",
            context,
            err,
            err.status,
            err.body[:2000],
        )
    else:
        logger.error("%s %s", context, err, exc_info=err)
