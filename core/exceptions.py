"""Exception hierarchy shared by services, storage and the HTTP layer.

Every error raised on purpose derives from ``SpookyError`` and carries the
HTTP status it maps to, an optional suggested action for the user and a
free-form ``details`` dict for logs. The FastAPI handlers in ``server.py``
turn these into the themed JSON error payload.
"""

from typing import Any, Optional


class SpookyError(Exception):
    """Base error with an HTTP status and a user-facing suggestion."""

    status_code: int = 500
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        suggested_action: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.suggested_action = suggested_action or self.default_suggested_action
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ValidationError(SpookyError):
    """Missing, oversized or malformed input (HTTP 400)."""

    status_code = 400


class NotFoundError(SpookyError):
    """Unknown story, quiz or route (HTTP 404)."""

    status_code = 404


class GenerationFailed(SpookyError):
    """A builder could not produce valid output from the given input.

    Retrying with the same input will fail the same way.
    """

    status_code = 500
    default_suggested_action = "Try again with a longer or different piece of study material."


class UpstreamServiceError(SpookyError):
    """The optional AI service failed or returned unusable output.

    Never reaches the client: generators catch it and fall back to templates.
    """

    status_code = 502


class StorageError(SpookyError):
    """Reading or writing the JSON data files failed (HTTP 500)."""

    status_code = 500
