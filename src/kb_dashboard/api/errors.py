"""Exceptions raised by the knowledge-base API client."""

from __future__ import annotations


class KBClientError(Exception):
    """Base for every backend failure; ``str()`` is the user-facing message."""


class KBRequestError(KBClientError):
    """Transport failure or non-2xx HTTP response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class KBTimeoutError(KBRequestError):
    """Request exceeded its configured timeout."""


class KBResponseError(KBClientError):
    """Response body was not JSON or did not match the expected model."""
