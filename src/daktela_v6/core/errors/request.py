"""Request execution error classes.

Every failure raised by the executor, the dispatcher, and configuration
loading derives from :class:`DaktelaError`. The ``code`` attribute mirrors the
HTTP status (or transport error number) associated with the failure.
"""

from __future__ import annotations

from typing import Optional


class DaktelaError(Exception):
    """Base exception for the Daktela V6 connector.

    Attributes:
        message: Human-readable error description
        code: Numeric code (HTTP status, transport errno, or fixed value)
        original_error: The underlying exception if available
    """

    def __init__(
        self,
        message: str,
        code: int = 0,
        original_error: Optional[BaseException] = None,
    ):
        self.message = message
        self.code = code
        self.original_error = original_error
        super().__init__(message)


class RequestError(DaktelaError):
    """Raised when a request cannot be completed.

    Covers transport failures, exhaustion of the retry budget and
    response bodies that are not valid JSON.
    """


class NotFoundError(RequestError):
    """Raised when a required identifier or field is missing.

    Raised client-side before any call is attempted (for example an
    update without an object name). The code is always 404.
    """

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message, code=404, original_error=original_error)


class ConfigNotFoundError(NotFoundError):
    """Raised when the instance host or access token is not configured."""


class RateLimitError(RequestError):
    """Raised when an HTTP 429 response cannot or should not be waited out.

    The retry_after_seconds field carries the wait time parsed from the
    ``Retry-After`` header (or the configured default).
    """

    def __init__(
        self,
        retry_after_seconds: int,
        original_error: Optional[BaseException] = None,
    ):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"Rate limit exceeded. Retry after {retry_after_seconds} seconds.",
            code=429,
            original_error=original_error,
        )


class UnknownRequestKindError(RequestError):
    """Raised when a request variant matches no dispatch rule."""

    def __init__(self, message: str = "Unknown request type"):
        super().__init__(message, code=500)
