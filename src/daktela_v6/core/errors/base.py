"""Error-to-code mapping registry.

Provides a centralized mapping from exception types to (error_code, error_type)
tuples, enabling consistent error payloads in the CLI.

Usage:
    from daktela_v6.core.errors.base import error_to_dict

    try:
        dispatcher.execute(variant)
    except Exception as e:
        payload = error_to_dict(e)
        if payload is None:
            raise  # Unknown error, re-raise
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Type

from daktela_v6.core.errors.request import (
    ConfigNotFoundError,
    DaktelaError,
    NotFoundError,
    RateLimitError,
    RequestError,
    UnknownRequestKindError,
)

ERROR_MAPPINGS: Dict[Type[Exception], Tuple[str, str]] = {
    RequestError: ("REQUEST_FAILED", "transport"),
    NotFoundError: ("NOT_FOUND", "not_found"),
    ConfigNotFoundError: ("MISSING_REQUIRED", "configuration"),
    RateLimitError: ("RATE_LIMIT_EXCEEDED", "rate_limit"),
    UnknownRequestKindError: ("VALIDATION_ERROR", "validation"),
}


def error_to_dict(exc: Exception) -> Optional[Dict[str, Any]]:
    """Convert a known exception to an error payload, or None if unknown.

    Looks up the exception's *exact* type in ERROR_MAPPINGS.

    Args:
        exc: The exception to convert.

    Returns:
        A dict with ``error_code``, ``error_type``, ``message`` and ``code``,
        or None if the exception type is not registered.
    """
    mapping = ERROR_MAPPINGS.get(type(exc))
    if mapping is None:
        return None

    error_code, error_type = mapping
    payload: Dict[str, Any] = {
        "error_code": error_code,
        "error_type": error_type,
        "message": str(exc),
    }
    if isinstance(exc, DaktelaError):
        payload["code"] = exc.code
    if isinstance(exc, RateLimitError):
        payload["retry_after_seconds"] = exc.retry_after_seconds
    return payload
