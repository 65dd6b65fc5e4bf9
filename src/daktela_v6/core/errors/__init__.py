"""Unified error hierarchy for the Daktela V6 connector.

Usage:
    from daktela_v6.core.errors import RequestError, RateLimitError

    # Registry helper
    from daktela_v6.core.errors import error_to_dict
"""

from daktela_v6.core.errors.base import ERROR_MAPPINGS, error_to_dict
from daktela_v6.core.errors.request import (
    ConfigNotFoundError,
    DaktelaError,
    NotFoundError,
    RateLimitError,
    RequestError,
    UnknownRequestKindError,
)

__all__ = [
    # Base / Registry
    "ERROR_MAPPINGS",
    "error_to_dict",
    # Request errors
    "DaktelaError",
    "RequestError",
    "NotFoundError",
    "ConfigNotFoundError",
    "RateLimitError",
    "UnknownRequestKindError",
]
