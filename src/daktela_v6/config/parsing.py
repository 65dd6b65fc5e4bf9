"""Parsing helpers for configuration values."""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _try_parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"true", "1", "yes", "on"}:
        return True
    if normalized in {"false", "0", "no", "off"}:
        return False
    return None


def _try_parse_int(value: Any, *, name: str) -> Optional[int]:
    try:
        return int(str(value).strip())
    except ValueError:
        logger.warning("Ignoring invalid integer for %s: %r", name, value)
        return None


def _try_parse_float(value: Any, *, name: str) -> Optional[float]:
    try:
        return float(str(value).strip())
    except ValueError:
        logger.warning("Ignoring invalid number for %s: %r", name, value)
        return None


def _normalize_log_level(value: str) -> str:
    normalized = value.strip().upper()
    if normalized not in _VALID_LOG_LEVELS:
        logger.warning(
            "Invalid log level '%s'. Falling back to 'INFO'. Valid options: %s",
            value,
            ", ".join(sorted(_VALID_LOG_LEVELS)),
        )
        return "INFO"
    return normalized


def _parse_auth_mode(value: Any) -> Optional[str]:
    """Normalize an auth mode setting to ``"header"`` or ``"query"``."""
    normalized = str(value).strip().lower()
    if normalized in {"header", "1"}:
        return "header"
    if normalized in {"query", "2"}:
        return "query"
    logger.warning("Ignoring invalid auth mode: %r (expected 'header' or 'query')", value)
    return None
