"""Shared helpers for building Daktela API requests.

Utilities are organized by cohesion:
    Secret redaction:
        - redact_secrets(text) -> str
        - redact_headers(headers) -> dict
    URL and endpoint helpers:
        - normalize_url(url) -> Optional[str]
        - lower_first(value) -> str
        - build_api_path(endpoint) -> str
    Query encoding:
        - flatten_query_params(params) -> list[tuple[str, str]]

SECURITY: access tokens must never appear in logs or error messages; every
log call that may carry request details goes through the redaction helpers.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

API_NAMESPACE = "/api/v6/"

# Regex to detect tokens in free-form text and URLs
_SECRET_PATTERN = re.compile(
    r"(?i)"
    r"(?:"
    r"(?:access[_-]?token|x-auth-token|api[_-]?key|token|bearer|authorization|secret|password)"
    r"[\s:=]+"
    r")"
    r"['\"]?([^\s'\"&]{4,})['\"]?",
)

# Headers that should never appear in logs/errors
_SENSITIVE_HEADERS = frozenset(
    {
        "x-auth-token",
        "authorization",
        "cookie",
        "set-cookie",
        "proxy-authorization",
    }
)


# ---------------------------------------------------------------------------
# Secret redaction
# ---------------------------------------------------------------------------


def redact_secrets(text: str) -> str:
    """Remove access tokens and similar secrets from a text string.

    Args:
        text: Input text that may contain secrets.

    Returns:
        Text with secret values replaced by ``"****"``.
    """
    if not text:
        return text

    def _replace(match: re.Match[str]) -> str:
        full = match.group(0)
        secret = match.group(1)
        return full.replace(secret, "****")

    return _SECRET_PATTERN.sub(_replace, text)


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of *headers* with sensitive values redacted."""
    return {
        key: ("****" if key.lower() in _SENSITIVE_HEADERS else value)
        for key, value in headers.items()
    }


# ---------------------------------------------------------------------------
# URL and endpoint helpers
# ---------------------------------------------------------------------------


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Normalize an instance URL into ``scheme://host[/path]`` form.

    ``https://`` is prepended when no scheme is present and a single
    trailing slash is removed.

    Args:
        url: Instance URL or bare host name. ``None`` passes through.

    Returns:
        The normalized URL, or None.
    """
    if url is None:
        return None

    if not url.startswith("http://") and not url.startswith("https://"):
        url = "https://" + url
    if url.endswith("/"):
        url = url[:-1]
    return url


def lower_first(value: str) -> str:
    """Lower-case the first character only (``"CampaignsRecords"`` -> ``"campaignsRecords"``)."""
    if not value:
        return value
    return value[0].lower() + value[1:]


def build_api_path(endpoint: str) -> str:
    """Return the API path for an endpoint, e.g. ``/api/v6/users/john.json``."""
    return f"{API_NAMESPACE}{lower_first(endpoint)}.json"


# ---------------------------------------------------------------------------
# Query encoding
# ---------------------------------------------------------------------------


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _flatten(prefix: str, value: Any, out: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, out)
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, out)
        return
    out.append((prefix, _scalar_to_str(value)))


def flatten_query_params(params: Optional[Mapping[str, Any]]) -> list[tuple[str, str]]:
    """Flatten nested query parameters into bracketed key/value pairs.

    The API expects the PHP form encoding for nested structures::

        {"filter": {"logic": "and", "filters": [{"field": "name"}]}}
        -> [("filter[logic]", "and"), ("filter[filters][0][field]", "name")]

    ``None`` values and empty containers produce no pairs; booleans are
    encoded as ``1``/``0``.

    Args:
        params: Mapping of top-level parameter names to values.

    Returns:
        Ordered list of ``(key, value)`` string pairs.
    """
    out: list[tuple[str, str]] = []
    if not params:
        return out
    for key, value in params.items():
        _flatten(str(key), value, out)
    return out
