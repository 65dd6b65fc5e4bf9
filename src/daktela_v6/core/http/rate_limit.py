"""Rate limit policy for HTTP 429 responses.

Decides how long to wait before retrying a throttled request and whether the
executor may wait at all. The ``Retry-After`` header is accepted either as a
number of seconds or as an HTTP date.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Numeric strings in the sense of "10", "-5", "10.9", " 1e2 "
_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")


def _parse_http_date(value: str) -> Optional[datetime]:
    """Parse an RFC 7231 HTTP date, falling back to ISO 8601.

    Naive results are interpreted as UTC.
    """
    parsed: Optional[datetime]
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class RateLimitPolicy(BaseModel):
    """How the executor reacts to HTTP 429.

    Example:
        >>> RateLimitPolicy().parse_retry_after("30")
        30
    """

    model_config = ConfigDict(frozen=True)

    auto_retry: bool = Field(default=True, description="Wait and retry automatically on 429")
    max_wait_seconds: int = Field(default=60, description="Longest wait honoured automatically")
    default_wait_seconds: int = Field(
        default=5, description="Wait used when Retry-After is missing or unparseable"
    )

    def parse_retry_after(
        self,
        header_value: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> int:
        """Convert a ``Retry-After`` header value into seconds.

        Numeric values are truncated toward zero and returned as-is, negative
        values included. Dates yield the whole seconds remaining until that
        moment, never less than zero.

        Args:
            header_value: Raw header value, or None when the header is absent.
            now: Reference time for HTTP dates (defaults to current UTC time).

        Returns:
            Seconds to wait; ``default_wait_seconds`` when the value is
            missing or unparseable.
        """
        if header_value is None or header_value == "":
            return self.default_wait_seconds

        if _NUMERIC_RE.match(header_value):
            try:
                return int(float(header_value))
            except OverflowError:
                return self.default_wait_seconds

        retry_at = _parse_http_date(header_value)
        if retry_at is None:
            return self.default_wait_seconds

        reference = now or datetime.now(timezone.utc)
        return max(0, int((retry_at - reference).total_seconds()))
