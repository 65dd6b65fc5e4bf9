"""Response envelope returned by every API exchange."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Envelope:
    """Parsed result of one HTTP exchange with the Daktela API.

    Attributes:
        data: Decoded ``result.data`` payload (or the bare ``result``), None if absent
        total: Total record count reported by the server
        errors: Errors reported in the ``error`` section of the body
        http_status: HTTP status code of the response
    """

    data: Any = None
    total: int = 0
    errors: list[Any] = field(default_factory=list)
    http_status: int = 0

    @property
    def is_success(self) -> bool:
        """True for any 2xx status."""
        return 200 <= self.http_status < 300

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def first_error(self) -> Optional[Any]:
        return self.errors[0] if self.errors else None

    @property
    def is_empty(self) -> bool:
        """True when data is None, an empty list or an empty object.

        Scalars (including strings) are never considered empty.
        """
        if self.data is None:
            return True
        if isinstance(self.data, (list, tuple, dict)):
            return len(self.data) == 0
        return False
