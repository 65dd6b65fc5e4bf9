"""Named-field access over decoded JSON records.

API records arrive as plain dicts. JsonObject wraps one and fails loudly,
naming the field, when a required value is missing. Lookups accept either
snake_case or camelCase and fall back to the other spelling.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping, Optional

from daktela_v6.core.errors import NotFoundError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_MISSING = object()


def to_snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_camel_case(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


class JsonObject:
    """Read-only accessor for one JSON object.

    Example:
        >>> user = JsonObject({"name": "john", "lastLogin": None})
        >>> user.get("last_login")
        >>> user.get_or("title", "n/a")
        'n/a'
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: dict[str, Any] = dict(data or {})

    def _lookup(self, field: str) -> Any:
        for candidate in (field, to_camel_case(field), to_snake_case(field)):
            if candidate in self._data:
                return self._data[candidate]
        return _MISSING

    def get(self, field: str) -> Any:
        """Return the value of ``field``.

        Raises:
            NotFoundError: The field is not present under either spelling.
        """
        value = self._lookup(field)
        if value is _MISSING:
            raise NotFoundError(f"Field '{field}' not found")
        return value

    def get_or(self, field: str, default: Any = None) -> Any:
        value = self._lookup(field)
        return default if value is _MISSING else value

    def get_object(self, field: str) -> "JsonObject":
        """Return a nested object field wrapped as JsonObject."""
        value = self.get(field)
        if not isinstance(value, Mapping):
            raise NotFoundError(f"Field '{field}' is not an object")
        return JsonObject(value)

    def has(self, field: str) -> bool:
        return self._lookup(field) is not _MISSING

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __getitem__(self, field: str) -> Any:
        return self.get(field)

    def __contains__(self, field: object) -> bool:
        return isinstance(field, str) and self.has(field)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"JsonObject({self._data!r})"
