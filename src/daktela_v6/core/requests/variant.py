"""Request variants describing one logical API operation.

A single ``RequestVariant`` type covers create, read, update and delete.
``kind`` selects the operation and ``read_mode`` selects the flavour of a
read (single record, one page, or every page).

Example usage:
    variant = (
        RequestVariant.read("Users")
        .add_filter("active", "eq", "1")
        .add_sort("created", "desc")
        .set_take(50)
    )
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Sequence

from daktela_v6.core.http.shared import lower_first

if TYPE_CHECKING:
    from daktela_v6.core.http.envelope import Envelope

SORT_DIRECTIONS = ("asc", "desc")
FILTER_LOGICS = ("and", "or")


class RequestKind(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class ReadMode(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    ALL = "all"


@dataclass
class FilterClause:
    field: str
    operator: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass
class FilterTree:
    """Flat list of filter clauses joined by one logic operator."""

    logic: str = "and"
    clauses: list[FilterClause] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.logic = _validate_logic(self.logic)

    def add(self, field_name: str, operator: str, value: Any) -> None:
        self.clauses.append(FilterClause(field_name, operator, value))

    def to_dict(self) -> dict[str, Any]:
        return {
            "logic": self.logic,
            "filters": [clause.to_dict() for clause in self.clauses],
        }


@dataclass
class Sort:
    field: str
    dir: str = "asc"

    def __post_init__(self) -> None:
        direction = str(self.dir).lower()
        if direction not in SORT_DIRECTIONS:
            raise ValueError(
                f"Invalid sort direction {self.dir!r}; expected one of {SORT_DIRECTIONS}"
            )
        self.dir = direction

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "dir": self.dir}


def _validate_logic(logic: str) -> str:
    value = str(logic).lower()
    if value not in FILTER_LOGICS:
        raise ValueError(f"Invalid filter logic {logic!r}; expected one of {FILTER_LOGICS}")
    return value


@dataclass
class RequestVariant:
    """Description of one create/read/update/delete operation.

    Once a dispatcher has executed the variant, ``executed`` is True and
    ``response`` holds the envelope; executing it again returns that envelope
    without another network call. Use ``clone()`` to issue a fresh request.

    Attributes:
        model: API model name (e.g. ``"Users"``, ``"CampaignsRecords"``)
        object_name: Target record name for single reads, updates, deletes
        relation: Related collection name for relation reads (first char lower-cased)
        attributes: Payload for create and update
        filters: Filter clauses for multiple/all reads
        sorts: Sort orders for multiple/all reads
        fields: Field projection for reads
        skip: Offset of the first record (multiple reads)
        take: Page size (multiple/all reads)
        additional_query_params: Extra query parameters sent verbatim
        kind: Operation kind
        read_mode: Read flavour, meaningful only when ``kind`` is READ
        skip_error_requests: Ignore error pages while reading all records
        executed: Whether the variant has been dispatched
        response: Cached envelope once executed
    """

    model: str
    kind: RequestKind = RequestKind.READ
    read_mode: ReadMode = ReadMode.MULTIPLE
    object_name: Optional[str] = None
    relation: Optional[str] = None
    attributes: dict[str, Any] = field(default_factory=dict)
    filters: FilterTree = field(default_factory=FilterTree)
    sorts: list[Sort] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    skip: int = 0
    take: int = 100
    additional_query_params: dict[str, Any] = field(default_factory=dict)
    skip_error_requests: bool = False
    executed: bool = False
    response: Optional["Envelope"] = None

    def __post_init__(self) -> None:
        self.kind = RequestKind(self.kind)
        self.read_mode = ReadMode(self.read_mode)
        if self.relation is not None:
            self.relation = lower_first(self.relation)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, model: str) -> "RequestVariant":
        return cls(model, kind=RequestKind.CREATE)

    @classmethod
    def read(cls, model: str, read_mode: ReadMode = ReadMode.MULTIPLE) -> "RequestVariant":
        return cls(model, kind=RequestKind.READ, read_mode=read_mode)

    @classmethod
    def update(cls, model: str) -> "RequestVariant":
        return cls(model, kind=RequestKind.UPDATE)

    @classmethod
    def delete(cls, model: str) -> "RequestVariant":
        return cls(model, kind=RequestKind.DELETE)

    # ------------------------------------------------------------------
    # Fluent setters
    # ------------------------------------------------------------------

    def set_object_name(self, object_name: Optional[str]) -> "RequestVariant":
        self.object_name = object_name
        return self

    def set_relation(self, relation: Optional[str]) -> "RequestVariant":
        self.relation = lower_first(relation) if relation is not None else None
        return self

    def set_read_mode(self, read_mode: ReadMode) -> "RequestVariant":
        self.read_mode = ReadMode(read_mode)
        return self

    def set_skip(self, skip: int) -> "RequestVariant":
        self.skip = skip
        return self

    def set_take(self, take: int) -> "RequestVariant":
        self.take = take
        return self

    def set_fields(self, fields: Sequence[str]) -> "RequestVariant":
        self.fields = list(fields)
        return self

    def set_skip_error_requests(self, skip_error_requests: bool) -> "RequestVariant":
        self.skip_error_requests = skip_error_requests
        return self

    def add_attribute(self, name: str, value: Any) -> "RequestVariant":
        """Set one payload attribute, replacing any previous value."""
        self.attributes[name] = value
        return self

    def add_attributes(self, attributes: Mapping[str, Any]) -> "RequestVariant":
        self.attributes.update(attributes)
        return self

    def add_additional_query_parameter(self, key: str, value: Any) -> "RequestVariant":
        """Add an extra query parameter, replacing any previous value for the key."""
        self.additional_query_params[key] = value
        return self

    def add_filter(self, field_name: str, operator: str, value: Any) -> "RequestVariant":
        self.filters.add(field_name, operator, value)
        return self

    def add_filter_from_list(
        self, filters: Iterable[Any] | Mapping[str, Any]
    ) -> "RequestVariant":
        """Add several filter clauses at once.

        Accepts any of:
            - ``[{"field": .., "operator": .., "value": ..}, ...]``
            - ``[[field, operator, value], ...]``
            - ``{"logic": "or", "filters": [...]}``, which also sets the logic

        Raises:
            ValueError: If a clause has an unsupported shape or the logic is invalid.
        """
        if isinstance(filters, Mapping):
            if "logic" in filters:
                self.filters.logic = _validate_logic(filters["logic"])
            clauses: Iterable[Any] = filters.get("filters", [])
        else:
            clauses = filters

        for clause in clauses:
            if isinstance(clause, Mapping):
                self.add_filter(clause["field"], clause["operator"], clause.get("value"))
            elif isinstance(clause, (list, tuple)) and len(clause) == 3:
                self.add_filter(clause[0], clause[1], clause[2])
            else:
                raise ValueError(f"Unsupported filter clause: {clause!r}")
        return self

    def add_sort(self, field_name: str, direction: str = "asc") -> "RequestVariant":
        """Append a sort clause.

        Raises:
            ValueError: If ``direction`` is not ``asc`` or ``desc``.
        """
        self.sorts.append(Sort(field_name, direction))
        return self

    # ------------------------------------------------------------------
    # Execution state
    # ------------------------------------------------------------------

    def mark_executed(self, response: "Envelope") -> None:
        self.response = response
        self.executed = True

    def clone(self) -> "RequestVariant":
        """Return an independent copy that has not been executed."""
        duplicate = copy.deepcopy(self)
        duplicate.executed = False
        duplicate.response = None
        return duplicate
