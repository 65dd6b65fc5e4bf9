"""Request variants and their builders."""

from daktela_v6.core.requests.factory import (
    build_create_request,
    build_delete_request,
    build_read_all_request,
    build_read_multiple_request,
    build_read_relation_request,
    build_read_request,
    build_read_single_request,
    build_update_request,
)
from daktela_v6.core.requests.variant import (
    FilterClause,
    FilterTree,
    ReadMode,
    RequestKind,
    RequestVariant,
    Sort,
)

__all__ = [
    # Variant types
    "RequestVariant",
    "RequestKind",
    "ReadMode",
    "FilterTree",
    "FilterClause",
    "Sort",
    # Builders
    "build_read_request",
    "build_read_single_request",
    "build_read_multiple_request",
    "build_read_all_request",
    "build_read_relation_request",
    "build_create_request",
    "build_update_request",
    "build_delete_request",
]
