"""Core request execution layer: transport, variants, dispatch and pagination."""

from daktela_v6.core.dispatcher import READ_LIMIT, Dispatcher
from daktela_v6.core.json_value import JsonObject
from daktela_v6.core.pagination import CursorIterator, PaginationCursor
from daktela_v6.core.registry import ClientRegistry

__all__ = [
    "Dispatcher",
    "READ_LIMIT",
    "PaginationCursor",
    "CursorIterator",
    "ClientRegistry",
    "JsonObject",
]
