"""Lazy pagination over multiple-read requests.

PaginationCursor fetches pages on demand with ``skip``/``take`` and yields
either individual records or whole envelopes. Every traversal starts from the
first page again; derived helpers such as ``count()`` or ``first()`` each
perform their own fetches.

Example usage:
    cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=50)
    for user in cursor.items():
        print(user["name"])

    # pull-based
    iterator = iter(cursor)
    while iterator.has_next():
        process(iterator.advance())
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional

from daktela_v6.core.dispatcher import READ_LIMIT, Dispatcher
from daktela_v6.core.http.envelope import Envelope
from daktela_v6.core.requests.variant import ReadMode, RequestKind, RequestVariant

logger = logging.getLogger(__name__)

_MISSING = object()


class PaginationCursor:
    """Lazy sequence of records from a multiple-read request.

    The base variant is cloned and forced to a multiple read, so the
    caller's variant is never modified or marked executed.

    Args:
        dispatcher: Dispatcher used to fetch each page.
        variant: Read variant describing model, filters, sorts and fields.
        page_size: Records requested per page.
        max_items: Stop after yielding this many records (None for no limit).
        stop_on_error: End at the first page with errors; otherwise skip it.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        variant: RequestVariant,
        page_size: int = 100,
        max_items: Optional[int] = None,
        stop_on_error: bool = True,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.dispatcher = dispatcher
        self.page_size = page_size
        self.max_items = max_items
        self.stop_on_error = stop_on_error

        self._base = variant.clone()
        self._base.kind = RequestKind.READ
        self._base.set_read_mode(ReadMode.MULTIPLE)

    def _fetch(self, offset: int) -> Envelope:
        variant = self._base.clone().set_skip(offset).set_take(self.page_size)
        return self.dispatcher.execute(variant)

    def items(self) -> Iterator[Any]:
        """Yield records in server order, fetching pages as needed."""
        if self.max_items is not None and self.max_items <= 0:
            return

        offset = 0
        yielded = 0
        for _ in range(READ_LIMIT):
            envelope = self._fetch(offset)

            if envelope.has_errors:
                if self.stop_on_error:
                    logger.debug("Stopping pagination on error page: offset=%d", offset)
                    return
                logger.warning("Skipping error page: offset=%d", offset)
                offset += self.page_size
                continue

            data = envelope.data
            if not isinstance(data, list) or not data:
                return

            for item in data:
                yield item
                yielded += 1
                if self.max_items is not None and yielded >= self.max_items:
                    return

            if len(data) < self.page_size or _reached_total(envelope, offset, len(data)):
                return

            offset += self.page_size

    def pages(self) -> Iterator[Envelope]:
        """Yield each page envelope, error pages included."""
        offset = 0
        for _ in range(READ_LIMIT):
            envelope = self._fetch(offset)
            yield envelope

            if envelope.has_errors:
                if self.stop_on_error:
                    return
                offset += self.page_size
                continue

            data = envelope.data
            if not isinstance(data, list) or len(data) < self.page_size:
                return
            if _reached_total(envelope, offset, len(data)):
                return

            offset += self.page_size

    def __iter__(self) -> "CursorIterator":
        return CursorIterator(self.items())

    def to_list(self) -> list[Any]:
        return list(self.items())

    def count(self) -> int:
        return sum(1 for _ in self.items())

    def first(self) -> Any:
        """Return the first record, or None when there is none."""
        return next(iter(self.items()), None)

    def is_empty(self) -> bool:
        return self.first() is None

    def each(self, callback: Callable[[Any, int], Any]) -> None:
        for index, item in enumerate(self.items()):
            callback(item, index)

    def filter(self, predicate: Callable[[Any], bool]) -> Iterator[Any]:
        return (item for item in self.items() if predicate(item))

    def map(self, fn: Callable[[Any], Any]) -> Iterator[Any]:
        return (fn(item) for item in self.items())


class CursorIterator:
    """Pull-based iterator over a cursor's records.

    ``has_next()`` fetches ahead by at most one record; ``advance()`` moves to
    it and exposes it as ``current``.
    """

    def __init__(self, items: Iterator[Any]):
        self._items = items
        self._pending: Any = _MISSING
        self._exhausted = False
        self.current: Any = None
        self.index = -1

    def has_next(self) -> bool:
        if self._pending is _MISSING and not self._exhausted:
            try:
                self._pending = next(self._items)
            except StopIteration:
                self._exhausted = True
        return self._pending is not _MISSING

    def advance(self) -> Any:
        """Move to the next record and return it.

        Raises:
            StopIteration: No records remain.
        """
        if not self.has_next():
            raise StopIteration
        self.current = self._pending
        self._pending = _MISSING
        self.index += 1
        return self.current

    def __iter__(self) -> "CursorIterator":
        return self

    def __next__(self) -> Any:
        return self.advance()


def _reached_total(envelope: Envelope, offset: int, count: int) -> bool:
    """True when the server-reported total says no records remain after this page.

    Totals smaller than the page itself are not trusted (single-object
    results report a total of 1).
    """
    return count <= envelope.total <= offset + count
