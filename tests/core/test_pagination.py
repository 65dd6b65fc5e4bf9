"""Unit tests for PaginationCursor and CursorIterator.

Tests cover:
- Page traversal order and fetch counts
- Stop conditions (short page, reported total, max_items, error pages)
- Derived helpers re-running the traversal
- Pull-based iteration
"""

import pytest
from helpers import api_response, page_of

from daktela_v6.core.pagination import PaginationCursor
from daktela_v6.core.requests import build_read_all_request, build_read_request


def names(items):
    return [item["name"] for item in items]


class TestTraversal:
    """Tests for items() across pages."""

    def test_four_items_in_two_pages(self, dispatcher, server):
        server.add(
            api_response(page_of(0, 2), total=4),
            api_response(page_of(2, 2), total=4),
        )
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=2)

        assert names(cursor.items()) == ["item_0", "item_1", "item_2", "item_3"]
        assert server.call_count == 2
        assert [r.url.params["skip"] for r in server.requests] == ["0", "2"]
        assert all(r.url.params["take"] == "2" for r in server.requests)

    def test_short_page_ends_iteration(self, dispatcher, server):
        server.add(
            api_response(page_of(0, 3)),
            api_response(page_of(3, 1)),
        )
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=3)

        assert len(cursor.to_list()) == 4
        assert server.call_count == 2

    def test_empty_page_ends_iteration(self, dispatcher, server):
        server.add(api_response(page_of(0, 2)), api_response([]))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=2)

        assert len(cursor.to_list()) == 2
        assert server.call_count == 2

    def test_max_items_truncates(self, dispatcher, server):
        server.add(api_response(page_of(0, 10), total=50))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=10, max_items=2)

        assert names(cursor.items()) == ["item_0", "item_1"]
        assert server.call_count == 1

    @pytest.mark.parametrize("max_items", [0, -1])
    def test_non_positive_max_items_fetches_nothing(self, dispatcher, server, max_items):
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), max_items=max_items)

        assert cursor.to_list() == []
        assert server.call_count == 0

    def test_non_list_page_ends_iteration(self, dispatcher, server):
        server.add(api_response({"name": "odd"}))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"))

        assert cursor.to_list() == []

    def test_invalid_page_size(self, dispatcher):
        with pytest.raises(ValueError, match="page_size"):
            PaginationCursor(dispatcher, build_read_request("Users"), page_size=0)


class TestErrorPages:
    """Tests for stop_on_error handling."""

    def test_stops_on_error_by_default(self, dispatcher, server):
        server.add(api_response([], errors=["Internal failure"], status=500))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=2)

        assert cursor.to_list() == []
        assert server.call_count == 1

    def test_skips_error_page(self, dispatcher, server):
        server.add(
            api_response([], errors=["Internal failure"], status=500),
            api_response(page_of(2, 1)),
        )
        cursor = PaginationCursor(
            dispatcher, build_read_request("Users"), page_size=2, stop_on_error=False
        )

        assert names(cursor.items()) == ["item_2"]
        assert server.query(1)["skip"] == "2"

    def test_pages_include_error_page(self, dispatcher, server):
        server.add(
            api_response([], errors=["Internal failure"], status=500),
            api_response(page_of(2, 1)),
        )
        cursor = PaginationCursor(
            dispatcher, build_read_request("Users"), page_size=2, stop_on_error=False
        )

        pages = list(cursor.pages())

        assert len(pages) == 2
        assert pages[0].errors == ["Internal failure"]
        assert pages[1].data == [{"name": "item_2"}]


class TestPages:
    def test_pages_yield_envelopes(self, dispatcher, server):
        server.add(
            api_response(page_of(0, 2), total=3),
            api_response(page_of(2, 1), total=3),
        )
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=2)

        pages = list(cursor.pages())

        assert [len(page.data) for page in pages] == [2, 1]
        assert all(page.total == 3 for page in pages)


class TestDerivedHelpers:
    """Each helper starts a new traversal from the first page."""

    def test_count_and_first_refetch(self, dispatcher, server):
        server.add(
            api_response(page_of(0, 2), total=2),
            api_response(page_of(0, 2), total=2),
        )
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=2)

        assert cursor.count() == 2
        assert cursor.first() == {"name": "item_0"}
        assert server.call_count == 2

    def test_empty_cursor(self, dispatcher, server):
        server.add(api_response([], total=0), api_response([], total=0))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"))

        assert cursor.is_empty() is True
        assert cursor.first() is None

    def test_each_passes_index(self, dispatcher, server):
        server.add(api_response(page_of(0, 3), total=3))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=5)
        seen = []

        cursor.each(lambda item, index: seen.append((index, item["name"])))

        assert seen == [(0, "item_0"), (1, "item_1"), (2, "item_2")]

    def test_filter_and_map_are_lazy(self, dispatcher, server):
        server.add(api_response(page_of(0, 4), total=4), api_response(page_of(0, 4), total=4))
        cursor = PaginationCursor(dispatcher, build_read_request("Users"), page_size=4)

        filtered = cursor.filter(lambda item: item["name"].endswith(("1", "3")))
        mapped = cursor.map(lambda item: item["name"].upper())
        assert server.call_count == 0

        assert names(filtered) == ["item_1", "item_3"]
        assert list(mapped) == ["ITEM_0", "ITEM_1", "ITEM_2", "ITEM_3"]


class TestBaseVariant:
    def test_base_variant_is_not_modified(self, dispatcher, server):
        server.add(api_response(page_of(0, 2), total=2))
        variant = build_read_all_request("Users").set_take(7).add_filter("active", "eq", "1")
        cursor = PaginationCursor(dispatcher, variant, page_size=2)

        cursor.to_list()

        assert variant.executed is False
        assert variant.take == 7
        assert variant.skip == 0
        assert server.query()["filter[filters][0][field]"] == "active"
        assert server.query()["take"] == "2"


class TestCursorIterator:
    def test_pull_based_iteration(self, dispatcher, server):
        server.add(api_response(page_of(0, 2), total=2))
        iterator = iter(PaginationCursor(dispatcher, build_read_request("Users"), page_size=2))

        assert iterator.current is None
        assert iterator.index == -1
        assert iterator.has_next() is True
        assert iterator.advance() == {"name": "item_0"}
        assert iterator.index == 0
        assert iterator.advance()["name"] == "item_1"
        assert iterator.current == {"name": "item_1"}
        assert iterator.has_next() is False

        with pytest.raises(StopIteration):
            iterator.advance()

    def test_has_next_is_idempotent(self, dispatcher, server):
        server.add(api_response(page_of(0, 1), total=1))
        iterator = iter(PaginationCursor(dispatcher, build_read_request("Users"), page_size=2))

        assert iterator.has_next() is True
        assert iterator.has_next() is True
        assert server.call_count == 1
        assert list(iterator) == [{"name": "item_0"}]
