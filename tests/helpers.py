"""Response builders and the scripted mock server used across tests."""

from typing import Any, Callable, List, Optional, Union

import httpx

BASE_URL = "https://test.daktela.com"
TOKEN = "test-token-1234"

Scripted = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


def api_response(
    data: Any = None,
    *,
    total: Optional[int] = None,
    errors: Optional[list] = None,
    status: int = 200,
    headers: Optional[dict] = None,
) -> httpx.Response:
    """Build a Daktela-shaped JSON response."""
    result: dict = {"data": data}
    if total is not None:
        result["total"] = total
    body: dict = {"result": result}
    if errors is not None:
        body["error"] = errors
    return httpx.Response(status, json=body, headers=headers)


def page_of(start: int, count: int) -> List[dict]:
    return [{"name": f"item_{i}"} for i in range(start, start + count)]


class ScriptedServer:
    """MockTransport handler replaying scripted responses in order.

    Each scripted item is an ``httpx.Response``, an exception to raise, or a
    callable receiving the request. Every request is recorded.
    """

    def __init__(self, *responses: Scripted):
        self.responses: List[Scripted] = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            if isinstance(item, httpx.RequestError):
                item.request = request
            raise item
        if callable(item) and not isinstance(item, httpx.Response):
            return item(request)
        return item

    def add(self, *responses: Scripted) -> None:
        self.responses.extend(responses)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def query(self, index: int = -1) -> dict:
        """Query parameters of a recorded request as a flat dict."""
        return dict(self.requests[index].url.params.multi_items())

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
