"""Shared fixtures for connector tests.

Provides a scripted ``httpx.MockTransport`` server and an executor factory
that records sleeps instead of blocking.
"""

from typing import Any, List

import httpx
import pytest
from helpers import BASE_URL, TOKEN, ScriptedServer

from daktela_v6.core.dispatcher import Dispatcher
from daktela_v6.core.http.executor import RequestExecutor


@pytest.fixture
def server():
    return ScriptedServer()


@pytest.fixture
def sleeps():
    """List of recorded sleep durations in seconds."""
    return []


@pytest.fixture
def make_executor(server, sleeps):
    """Factory for executors wired to the scripted server."""
    created: List[RequestExecutor] = []

    def factory(**kwargs: Any) -> RequestExecutor:
        kwargs.setdefault("http_client", httpx.Client(transport=server.transport()))
        kwargs.setdefault("sleep_func", sleeps.append)
        executor = RequestExecutor(BASE_URL, TOKEN, **kwargs)
        created.append(executor)
        return executor

    yield factory

    for executor in created:
        if executor.http_client is not None:
            executor.http_client.close()


@pytest.fixture
def dispatcher(make_executor):
    return Dispatcher(make_executor())
