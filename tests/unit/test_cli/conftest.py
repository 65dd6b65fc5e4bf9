"""Shared fixtures for CLI command tests."""

import httpx
import pytest
from click.testing import CliRunner
from helpers import BASE_URL, TOKEN, ScriptedServer

from daktela_v6.cli.context import CliContext
from daktela_v6.core.dispatcher import Dispatcher
from daktela_v6.core.http.executor import RequestExecutor


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def api_server():
    return ScriptedServer()


@pytest.fixture
def cli_obj(api_server):
    """CLI context whose dispatcher talks to the scripted server."""
    client = httpx.Client(transport=api_server.transport())
    executor = RequestExecutor(BASE_URL, TOKEN, http_client=client, sleep_func=lambda _: None)
    yield CliContext(dispatcher=Dispatcher(executor))
    client.close()
