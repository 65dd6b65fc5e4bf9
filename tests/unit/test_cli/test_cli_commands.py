"""Unit tests for the daktela CLI commands.

Tests cover:
- JSON envelope shape for success and error documents
- Option parsing into request variants (filters, sorts, fields, payloads)
- Connector errors mapped to error codes
- Configuration errors when no instance is configured
"""

import json

import httpx
import pytest
from helpers import api_response, page_of

from daktela_v6.cli.main import cli
from daktela_v6.cli.output import RESPONSE_VERSION


def invoke(cli_runner, cli_obj, *args):
    result = cli_runner.invoke(cli, list(args), obj=cli_obj)
    return result, json.loads(result.stdout)


class TestRead:
    """Tests for the read command."""

    def test_read_multiple(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response(page_of(0, 2), total=2))

        result, data = invoke(
            cli_runner,
            cli_obj,
            "read",
            "Users",
            "--filter",
            "active:eq:1",
            "--sort",
            "name:desc",
            "--take",
            "2",
        )

        assert result.exit_code == 0, f"Unexpected output: {result.output}"
        assert data["success"] is True
        assert data["error"] is None
        assert data["meta"]["version"] == RESPONSE_VERSION
        assert data["meta"]["request"] == "GET Users"
        assert data["data"]["total"] == 2
        assert data["data"]["data"] == page_of(0, 2)

        query = api_server.query()
        assert query["filter[filters][0][value]"] == "1"
        assert query["sort[0][dir]"] == "desc"
        assert query["take"] == "2"

    def test_read_single_with_fields(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response({"name": "john"}))

        result, data = invoke(cli_runner, cli_obj, "read", "Users", "john", "--fields", "name, email")

        assert result.exit_code == 0
        assert data["data"]["data"] == {"name": "john"}
        assert api_server.requests[0].url.path == "/api/v6/users/john.json"
        assert api_server.query() == {"fields[0]": "name", "fields[1]": "email"}

    def test_read_relation(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response([]))

        result, data = invoke(cli_runner, cli_obj, "read", "Users", "john", "--relation", "Activities")

        assert result.exit_code == 0
        assert data["meta"]["request"] == "GET Users/john/activities"

    def test_relation_requires_object_name(self, cli_runner, cli_obj, api_server):
        result, data = invoke(cli_runner, cli_obj, "read", "Users", "--relation", "Activities")

        assert result.exit_code == 1
        assert data["data"]["error_code"] == "VALIDATION_ERROR"
        assert api_server.call_count == 0

    def test_read_all(self, cli_runner, cli_obj, api_server):
        api_server.add(
            api_response(page_of(0, 2), total=3),
            api_response(page_of(2, 1), total=3),
        )

        result, data = invoke(cli_runner, cli_obj, "read", "Users", "--all", "--take", "2")

        assert result.exit_code == 0
        assert len(data["data"]["data"]) == 3
        assert api_server.call_count == 2

    def test_read_with_limit(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response(page_of(0, 5), total=20))

        result, data = invoke(cli_runner, cli_obj, "read", "Users", "--take", "5", "--limit", "3")

        assert result.exit_code == 0
        assert data["data"]["count"] == 3
        assert data["meta"]["limit"] == 3
        assert api_server.call_count == 1

    def test_invalid_filter(self, cli_runner, cli_obj, api_server):
        result = cli_runner.invoke(cli, ["read", "Users", "--filter", "active"], obj=cli_obj)

        assert result.exit_code == 2
        assert api_server.call_count == 0

    def test_api_error_status(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response(None, errors=["Access denied"], status=403))

        result, data = invoke(cli_runner, cli_obj, "read", "Users")

        assert result.exit_code == 1
        assert data["success"] is False
        assert data["error"] == "API returned HTTP 403"
        assert data["data"]["error_code"] == "API_ERROR"
        assert data["data"]["details"]["errors"] == ["Access denied"]


class TestWrite:
    """Tests for create, update and delete."""

    def test_create_with_attrs_and_data(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response({"name": "john"}, status=201))

        result, data = invoke(
            cli_runner,
            cli_obj,
            "create",
            "Users",
            "--data",
            '{"title": "Agent", "name": "x"}',
            "--attr",
            "name=john",
        )

        assert result.exit_code == 0
        assert data["data"]["http_status"] == 201
        request = api_server.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"title": "Agent", "name": "john"}

    @pytest.mark.parametrize(
        "args",
        [
            ["--data", "[1, 2]"],
            ["--data", "{not json"],
            ["--attr", "missing-separator"],
        ],
    )
    def test_invalid_payload(self, cli_runner, cli_obj, api_server, args):
        result, data = invoke(cli_runner, cli_obj, "create", "Users", *args)

        assert result.exit_code == 1
        assert data["data"]["error_code"] == "VALIDATION_ERROR"
        assert data["meta"]["command"] == "create"
        assert api_server.call_count == 0

    def test_update(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response({"name": "john"}))

        result, data = invoke(cli_runner, cli_obj, "update", "Users", "john", "--attr", "title=Lead")

        assert result.exit_code == 0
        assert data["meta"]["request"] == "PUT Users/john"
        assert api_server.requests[0].method == "PUT"

    def test_delete(self, cli_runner, cli_obj, api_server):
        api_server.add(httpx.Response(204))

        result, data = invoke(cli_runner, cli_obj, "delete", "Users", "john")

        assert result.exit_code == 0
        assert data["data"]["http_status"] == 204
        assert api_server.requests[0].method == "DELETE"


class TestErrors:
    """Connector exceptions become JSON error documents."""

    def test_rate_limit(self, cli_runner, cli_obj, api_server):
        api_server.add(httpx.Response(429))

        result, data = invoke(cli_runner, cli_obj, "read", "Users")

        assert result.exit_code == 1
        assert data["error"] == "Rate limit exceeded. Retry after 5 seconds."
        assert data["data"]["error_code"] == "RATE_LIMIT_EXCEEDED"
        assert data["data"]["details"] == {"code": 429, "retry_after_seconds": 5}
        assert data["meta"]["command"] == "read"

    def test_connection_error(self, cli_runner, cli_obj, api_server):
        api_server.add(httpx.ConnectError("Connection refused"))

        result, data = invoke(cli_runner, cli_obj, "read", "Users")

        assert result.exit_code == 1
        assert data["data"]["error_code"] == "REQUEST_FAILED"
        assert "Connection refused" in data["error"]

    def test_missing_configuration(self, cli_runner, tmp_path, monkeypatch):
        for name in ("DAKTELA_INSTANCE", "DAKTELA_ACCESSTOKEN", "DAKTELA_CONFIG_FILE"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(cli, ["read", "Users"])
        data = json.loads(result.stdout)

        assert result.exit_code == 1
        assert data["data"]["error_code"] == "MISSING_REQUIRED"
        assert data["error"] == "Daktela instance not found in settings"


class TestHealth:
    def test_ping(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response({"user": "api"}))

        result, data = invoke(cli_runner, cli_obj, "ping")

        assert result.exit_code == 0
        assert data["data"] == {"instance": "https://test.daktela.com", "reachable": True}
        assert api_server.requests[0].url.path == "/api/v6/whoim.json"

    def test_ping_unreachable(self, cli_runner, cli_obj, api_server):
        api_server.add(httpx.ConnectError("Connection refused"))

        result, data = invoke(cli_runner, cli_obj, "ping")

        assert result.exit_code == 1
        assert data["data"]["error_code"] == "UNAVAILABLE"
        assert "remediation" in data["data"]

    def test_health(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response({"user": "api"}))

        result, data = invoke(cli_runner, cli_obj, "health")

        assert result.exit_code == 0
        assert data["data"]["healthy"] is True
        assert data["data"]["status_code"] == 200
        assert "latency_ms" in data["data"]

    def test_health_unhealthy_status(self, cli_runner, cli_obj, api_server):
        api_server.add(api_response(None, status=401))

        result, data = invoke(cli_runner, cli_obj, "health")

        assert result.exit_code == 1
        assert data["error"] == "Instance unhealthy (HTTP 401)"
        assert data["data"]["details"]["status_code"] == 401


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "daktela" in result.output
