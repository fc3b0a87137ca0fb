"""Tests for specscout.server -- MCP dispatch over in-memory streams."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from specscout.exceptions import DocumentSourceError
from specscout.models import SourceConfig
from specscout.server import SERVER_NAME, MCPServer
from specscout.server.tools import TOOLS
from specscout.sources import BucketSource, LocalDirectorySource


def _request(method: str, params: dict[str, Any] | None = None, id: Any = 1) -> str:
    message: dict[str, Any] = {"jsonrpc": "2.0", "id": id, "method": method}
    if params is not None:
        message["params"] = params
    return json.dumps(message)


@pytest.fixture
def server(docs_dir: Path) -> MCPServer:
    return MCPServer(LocalDirectorySource(docs_dir), writer=io.StringIO())


def _call(server: MCPServer, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    response = server.process_line(_request(method, params))
    assert response is not None
    return response


def _tool_text(server: MCPServer, name: str, arguments: dict[str, Any]) -> str:
    response = _call(server, "tools/call", {"name": name, "arguments": arguments})
    return response["result"]["content"][0]["text"]


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_initialize(self, server: MCPServer) -> None:
        result = _call(server, "initialize", {"protocolVersion": "2024-11-05"})["result"]
        assert result["protocolVersion"] == "2024-11-05"
        assert result["serverInfo"]["name"] == SERVER_NAME
        assert set(result["capabilities"]) == {"resources", "tools"}

    def test_initialized_notification_gets_no_response(self, server: MCPServer) -> None:
        line = json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert server.process_line(line) is None
        assert server._writer.getvalue() == ""

    def test_unknown_method(self, server: MCPServer) -> None:
        response = _call(server, "prompts/list")
        assert response["error"] == {"code": -32601, "message": "Method not found: prompts/list"}

    def test_unknown_notification_is_ignored(self, server: MCPServer) -> None:
        line = json.dumps({"jsonrpc": "2.0", "method": "notifications/cancelled"})
        assert server.process_line(line) is None

    def test_parse_error_keeps_going(self, server: MCPServer) -> None:
        response = server.process_line("{not json")
        assert response == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32700, "message": "Parse error"},
        }
        assert _call(server, "tools/list")["id"] == 1

    def test_blank_line(self, server: MCPServer) -> None:
        assert server.process_line("   \n") is None

    def test_serve_until_eof(self, docs_dir: Path) -> None:
        reader = io.StringIO(
            _request("initialize", id=1)
            + "\n"
            + json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
            + "\n\n"
            + _request("tools/list", id=2)
            + "\n"
        )
        writer = io.StringIO()
        MCPServer(LocalDirectorySource(docs_dir), reader=reader, writer=writer).serve()

        lines = writer.getvalue().splitlines()
        assert [json.loads(line)["id"] for line in lines] == [1, 2]

    def test_serve_checks_store_first(self, tmp_path: Path) -> None:
        server = MCPServer(
            LocalDirectorySource(tmp_path / "absent"),
            reader=io.StringIO(_request("tools/list")),
            writer=io.StringIO(),
        )
        with pytest.raises(DocumentSourceError):
            server.serve()


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class TestResources:
    def test_list(self, server: MCPServer, docs_dir: Path) -> None:
        resources = _call(server, "resources/list")["result"]["resources"]
        assert [r["name"] for r in resources] == ["cards.yaml", "users.yml"]
        assert resources[0]["mimeType"] == "application/x-yaml"
        assert resources[0]["uri"] == (docs_dir.resolve() / "cards.yaml").as_uri()
        assert resources[0]["description"].startswith("Swagger/OpenAPI YAML documentation (Size: ")

    def test_read(self, server: MCPServer, users_yaml: str) -> None:
        uri = _call(server, "resources/list")["result"]["resources"][1]["uri"]
        contents = _call(server, "resources/read", {"uri": uri})["result"]["contents"]
        assert contents == [{"uri": uri, "mimeType": "application/x-yaml", "text": users_yaml}]

    def test_read_foreign_uri(self, server: MCPServer) -> None:
        response = _call(server, "resources/read", {"uri": "s3://elsewhere/a.yaml"})
        assert response["error"] == {"code": -32602, "message": "Invalid resource URI"}

    def test_read_missing_params(self, server: MCPServer) -> None:
        response = _call(server, "resources/read")
        assert response["error"] == {"code": -32602, "message": "Invalid params"}

    def test_read_missing_file(self, server: MCPServer, docs_dir: Path) -> None:
        uri = (docs_dir.resolve() / "gone.yaml").as_uri()
        response = _call(server, "resources/read", {"uri": uri})
        assert response["error"]["code"] == -32603
        assert response["error"]["message"].startswith("Failed to read file: ")


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class TestTools:
    def test_list(self, server: MCPServer) -> None:
        tools = _call(server, "tools/list")["result"]["tools"]
        assert [t["name"] for t in tools] == [t.name for t in TOOLS]
        details = next(t for t in tools if t["name"] == "get_endpoint_details")
        assert details["inputSchema"]["required"] == ["path"]

    def test_get_endpoint_details(self, server: MCPServer) -> None:
        text = _tool_text(server, "get_endpoint_details", {"path": "/users", "method": "get"})
        assert text.startswith(
            "\U0001f3af Found 1 endpoint(s) matching path '/users' with method GET:"
        )
        assert "\U0001f50d **GET /users**" in text
        assert "List users" in text

    def test_get_endpoint_details_without_path(self, server: MCPServer) -> None:
        response = _call(
            server, "tools/call", {"name": "get_endpoint_details", "arguments": {}}
        )
        assert response["error"] == {
            "code": -32602,
            "message": "Path parameter is required and must be a string",
        }

    def test_get_endpoint_details_no_match(self, server: MCPServer) -> None:
        text = _tool_text(server, "get_endpoint_details", {"path": "/missing"})
        assert text.startswith("❌ No endpoints found matching path '/missing'")

    def test_list_yaml_files(self, server: MCPServer) -> None:
        text = _tool_text(server, "list_yaml_files", {})
        assert text.startswith("Found 2 YAML files:\n\n")
        assert "\U0001f4c4 **cards.yaml**\n   - Key: cards.yaml\n" in text

    def test_list_yaml_files_with_prefix(self, server: MCPServer) -> None:
        text = _tool_text(server, "list_yaml_files", {"prefix": "team/"})
        assert text.startswith("Found 1 YAML files with prefix 'team/':")
        assert "   - Key: team/users.yml\n" in text

    def test_search_yaml_files(self, server: MCPServer) -> None:
        text = _tool_text(server, "search_yaml_files", {"pattern": "CARD"})
        assert text.startswith("Found 1 YAML files matching pattern 'CARD':")

    def test_search_yaml_files_requires_pattern(self, server: MCPServer) -> None:
        response = _call(server, "tools/call", {"name": "search_yaml_files", "arguments": {}})
        assert response["error"]["code"] == -32602

    def test_unknown_tool(self, server: MCPServer) -> None:
        response = _call(server, "tools/call", {"name": "drop_tables", "arguments": {}})
        assert response["error"] == {"code": -32601, "message": "Unknown tool: drop_tables"}

    def test_store_failure_is_internal_error(self, tmp_path: Path) -> None:
        server = MCPServer(LocalDirectorySource(tmp_path / "absent"), writer=io.StringIO())
        response = _call(server, "tools/call", {"name": "list_yaml_files", "arguments": {}})
        assert response["error"]["code"] == -32603


# ---------------------------------------------------------------------------
# Failures keep the loop alive
# ---------------------------------------------------------------------------


class _BrokenListing(LocalDirectorySource):
    def list_documents(self, prefix: str = "") -> list:
        raise RuntimeError("listing exploded")


class TestFailureIsolation:
    def test_unexpected_error_is_internal_error(self, docs_dir: Path) -> None:
        server = MCPServer(_BrokenListing(docs_dir), writer=io.StringIO())
        response = _call(server, "resources/list")
        assert response["error"]["code"] == -32603
        assert "listing exploded" in response["error"]["message"]
        assert "result" in _call(server, "tools/list")

    def test_bucket_transport_error_does_not_stop_serving(self, monkeypatch) -> None:
        monkeypatch.setattr("specscout.sources.bucket.time.sleep", lambda _: None)

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "HEAD":
                return httpx.Response(200)
            raise httpx.RemoteProtocolError("peer closed", request=request)

        config = SourceConfig(
            type="s3", bucket="api-docs", endpoint="http://minio.test", max_retries=0
        )
        reader = io.StringIO(
            _request("resources/list", id=1) + "\n" + _request("tools/list", id=2) + "\n"
        )
        writer = io.StringIO()
        with BucketSource(config, transport=httpx.MockTransport(handler)) as source:
            MCPServer(source, reader=reader, writer=writer).serve()

        responses = [json.loads(line) for line in writer.getvalue().splitlines()]
        assert [r["id"] for r in responses] == [1, 2]
        assert responses[0]["error"]["code"] == -32603
        assert "result" in responses[1]
