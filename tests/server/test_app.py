"""Tests for server assembly and the MCP lifecycle methods."""

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from viewctl.server.app import ViewControlServer
from viewctl.server.config import LATEST_PROTOCOL_VERSION, ServerConfig
from viewctl.transports.http import HttpTransport
from viewctl.transports.stdio import StdioTransport


async def _result(server: ViewControlServer, method: str, params: Any = None) -> Any:
    envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": "t", "method": method}
    if params is not None:
        envelope["params"] = params
    response = await server.dispatcher.handle(envelope)
    assert response is not None
    assert response.error is None
    return response.result


class TestInitialize:
    async def test_handshake(self, server: ViewControlServer) -> None:
        result = await _result(
            server,
            "initialize",
            {"protocolVersion": "2025-03-26", "capabilities": {}, "clientInfo": {"name": "pytest"}},
        )
        assert result == {
            "protocolVersion": "2025-03-26",
            "capabilities": {"tools": {}},
            "serverInfo": {"name": "View Control MCP Server", "version": server.config.version},
        }

    @pytest.mark.parametrize("params", [{}, {"protocolVersion": "1999-01-01"}])
    async def test_falls_back_to_configured_version(self, server: ViewControlServer, params: dict) -> None:
        result = await _result(server, "initialize", params)
        assert result["protocolVersion"] == LATEST_PROTOCOL_VERSION

    async def test_initialized_notification_is_silent(self, server: ViewControlServer) -> None:
        response = await server.dispatcher.handle({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert response is None


async def test_ping(server: ViewControlServer) -> None:
    assert await _result(server, "ping") == {}


class TestToolsList:
    async def test_lists_every_tool(self, server: ViewControlServer) -> None:
        tools = (await _result(server, "tools/list"))["tools"]
        assert {t["name"] for t in tools} == {
            "get_mouse_position",
            "move_mouse",
            "click_mouse",
            "drag_and_drop",
            "type_text",
            "press_key",
            "hold_key",
            "keyboard_shortcut",
            "capture_screen",
            "capture_and_save_screen",
        }

    async def test_input_schemas(self, server: ViewControlServer) -> None:
        tools = {t["name"]: t for t in (await _result(server, "tools/list"))["tools"]}

        move = tools["move_mouse"]["inputSchema"]
        assert move["type"] == "object"
        assert set(move["required"]) == {"x", "y"}
        assert "title" not in move

        drag = tools["drag_and_drop"]["inputSchema"]
        assert {"startX", "startY", "endX", "endY", "button"} <= set(drag["properties"])

        assert tools["get_mouse_position"]["inputSchema"]["properties"] == {}

    async def test_listing_is_stable(self, server: ViewControlServer) -> None:
        first = await _result(server, "tools/list")
        second = await _result(server, "tools/list")
        assert first == second


class TestAssembly:
    def test_registers_direct_and_tool_methods(self, server: ViewControlServer) -> None:
        names = server.registry.method_names()
        assert "mouse/move" in names
        assert "tools/call/move_mouse" in names
        assert "initialize" in names

    def test_instances_are_independent(self, server: ViewControlServer) -> None:
        other = ViewControlServer(ServerConfig(name="other"))
        assert other.registry is not server.registry
        server.registry.freeze()
        assert not other.registry.frozen

    def test_stdio_transport_by_default(self, server: ViewControlServer) -> None:
        assert isinstance(server.create_transport(), StdioTransport)

    def test_http_transport(self) -> None:
        server = ViewControlServer(ServerConfig(transport="http", port=0))
        transport = server.create_transport()
        assert isinstance(transport, HttpTransport)
        assert transport.address == ("127.0.0.1", 0)

    async def test_run_serves_selected_transport(self, server: ViewControlServer) -> None:
        with patch.object(StdioTransport, "serve", AsyncMock()) as serve:
            await server.run()
        serve.assert_awaited_once()
