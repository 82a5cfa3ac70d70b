"""Server assembly — registry population, lifecycle methods and transports."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from viewctl.capabilities.keyboard import PyAutoGuiKeyboard
from viewctl.capabilities.pointer import PyAutoGuiPointer
from viewctl.capabilities.screen import PyAutoGuiScreen
from viewctl.protocol.dispatcher import Dispatcher
from viewctl.protocol.models import ApplicationFailure, Ok, ToolCallResult
from viewctl.protocol.registry import MethodRegistry, tool_method_name
from viewctl.server.config import SUPPORTED_PROTOCOL_VERSIONS, ServerConfig
from viewctl.server.params import EmptyParams, InitializeParams, ToolCallParams
from viewctl.server.tools import HostControlHandlers, register_host_tools
from viewctl.transports.http import HttpTransport
from viewctl.transports.stdio import StdioTransport
from viewctl.utils.telemetry import ATTR_TOOL_NAME

if TYPE_CHECKING:
    from viewctl.capabilities.provider import KeyInput, PointerControl, ScreenCapture

logger = logging.getLogger(__name__)


def register_lifecycle(registry: MethodRegistry, dispatcher: Dispatcher, config: ServerConfig) -> None:
    """Register the MCP handshake, discovery and tool-invocation methods."""

    async def initialize(params: InitializeParams) -> dict[str, Any]:
        requested = params.protocol_version
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else config.protocol_version
        logger.info("Initialize from %s (protocol %s)", params.client_info.get("name", "unknown client"), version)
        return {
            "protocolVersion": version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": config.name, "version": config.version},
        }

    async def initialized(params: Any) -> None:
        logger.info("Client initialized")

    async def ping(params: Any) -> dict[str, Any]:
        return {}

    async def list_tools(params: Any) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in registry.list_tools()]}

    async def call_tool(params: ToolCallParams) -> ToolCallResult:
        trace.get_current_span().set_attribute(ATTR_TOOL_NAME, params.name)
        method = tool_method_name(params.name)
        if not registry.has(method):
            return ToolCallResult.from_error(f"Tool not found: {params.name}")

        outcome = await dispatcher.invoke(method, params.arguments)
        if isinstance(outcome, Ok):
            value = outcome.value
            if isinstance(value, dict) and "content" in value:
                return ToolCallResult.model_validate(value)
            return ToolCallResult.from_payload(value)
        if isinstance(outcome, ApplicationFailure):
            return outcome.result
        return ToolCallResult.from_error(outcome.message)

    registry.register("initialize", initialize, InitializeParams)
    registry.register("notifications/initialized", initialized)
    registry.register("ping", ping)
    registry.register("tools/list", list_tools, EmptyParams)
    registry.register("tools/call", call_tool, ToolCallParams)


def build_dispatcher(
    config: ServerConfig,
    pointer: PointerControl,
    keyboard: KeyInput,
    screen: ScreenCapture,
) -> Dispatcher:
    """Create a fresh registry with every method registered and wrap it."""
    registry = MethodRegistry()
    dispatcher = Dispatcher(registry)
    register_lifecycle(registry, dispatcher, config)
    register_host_tools(registry, HostControlHandlers(pointer, keyboard, screen))
    logger.debug("Registered %d tools", len(registry.list_tools()))
    return dispatcher


class ViewControlServer:
    """One independent server instance: providers, registry and a transport.

    Usage::

        server = ViewControlServer(ServerConfig(transport="stdio"))
        asyncio.run(server.run())
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        pointer: PointerControl | None = None,
        keyboard: KeyInput | None = None,
        screen: ScreenCapture | None = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.dispatcher = build_dispatcher(
            self.config,
            pointer or PyAutoGuiPointer(),
            keyboard or PyAutoGuiKeyboard(),
            screen or PyAutoGuiScreen(),
        )

    @property
    def registry(self) -> MethodRegistry:
        return self.dispatcher.registry

    def create_transport(self) -> StdioTransport | HttpTransport:
        if self.config.transport == "http":
            return HttpTransport(self.dispatcher, host=self.config.host, port=self.config.port)
        return StdioTransport(self.dispatcher, ordered=self.config.ordered_responses)

    async def run(self) -> None:
        """Serve until the transport stops (stdin EOF for stdio)."""
        logger.info("Starting %s %s (%s)", self.config.name, self.config.version, self.config.transport)
        await self.create_transport().serve()
