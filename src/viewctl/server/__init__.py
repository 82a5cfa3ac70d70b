"""Server layer — tool catalogue, configuration and assembly."""

from viewctl.server.app import ViewControlServer, build_dispatcher, register_lifecycle
from viewctl.server.config import ConfigLoader, ServerConfig, TelemetrySettings, build_config
from viewctl.server.errors import ConfigError
from viewctl.server.tools import TOOL_SPECS, HostControlHandlers, ToolSpec, register_host_tools

__all__ = [
    "TOOL_SPECS",
    "ConfigError",
    "ConfigLoader",
    "HostControlHandlers",
    "ServerConfig",
    "TelemetrySettings",
    "ToolSpec",
    "ViewControlServer",
    "build_config",
    "build_dispatcher",
    "register_host_tools",
    "register_lifecycle",
]
