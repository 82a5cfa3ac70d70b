"""viewctl — host-control MCP server over stdio and HTTP."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from viewctl.server.app import ViewControlServer as ViewControlServer
    from viewctl.server.config import ServerConfig as ServerConfig

_SERVER_EXPORTS = {
    "ViewControlServer": "viewctl.server.app",
    "ServerConfig": "viewctl.server.config",
}


def __getattr__(name: str) -> object:
    module_path = _SERVER_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'viewctl' has no attribute {name!r}")
