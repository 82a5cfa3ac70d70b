"""MethodRegistry — name-to-handler table plus the discoverable tool list."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from viewctl.protocol.errors import MethodNotFoundError
from viewctl.protocol.models import ToolDef

Handler = Callable[[Any], Awaitable[Any] | Any]

TOOL_METHOD_PREFIX = "tools/call/"


def tool_method_name(tool_name: str) -> str:
    """Return the method name a tool's handler is registered under."""
    return f"{TOOL_METHOD_PREFIX}{tool_name}"


@dataclass(frozen=True)
class MethodEntry:
    """A registered name-to-handler binding."""

    name: str
    handler: Handler
    params_model: type[BaseModel] | None = None


class MethodRegistry:
    """Holds every method the server can dispatch.

    Populated once at startup, then frozen before a transport accepts
    input.  Tools are methods with discovery metadata: each tool's handler
    lives under ``tools/call/<name>``.

    Usage::

        registry = MethodRegistry()
        registry.register("ping", ping)
        registry.register_tool(ToolDef(name="move_mouse", ...), move, MoveParams)
        registry.freeze()

        await registry.invoke("ping", {})
    """

    def __init__(self) -> None:
        self._methods: dict[str, MethodEntry] = {}
        self._tools: list[ToolDef] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    def register(
        self,
        name: str,
        handler: Handler,
        params_model: type[BaseModel] | None = None,
    ) -> None:
        """Insert or overwrite the handler for *name*."""
        self._check_writable(name)
        self._methods[name] = MethodEntry(name=name, handler=handler, params_model=params_model)

    def register_tool(
        self,
        tool: ToolDef,
        handler: Handler,
        params_model: type[BaseModel] | None = None,
    ) -> None:
        """Add *tool* to the listing and bind its call method.

        Duplicate tool names are accepted: both definitions are listed and
        the later handler wins for dispatch.
        """
        self._check_writable(tool.name)
        self._tools.append(tool)
        self.register(tool_method_name(tool.name), handler, params_model)

    def has(self, name: str) -> bool:
        return name in self._methods

    def get(self, name: str) -> MethodEntry:
        entry = self._methods.get(name)
        if entry is None:
            raise MethodNotFoundError(name)
        return entry

    def list_tools(self) -> list[ToolDef]:
        """Return a copy of the registered tool definitions."""
        return list(self._tools)

    def method_names(self) -> list[str]:
        return sorted(self._methods)

    async def invoke(self, name: str, params: Any = None) -> Any:
        """Call the handler for *name*; its result or exception passes through."""
        entry = self.get(name)
        result = entry.handler(params)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _check_writable(self, name: str) -> None:
        if self._frozen:
            msg = f"Registry is frozen; cannot register {name!r}"
            raise RuntimeError(msg)
