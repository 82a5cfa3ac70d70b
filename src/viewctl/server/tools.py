"""Host-control tool catalogue.

Every operation is exposed twice:

- as a tool (``tools/list`` / ``tools/call``), whose failures come back as
  ``isError`` results;
- as a direct method such as ``mouse/move``, whose failures come back as
  JSON-RPC error objects.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from viewctl.capabilities.errors import CapabilityError, CapabilityUnavailableError
from viewctl.protocol.errors import HandlerError
from viewctl.protocol.models import ImageContent, ToolCallResult, ToolDef
from viewctl.server.params import (
    ClickParams,
    DragParams,
    EmptyParams,
    HoldKeyParams,
    MoveParams,
    PressKeyParams,
    SavePathParams,
    ShortcutParams,
    TypeTextParams,
    input_schema,
)

if TYPE_CHECKING:
    from viewctl.capabilities.provider import KeyInput, PointerControl, ScreenCapture
    from viewctl.protocol.registry import MethodRegistry

logger = logging.getLogger(__name__)

# Reserved server-error band codes for device failures.
CAPABILITY_FAILED = -32000
CAPABILITY_UNAVAILABLE = -32001

Action = Callable[[Any], Awaitable[dict[str, Any]]]


class HostControlHandlers:
    """Turns validated parameters into capability calls and JSON payloads.

    Pointer and keyboard calls block until the device is done, so they run in
    a worker thread.
    """

    def __init__(self, pointer: PointerControl, keyboard: KeyInput, screen: ScreenCapture) -> None:
        self._pointer = pointer
        self._keyboard = keyboard
        self._screen = screen

    async def get_mouse_position(self, params: EmptyParams) -> dict[str, Any]:
        position = await asyncio.to_thread(self._pointer.get_position)
        return {"position": position.model_dump()}

    async def move_mouse(self, params: MoveParams) -> dict[str, Any]:
        landed = await asyncio.to_thread(self._pointer.move, params.x, params.y)
        return {"success": True, "x": params.x, "y": params.y, "position": landed.model_dump()}

    async def click_mouse(self, params: ClickParams) -> dict[str, Any]:
        await asyncio.to_thread(self._pointer.click, params.button, params.double)
        return {"success": True, "button": params.button, "double": params.double}

    async def drag_and_drop(self, params: DragParams) -> dict[str, Any]:
        await asyncio.to_thread(
            self._pointer.drag_and_drop,
            params.start_x,
            params.start_y,
            params.end_x,
            params.end_y,
            params.button,
        )
        return {"success": True, **params.model_dump(by_alias=True)}

    async def type_text(self, params: TypeTextParams) -> dict[str, Any]:
        await asyncio.to_thread(self._keyboard.type_text, params.text)
        return {"success": True, "length": len(params.text)}

    async def press_key(self, params: PressKeyParams) -> dict[str, Any]:
        await asyncio.to_thread(self._keyboard.press_key, params.key, list(params.modifiers))
        return {"success": True, "key": params.key, "modifiers": list(params.modifiers)}

    async def hold_key(self, params: HoldKeyParams) -> dict[str, Any]:
        await asyncio.to_thread(self._keyboard.hold_key, params.key, params.down)
        return {"success": True, "key": params.key, "down": params.down}

    async def keyboard_shortcut(self, params: ShortcutParams) -> dict[str, Any]:
        await asyncio.to_thread(self._keyboard.shortcut, params.keys)
        return {"success": True, "keys": params.keys}

    async def capture_screen(self, params: EmptyParams) -> dict[str, Any]:
        image = await self._screen.capture()
        logger.debug("Screen captured: %d bytes", len(image))
        return {"data": base64.b64encode(image).decode("ascii"), "mimeType": "image/png"}

    async def capture_and_save_screen(self, params: SavePathParams) -> dict[str, Any]:
        path = params.path or default_screenshot_name()
        saved = await self._screen.capture_and_save(path)
        return {"success": True, "path": saved}


def default_screenshot_name(now: datetime | None = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H-%M-%S_%fZ")
    return f"screenshot_{stamp}.png"


def _json_result(payload: dict[str, Any]) -> ToolCallResult:
    return ToolCallResult.from_payload(payload)


def _image_result(payload: dict[str, Any]) -> ToolCallResult:
    return ToolCallResult(content=[ImageContent(data=payload["data"], mime_type=payload["mimeType"])])


@dataclass(frozen=True)
class ToolSpec:
    """One host-control operation and the names it is reachable under."""

    name: str
    method: str
    description: str
    params_model: type[BaseModel]
    render: Callable[[dict[str, Any]], ToolCallResult] = _json_result
    # Report failures as a ``success: false`` payload instead of ``isError``.
    soft_fail: bool = False

    def tool_def(self) -> ToolDef:
        return ToolDef(
            name=self.name,
            description=self.description,
            input_schema=input_schema(self.params_model),
        )


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="get_mouse_position",
        method="mouse/position",
        description="Get the current pointer position (X and Y coordinates).",
        params_model=EmptyParams,
    ),
    ToolSpec(
        name="move_mouse",
        method="mouse/move",
        description="Move the pointer to the given (X, Y) coordinates, clamped to the screen.",
        params_model=MoveParams,
    ),
    ToolSpec(
        name="click_mouse",
        method="mouse/click",
        description="Click or double-click with the given mouse button.",
        params_model=ClickParams,
    ),
    ToolSpec(
        name="drag_and_drop",
        method="mouse/drag",
        description=(
            "Drag from the start coordinates to the end coordinates while holding a "
            "mouse button. Useful for moving files or manipulating UI elements."
        ),
        params_model=DragParams,
    ),
    ToolSpec(
        name="type_text",
        method="keyboard/type",
        description="Type the given text on the keyboard.",
        params_model=TypeTextParams,
    ),
    ToolSpec(
        name="press_key",
        method="keyboard/press",
        description=(
            "Press a key, optionally combined with modifier keys "
            "(command, alt, control, shift, fn)."
        ),
        params_model=PressKeyParams,
    ),
    ToolSpec(
        name="hold_key",
        method="keyboard/hold",
        description="Hold a key down or release it.",
        params_model=HoldKeyParams,
    ),
    ToolSpec(
        name="keyboard_shortcut",
        method="keyboard/shortcut",
        description=(
            "Press several keys together. The last element is the main key; "
            "every other element is held as a modifier."
        ),
        params_model=ShortcutParams,
    ),
    ToolSpec(
        name="capture_screen",
        method="screen/capture",
        description="Capture the current screen and return it as a PNG image.",
        params_model=EmptyParams,
        render=_image_result,
    ),
    ToolSpec(
        name="capture_and_save_screen",
        method="screen/save",
        description="Capture the current screen and save it to the given path. Prefer a full path.",
        params_model=SavePathParams,
        soft_fail=True,
    ),
)


def as_method(action: Action) -> Action:
    """Map device errors onto the server-error band."""

    async def handler(params: Any) -> dict[str, Any]:
        try:
            return await action(params)
        except CapabilityUnavailableError as exc:
            raise HandlerError(str(exc), code=CAPABILITY_UNAVAILABLE) from exc
        except CapabilityError as exc:
            raise HandlerError(str(exc), code=CAPABILITY_FAILED) from exc

    return handler


def as_tool(spec: ToolSpec, method_handler: Action) -> Callable[[Any], Awaitable[ToolCallResult]]:
    """Render a method handler's payload as a ``tools/call`` result."""

    async def handler(params: Any) -> ToolCallResult:
        try:
            payload = await method_handler(params)
        except Exception as exc:
            if not spec.soft_fail:
                raise
            logger.warning("%s failed: %s", spec.name, exc)
            return ToolCallResult.from_payload({"success": False, "error": str(exc)})
        return spec.render(payload)

    return handler


def register_host_tools(registry: MethodRegistry, handlers: HostControlHandlers) -> None:
    """Register every :data:`TOOL_SPECS` entry as a tool and as a direct method."""
    for spec in TOOL_SPECS:
        method_handler = as_method(getattr(handlers, spec.name))
        registry.register(spec.method, method_handler, spec.params_model)
        registry.register_tool(spec.tool_def(), as_tool(spec, method_handler), spec.params_model)
