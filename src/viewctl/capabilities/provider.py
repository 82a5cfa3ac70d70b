"""Capability protocols — the narrow device interfaces handlers call into.

The pointer and keyboard operations are synchronous; screen capture is
asynchronous because grabbing and encoding a frame is slow enough to be
moved off the event loop.
"""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

from pydantic import BaseModel

MouseButton = Literal["left", "right", "middle"]
ModifierKey = Literal["command", "alt", "control", "shift", "fn"]


class Position(BaseModel):
    """Pointer position in screen pixels."""

    x: int
    y: int


@runtime_checkable
class PointerControl(Protocol):
    """Moves and clicks the single system pointer."""

    def get_position(self) -> Position: ...
    def move(self, x: float, y: float) -> Position: ...
    def click(self, button: MouseButton = "left", double: bool = False) -> None: ...
    def drag_and_drop(
        self,
        start_x: float,
        start_y: float,
        end_x: float,
        end_y: float,
        button: MouseButton = "left",
    ) -> None: ...


@runtime_checkable
class KeyInput(Protocol):
    """Synthesises keyboard input."""

    def type_text(self, text: str) -> None: ...
    def press_key(self, key: str, modifiers: list[str] | None = None) -> None: ...
    def hold_key(self, key: str, down: bool) -> None: ...
    def shortcut(self, keys: list[str]) -> None:
        """Press ``keys[-1]`` with every preceding key held as a modifier."""
        ...


@runtime_checkable
class ScreenCapture(Protocol):
    """Grabs the full screen as PNG."""

    async def capture(self) -> bytes: ...
    async def capture_and_save(self, path: str) -> str:
        """Save a capture to *path* and return the resolved absolute path."""
        ...
