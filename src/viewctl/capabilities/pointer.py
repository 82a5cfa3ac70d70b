"""PyAutoGUI-backed pointer control."""

from __future__ import annotations

import logging

from viewctl.capabilities.backend import GuiBackendMixin
from viewctl.capabilities.provider import MouseButton, Position

logger = logging.getLogger(__name__)


class PyAutoGuiPointer(GuiBackendMixin):
    """Satisfies the :class:`~viewctl.capabilities.provider.PointerControl` protocol.

    Target coordinates are clamped to the primary screen, so negative or
    oversized values land on the nearest edge pixel.
    """

    def get_position(self) -> Position:
        x, y = self.gui.position()
        return Position(x=int(x), y=int(y))

    def clamp(self, x: float, y: float) -> Position:
        width, height = self.gui.size()
        return Position(
            x=max(0, min(round(x), int(width) - 1)),
            y=max(0, min(round(y), int(height) - 1)),
        )

    def move(self, x: float, y: float) -> Position:
        target = self.clamp(x, y)
        logger.debug("Moving pointer to (%d, %d)", target.x, target.y)
        self.gui.moveTo(target.x, target.y)
        return target

    def click(self, button: MouseButton = "left", double: bool = False) -> None:
        self.gui.click(button=button, clicks=2 if double else 1)

    def drag_and_drop(
        self,
        start_x: float,
        start_y: float,
        end_x: float,
        end_y: float,
        button: MouseButton = "left",
    ) -> None:
        self.move(start_x, start_y)
        end = self.clamp(end_x, end_y)
        self.gui.mouseDown(button=button)
        try:
            self.gui.moveTo(end.x, end.y)
        finally:
            self.gui.mouseUp(button=button)
