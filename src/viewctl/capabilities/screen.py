"""PyAutoGUI-backed screen capture."""

from __future__ import annotations

import asyncio
import io
import logging
import os
from pathlib import Path
from typing import Any

from viewctl.capabilities.backend import GuiBackendMixin
from viewctl.capabilities.errors import CapabilityError, ScreenCaptureError

logger = logging.getLogger(__name__)


def resolve_target(path: str | os.PathLike[str]) -> Path:
    """Resolve *path* against the working directory."""
    target = Path(path).expanduser()
    if not target.is_absolute():
        target = Path.cwd() / target
    return target.resolve()


class PyAutoGuiScreen(GuiBackendMixin):
    """Satisfies the :class:`~viewctl.capabilities.provider.ScreenCapture` protocol."""

    async def capture(self) -> bytes:
        try:
            return await asyncio.to_thread(lambda: _grab_png(self.gui))
        except CapabilityError:
            raise
        except Exception as exc:
            raise ScreenCaptureError(str(exc)) from exc

    async def capture_and_save(self, path: str | os.PathLike[str]) -> str:
        """Capture the screen and write it to *path*.

        Missing parent directories are created.  Raises
        :class:`ScreenCaptureError` if *path* is an existing directory or the
        file cannot be written.
        """
        target = resolve_target(path)
        if target.is_dir():
            raise ScreenCaptureError(f"target path is a directory: {target}")

        data = await self.capture()
        try:
            await asyncio.to_thread(_write_file, target, data)
        except OSError as exc:
            raise ScreenCaptureError(f"cannot write {target}: {exc}") from exc
        logger.debug("Saved %d byte screenshot to %s", len(data), target)
        return str(target)


def _grab_png(gui: Any) -> bytes:
    image = gui.screenshot()
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _write_file(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
