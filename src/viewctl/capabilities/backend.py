"""Lazy PyAutoGUI loader.

PyAutoGUI connects to the display at import time, which fails on headless
hosts.  Importing it on first use lets the server start and report the
problem to the caller instead of crashing during startup.
"""

from __future__ import annotations

import functools
from typing import Any

from viewctl.capabilities.errors import CapabilityUnavailableError


@functools.lru_cache(maxsize=1)
def load_pyautogui() -> Any:
    """Import and configure PyAutoGUI, or raise :class:`CapabilityUnavailableError`."""
    try:
        import pyautogui
    except Exception as exc:  # noqa: BLE001 - display errors surface as arbitrary exceptions
        msg = f"PyAutoGUI unavailable; ensure a display is accessible: {exc}"
        raise CapabilityUnavailableError(msg) from exc

    # Clamped moves legitimately reach (0, 0), which would trip the fail-safe.
    pyautogui.FAILSAFE = False
    pyautogui.PAUSE = 0
    return pyautogui


class GuiBackendMixin:
    """Resolves the GUI backend on first use; tests inject a mock instead."""

    def __init__(self, backend: Any | None = None) -> None:
        self._backend = backend

    @property
    def gui(self) -> Any:
        if self._backend is None:
            self._backend = load_pyautogui()
        return self._backend
