"""Shared fixtures: a fake PyAutoGUI backend and servers wired to it."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from viewctl.capabilities.keyboard import PyAutoGuiKeyboard
from viewctl.capabilities.pointer import PyAutoGuiPointer
from viewctl.capabilities.screen import PyAutoGuiScreen
from viewctl.server.app import ViewControlServer
from viewctl.server.config import ServerConfig

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake-image"


def make_fake_gui(width: int = 1920, height: int = 1080) -> MagicMock:
    """A ``MagicMock`` standing in for the ``pyautogui`` module."""
    gui = MagicMock()
    gui.size.return_value = (width, height)
    gui.position.return_value = (10, 20)

    image = MagicMock()

    def _save(buffer: Any, format: str = "PNG") -> None:  # noqa: A002
        buffer.write(FAKE_PNG)

    image.save.side_effect = _save
    gui.screenshot.return_value = image
    return gui


@pytest.fixture
def fake_png() -> bytes:
    return FAKE_PNG


@pytest.fixture
def fake_gui() -> MagicMock:
    return make_fake_gui()


@pytest.fixture
def server(fake_gui: MagicMock) -> ViewControlServer:
    return ViewControlServer(
        ServerConfig(),
        pointer=PyAutoGuiPointer(fake_gui),
        keyboard=PyAutoGuiKeyboard(fake_gui),
        screen=PyAutoGuiScreen(fake_gui),
    )
