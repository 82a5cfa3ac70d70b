"""Tests for PyAutoGuiScreen."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from viewctl.capabilities.errors import CapabilityUnavailableError, ScreenCaptureError
from viewctl.capabilities.provider import ScreenCapture
from viewctl.capabilities.screen import PyAutoGuiScreen, resolve_target


@pytest.fixture
def screen(fake_gui: MagicMock) -> PyAutoGuiScreen:
    return PyAutoGuiScreen(fake_gui)


def test_satisfies_protocol(screen: PyAutoGuiScreen) -> None:
    assert isinstance(screen, ScreenCapture)


async def test_capture_returns_png(screen: PyAutoGuiScreen, fake_gui: MagicMock, fake_png: bytes) -> None:
    assert await screen.capture() == fake_png
    fake_gui.screenshot.assert_called_once_with()


async def test_capture_failure_is_wrapped(screen: PyAutoGuiScreen, fake_gui: MagicMock) -> None:
    fake_gui.screenshot.side_effect = OSError("X server went away")
    with pytest.raises(ScreenCaptureError, match="X server went away"):
        await screen.capture()


class TestCaptureAndSave:
    async def test_writes_file(self, screen: PyAutoGuiScreen, tmp_path: Path, fake_png: bytes) -> None:
        target = tmp_path / "shot.png"
        saved = await screen.capture_and_save(str(target))
        assert saved == str(target.resolve())
        assert target.read_bytes() == fake_png

    async def test_creates_parent_directories(self, screen: PyAutoGuiScreen, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "shot.png"
        await screen.capture_and_save(str(target))
        assert target.exists()

    async def test_relative_path_uses_cwd(
        self, screen: PyAutoGuiScreen, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        saved = await screen.capture_and_save("rel.png")
        assert saved == str((tmp_path / "rel.png").resolve())

    async def test_directory_target_is_rejected(
        self, screen: PyAutoGuiScreen, fake_gui: MagicMock, tmp_path: Path
    ) -> None:
        with pytest.raises(ScreenCaptureError, match="directory"):
            await screen.capture_and_save(str(tmp_path))
        fake_gui.screenshot.assert_not_called()

    async def test_unwritable_target(self, screen: PyAutoGuiScreen, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(ScreenCaptureError, match="cannot write"):
            await screen.capture_and_save(str(blocker / "shot.png"))


def test_resolve_target_expands_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_target("~/x.png") == (tmp_path / "x.png").resolve()


async def test_unavailable_backend_is_not_wrapped() -> None:
    screen = PyAutoGuiScreen()
    with patch(
        "viewctl.capabilities.backend.load_pyautogui",
        side_effect=CapabilityUnavailableError("no display"),
    ):
        with pytest.raises(CapabilityUnavailableError, match="no display"):
            await screen.capture()
