"""Capability providers — pointer, keyboard and screen capture."""

from viewctl.capabilities.errors import (
    CapabilityError,
    CapabilityUnavailableError,
    ScreenCaptureError,
)
from viewctl.capabilities.keyboard import PyAutoGuiKeyboard
from viewctl.capabilities.pointer import PyAutoGuiPointer
from viewctl.capabilities.provider import (
    KeyInput,
    ModifierKey,
    MouseButton,
    PointerControl,
    Position,
    ScreenCapture,
)
from viewctl.capabilities.screen import PyAutoGuiScreen

__all__ = [
    "CapabilityError",
    "CapabilityUnavailableError",
    "KeyInput",
    "ModifierKey",
    "MouseButton",
    "PointerControl",
    "Position",
    "PyAutoGuiKeyboard",
    "PyAutoGuiPointer",
    "PyAutoGuiScreen",
    "ScreenCapture",
    "ScreenCaptureError",
]
