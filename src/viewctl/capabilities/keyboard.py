"""PyAutoGUI-backed key input."""

from __future__ import annotations

import logging

from viewctl.capabilities.backend import GuiBackendMixin

logger = logging.getLogger(__name__)

# Key names callers send that PyAutoGUI spells differently.
_KEY_ALIASES = {
    "control": "ctrl",
    "cmd": "command",
    "escape": "esc",
    "return": "enter",
    "option": "alt",
}


def normalize_key(key: str) -> str:
    return _KEY_ALIASES.get(key.lower(), key)


class PyAutoGuiKeyboard(GuiBackendMixin):
    """Satisfies the :class:`~viewctl.capabilities.provider.KeyInput` protocol."""

    def type_text(self, text: str) -> None:
        self.gui.write(text)

    def press_key(self, key: str, modifiers: list[str] | None = None) -> None:
        mods = [normalize_key(m) for m in modifiers or []]
        if mods:
            logger.debug("Pressing %s with modifiers %s", key, "+".join(mods))
            self.gui.hotkey(*mods, normalize_key(key))
        else:
            self.gui.press(normalize_key(key))

    def hold_key(self, key: str, down: bool) -> None:
        if down:
            self.gui.keyDown(normalize_key(key))
        else:
            self.gui.keyUp(normalize_key(key))

    def shortcut(self, keys: list[str]) -> None:
        if not keys:
            return
        *modifiers, main = keys
        self.press_key(main, modifiers)
