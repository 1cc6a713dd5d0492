"""Key-driven hinting session.

The session turns key presses into typed-prefix edits, multi-select toggles,
and a final commit or cancel. It does no I/O; the caller renders after every
key and reacts to the ``on_select`` and ``on_cancel`` callbacks.
"""

from __future__ import annotations

import enum
from typing import Callable

from fingers.hinter import Hinter

ESCAPE = "escape"
ENTER = "enter"
TAB = "tab"
BACKSPACE = "backspace"

_KEY_NAMES: dict[str, str] = {
    "\x1b": ESCAPE,
    "\x03": ESCAPE,  # ctrl+c
    "\r": ENTER,
    "\n": ENTER,
    "\t": TAB,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
}


def parse_key(data: str) -> str | None:
    """Name of the key in raw terminal input *data*.

    Returns ``escape``, ``enter``, ``tab``, ``backspace``, a single printable
    character, or None for anything else (arrows, function keys, pastes).
    """
    name = _KEY_NAMES.get(data)
    if name is not None:
        return name
    if len(data) == 1 and data.isprintable():
        return data
    return None


class Phase(enum.Enum):
    HINTING = "hinting"
    DONE = "done"


class Session:
    """Typed prefix and multi-selection state for one hinter."""

    def __init__(self, hinter: Hinter) -> None:
        self.hinter = hinter
        self.phase = Phase.HINTING
        self.typed = ""
        self.multi_mode = False
        self.selected_hints: list[str] = []
        self.multi_matches: list[str] = []

        self.on_select: Callable[[str], None] | None = None
        self.on_cancel: Callable[[], None] | None = None

    @property
    def done(self) -> bool:
        return self.phase is Phase.DONE

    def render(self, width: int = 0) -> list[str]:
        return self.hinter.render(self.typed, self.selected_hints, width)

    def handle_key(self, key: str) -> None:
        if self.done:
            return

        if key == ESCAPE:
            self._finish(None)
        elif key == ENTER:
            if self.multi_mode:
                self._finish(" ".join(self.multi_matches))
        elif key == TAB:
            self.multi_mode = not self.multi_mode
            if not self.multi_mode:
                self._finish(" ".join(self.multi_matches))
        elif key == BACKSPACE:
            self.typed = self.typed[:-1]
        elif len(key) == 1:
            self.typed += key.lower() if key.isascii() else key
            self._try_match()

    def _try_match(self) -> None:
        target = self.hinter.resolve(self.typed)
        if target is None:
            return

        if self.multi_mode:
            self.multi_matches.append(target.text)
            self.selected_hints.append(self.typed)
            self.typed = ""
        else:
            self._finish(target.text)

    def _finish(self, text: str | None) -> None:
        self.phase = Phase.DONE
        if text:
            if self.on_select:
                self.on_select(text)
        elif self.on_cancel:
            self.on_cancel()
