"""Interactive hinting on the controlling terminal.

Captured text usually arrives on stdin, so keys are read from ``/dev/tty``
in raw mode. The hinted frame is drawn on the alternate screen and redrawn
after every key and every resize.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import signal
import termios
import tty

from fingers.ansi import (
    ALT_SCREEN_DISABLE,
    ALT_SCREEN_ENABLE,
    CLEAR_SCREEN,
    HIDE_CURSOR,
    RESET,
    SHOW_CURSOR,
)
from fingers.hinter import Hinter
from fingers.key_buffer import KeyBuffer
from fingers.renderer import render_frame
from fingers.state import Session, parse_key

logger = logging.getLogger(__name__)

_POLL_SECONDS = 0.1


class TtyTerminal:
    """Raw-mode access to a terminal device."""

    def __init__(self, path: str = "/dev/tty") -> None:
        self._path = path
        self._fd: int | None = None
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.resized = False

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._require_fd()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._require_fd()).lines
        except (ValueError, OSError):
            return 24

    def start(self) -> None:
        """Open the device, enter raw mode and the alternate screen."""
        self._fd = os.open(self._path, os.O_RDWR | os.O_NOCTTY)
        self._original_termios = termios.tcgetattr(self._fd)
        tty.setraw(self._fd)

        self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
        signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self.write(ALT_SCREEN_ENABLE + HIDE_CURSOR)

    def stop(self) -> None:
        """Leave the alternate screen and restore the terminal."""
        if self._fd is None:
            return

        self.write(RESET + SHOW_CURSOR + ALT_SCREEN_DISABLE)

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        if self._original_termios is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

        os.close(self._fd)
        self._fd = None

    def write(self, data: str) -> None:
        os.write(self._require_fd(), data.encode("utf-8"))

    def read(self, timeout: float) -> str | None:
        """Pending input, or None if nothing arrived within *timeout* seconds.

        A multi-byte character cut by the read is completed by the next one.
        """
        fd = self._require_fd()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        return self._decoder.decode(os.read(fd, 1024))

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        self.resized = True

    def _require_fd(self) -> int:
        if self._fd is None:
            raise ValueError("terminal is not started")
        return self._fd


def run_interactive(hinter: Hinter, terminal: TtyTerminal | None = None) -> str | None:
    """Let the user pick hints; return the selected text, or None if cancelled."""
    terminal = terminal or TtyTerminal()
    session = Session(hinter)
    result: list[str] = []
    session.on_select = result.append

    def draw() -> None:
        frame = render_frame(
            hinter,
            session.typed,
            session.selected_hints,
            terminal.rows,
            terminal.columns,
        )
        # Raw mode disables output post-processing, so newlines need a CR.
        terminal.write(CLEAR_SCREEN + frame.replace("\n", "\r\n"))

    keys = KeyBuffer()

    terminal.start()
    try:
        draw()
        while not session.done:
            data = terminal.read(_POLL_SECONDS)
            if terminal.resized:
                terminal.resized = False
                draw()

            # A quiet poll completes a lone ESC held back by the buffer.
            pending = keys.flush() if data is None else keys.feed(data)

            handled = False
            for raw in pending:
                key = parse_key(raw)
                if key is None:
                    logger.debug("Ignoring input %r", raw)
                    continue
                session.handle_key(key)
                handled = True
                if session.done:
                    break

            if handled and not session.done:
                draw()
    finally:
        terminal.stop()

    return result[0] if result else None
