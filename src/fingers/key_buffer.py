"""KeyBuffer splits raw terminal input into one key per item.

A single read can carry several keys when the user types quickly or a
redraw is slow, and an escape sequence can arrive split across reads.
Complete escape sequences are emitted whole, everything else one grapheme
at a time, and an unfinished escape sequence is held back until more input
arrives or :meth:`KeyBuffer.flush` is called.
"""

from __future__ import annotations

from fingers.utils import graphemes

ESC = "\x1b"


def _is_complete_sequence(data: str) -> str:
    """Return 'complete', 'incomplete', or 'not-escape'."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI: ESC [ params final
    if after_esc.startswith("["):
        if len(after_esc) < 2:
            return "incomplete"
        return "complete" if 0x40 <= ord(after_esc[-1]) <= 0x7E else "incomplete"

    # SS3: ESC O x
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"


def _split_text(text: str) -> list[str]:
    keys: list[str] = []
    for g in graphemes(text):
        # "\r\n" is one grapheme but two keys
        if len(g) > 1 and ord(g[0]) < 0x20:
            keys.extend(g)
        else:
            keys.append(g)
    return keys


def _extract_keys(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete keys. Returns (keys, remainder)."""
    keys: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            next_esc = remaining.find(ESC)
            text = remaining if next_esc == -1 else remaining[:next_esc]
            keys.extend(_split_text(text))
            pos += len(text)
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            if _is_complete_sequence(remaining[:seq_end]) == "complete":
                break
            seq_end += 1
        else:
            return keys, remaining

        keys.append(remaining[:seq_end])
        pos += seq_end

    return keys, ""


class KeyBuffer:
    """Accumulates decoded terminal input and hands out complete keys."""

    def __init__(self) -> None:
        self._buffer = ""

    def feed(self, data: str) -> list[str]:
        """Add *data* and return every key it completes, in order."""
        keys, self._buffer = _extract_keys(self._buffer + data)
        return keys

    def flush(self) -> list[str]:
        """Emit whatever is pending as one key (a lone ESC becomes escape)."""
        if not self._buffer:
            return []
        pending = [self._buffer]
        self._buffer = ""
        return pending

    @property
    def pending(self) -> str:
        return self._buffer
