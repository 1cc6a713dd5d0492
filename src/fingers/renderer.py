"""Compose one screen of hinted output."""

from __future__ import annotations

from typing import Collection

from fingers.ansi import HIDE_CURSOR
from fingers.hinter import Hinter


def render_frame(
    hinter: Hinter,
    typed: str,
    selected: Collection[str],
    rows: int,
    cols: int,
) -> str:
    """Hinted lines, at most *rows* of them, padded to *cols* cells."""
    lines = hinter.render(typed, selected, cols)
    return HIDE_CURSOR + "\n".join(lines[: max(rows, 0)])
