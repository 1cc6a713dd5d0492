"""Overlay a hint on matched text using ANSI styles.

Every styled run ends with a full reset and the backdrop style is restored
afterwards, so nothing bleeds into the surrounding text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from fingers.ansi import RESET
from fingers.utils import graphemes

HintPosition = Literal["left", "right"]


@dataclass
class MatchFormatter:
    """Styles are raw escape sequences (see :func:`fingers.ansi.format_style`)."""

    hint_style: str = ""
    highlight_style: str = ""
    selected_hint_style: str = ""
    selected_highlight_style: str = ""
    backdrop_style: str = ""
    hint_position: HintPosition = "left"

    def format(
        self,
        hint: str,
        text: str,
        selected: bool = False,
        offset: tuple[int, int] | None = None,
    ) -> str:
        """Return *text* with *hint* overlaid.

        With an *offset* ``(start, length)`` only that slice of *text* is
        highlighted; the rest is drawn in the backdrop style.
        """
        if offset is None:
            before, within, after = "", text, ""
        else:
            start, length = offset
            before = self.backdrop_style + text[:start]
            within = text[start:start + length]
            after = self.backdrop_style + text[start + length:]

        return (
            RESET
            + before
            + self._format_region(hint, within, selected)
            + after
            + self.backdrop_style
        )

    def _format_region(self, hint: str, highlight: str, selected: bool) -> str:
        if selected:
            hint_style = self.selected_hint_style
            highlight_style = self.selected_highlight_style
        else:
            hint_style = self.hint_style
            highlight_style = self.highlight_style

        hint_part = f"{hint_style}{hint}{RESET}"
        highlight_part = f"{highlight_style}{self._chop_highlight(hint, highlight)}{RESET}"

        if self.hint_position == "right":
            return highlight_part + hint_part
        return hint_part + highlight_part

    def _chop_highlight(self, hint: str, highlight: str) -> str:
        """The part of *highlight* not covered by the hint."""
        hint_len = len(graphemes(hint))
        chars = graphemes(highlight)

        if len(chars) <= hint_len:
            return ""
        if self.hint_position == "right":
            return "".join(chars[: len(chars) - hint_len])
        return "".join(chars[hint_len:])
