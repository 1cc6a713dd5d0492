"""Hint engine: scan captured lines, hand out hints, render the overlay.

The hint list is generated once per engine and replayed on every render
pass, so the same content always gets the same hints while the user types.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Collection, Sequence

from fingers.config import Config
from fingers.huffman import generate_hints
from fingers.match_formatter import MatchFormatter
from fingers.patterns import Match, compile_patterns, count_all, count_unique
from fingers.utils import display_width, expand_tabs, grapheme_length, tab_positions

logger = logging.getLogger(__name__)


@dataclass
class Target:
    """Matched text and the hint that selects it."""

    text: str
    hint: str


class EngineState(enum.Enum):
    IDLE = "idle"
    READY = "ready"
    RENDERING = "rendering"


# ---------------------------------------------------------------------------
# HintPool
# ---------------------------------------------------------------------------


class HintPool:
    """Consumable view over a precomputed hint list.

    Hints are drawn from the end of the list (longest first, the list is
    sorted shortest first). A drawn hint that turns out too long for its
    match goes back via :meth:`recycle` and is the next one drawn.
    :meth:`rewind` restores the whole pool for a new render pass.
    """

    def __init__(self, hints: Sequence[str], *, reuse_hints: bool = True) -> None:
        self._hints = tuple(hints)
        self._reuse_hints = reuse_hints
        self._cursor = len(self._hints)
        self._recycled: list[str] = []
        self._by_text: dict[str, Target] = {}

    @property
    def hints(self) -> tuple[str, ...]:
        return self._hints

    def next(self, for_text: str) -> str | None:
        """Hint for *for_text*: its earlier hint when reusing, else a fresh one.

        Returns None once the pool is exhausted.
        """
        if self._reuse_hints:
            target = self._by_text.get(for_text)
            if target is not None:
                return target.hint

        if self._recycled:
            return self._recycled.pop()

        if self._cursor == 0:
            return None
        self._cursor -= 1
        return self._hints[self._cursor]

    def recycle(self, hint: str) -> None:
        self._recycled.append(hint)

    def assign(self, target: Target) -> None:
        self._by_text[target.text] = target

    def target_for_text(self, text: str) -> Target | None:
        return self._by_text.get(text)

    def remaining(self) -> int:
        return self._cursor + len(self._recycled)

    def rewind(self) -> None:
        self._cursor = len(self._hints)
        self._recycled.clear()
        self._by_text.clear()


# ---------------------------------------------------------------------------
# Hinter
# ---------------------------------------------------------------------------


class Hinter:
    """Owns one scan of *lines* and renders it with hints on demand.

    Raises:
        PatternError: if a pattern does not compile.
        AlphabetError: if the alphabet cannot label every match.
    """

    def __init__(
        self,
        lines: Sequence[str],
        width: int,
        *,
        patterns: Sequence[str],
        alphabet: Sequence[str],
        formatter: MatchFormatter | None = None,
        reuse_hints: bool = True,
    ) -> None:
        self.state = EngineState.IDLE
        self._lines = list(lines)
        self._width = width
        self._formatter = formatter or MatchFormatter()
        self._reuse_hints = reuse_hints
        self._matcher = compile_patterns(patterns)
        self._targets_by_hint: dict[str, Target] = {}

        matches = list(self._matcher.scan(self._lines))
        n_matches = count_unique(matches) if reuse_hints else count_all(matches)
        self._pool = HintPool(generate_hints(alphabet, n_matches), reuse_hints=reuse_hints)

        logger.debug(
            "Hinter ready: %d lines, %d matches, %d hints",
            len(self._lines),
            len(matches),
            n_matches,
        )
        self.state = EngineState.READY

    @classmethod
    def from_config(cls, lines: Sequence[str], width: int, config: Config) -> Hinter:
        formatter = MatchFormatter(
            hint_style=config.hint_style,
            highlight_style=config.highlight_style,
            selected_hint_style=config.selected_hint_style,
            selected_highlight_style=config.selected_highlight_style,
            backdrop_style=config.backdrop_style,
            hint_position="right" if config.hint_position == "right" else "left",
        )
        return cls(
            lines,
            width,
            patterns=config.patterns,
            alphabet=config.alphabet,
            formatter=formatter,
            reuse_hints=config.reuse_hints,
        )

    @property
    def lines(self) -> list[str]:
        return self._lines

    @property
    def width(self) -> int:
        return self._width

    @property
    def hints(self) -> tuple[str, ...]:
        return self._pool.hints

    def render(
        self,
        typed: str = "",
        selected: Collection[str] = (),
        width: int = 0,
    ) -> list[str]:
        """Render every line with hints overlaid.

        Matches whose hint does not start with *typed* are drawn as plain
        text. Hints in *selected* use the selected styles. A *width* of 0
        pads to the width given at construction.
        """
        self.state = EngineState.RENDERING
        try:
            self._pool.rewind()
            self._targets_by_hint.clear()

            selected_hints = set(selected)
            render_width = width if width > 0 else self._width
            return [
                self._render_line(index, line, typed, selected_hints, render_width)
                for index, line in enumerate(self._lines)
            ]
        finally:
            self.state = EngineState.READY

    def resolve(self, typed: str) -> Target | None:
        """Target whose hint is exactly *typed*, as of the last render."""
        return self._targets_by_hint.get(typed)

    def _render_line(
        self,
        index: int,
        line: str,
        typed: str,
        selected: set[str],
        width: int,
    ) -> str:
        parts: list[str] = []
        last_end = 0

        for match in self._matcher.scan_line(line, index):
            parts.append(line[last_end:match.start])
            last_end = match.end
            parts.append(self._render_match(match, typed, selected))

        parts.append(line[last_end:])
        composed = "".join(parts)

        expanded = expand_tabs(composed, tab_positions(line))
        tab_correction = len(expanded) - len(composed)
        padding = max(width - display_width(line) - tab_correction, 0)

        return f"{self._formatter.backdrop_style}{expanded}{' ' * padding}"

    def _render_match(self, match: Match, typed: str, selected: set[str]) -> str:
        text = match.extracted_text
        hint = self._pool.next(text)
        if hint is None:
            return match.text

        # Never let a hint spill past the text it labels.
        if grapheme_length(hint) > grapheme_length(text):
            self._pool.recycle(hint)
            return match.text

        target = Target(text=text, hint=hint)
        self._targets_by_hint[hint] = target
        self._pool.assign(target)

        if typed and not hint.startswith(typed):
            return match.text

        return self._formatter.format(
            hint,
            match.text,
            selected=hint in selected,
            offset=match.extracted_offset,
        )
