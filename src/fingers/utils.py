"""Terminal text utilities: grapheme splitting, display width, tab expansion."""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

TAB_STOP = 8


# ---------------------------------------------------------------------------
# Graphemes
# ---------------------------------------------------------------------------


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def grapheme_length(text: str) -> int:
    if text.isascii():
        return len(text)
    return grapheme.length(text)


# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal cell width of a single grapheme cluster.

    Tabs count as one cell here; the caller adds the columns gained by tab
    expansion separately.
    """
    if not g:
        return 0

    if len(g) == 1:
        if g == "\t":
            return 1
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def display_width(text: str) -> int:
    """Number of terminal cells *text* occupies, escape sequences excluded.

    *text* is expected to be plain captured pane text.
    """
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E or ch == "\t" for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


# ---------------------------------------------------------------------------
# Tabs
# ---------------------------------------------------------------------------


def tab_positions(line: str) -> list[int]:
    """Display columns of every tab in *line*, each tab counting one cell."""
    if all(0x20 <= ord(ch) <= 0x7E or ch == "\t" for ch in line):
        return [i for i, ch in enumerate(line) if ch == "\t"]

    positions: list[int] = []
    column = 0
    for g in grapheme.graphemes(line):
        if g == "\t":
            positions.append(column)
        column += _grapheme_width(g)
    return positions


def expand_tabs(text: str, positions: list[int]) -> str:
    """Replace tabs in *text* with spaces up to the next tab stop.

    *positions* are the tab offsets in the unstyled source line, so escape
    sequences already spliced into *text* do not move the stops. Tabs beyond
    the known positions are left untouched.
    """
    if "\t" not in text:
        return text

    parts: list[str] = []
    correction = 0
    tab_index = 0

    for ch in text:
        if ch != "\t":
            parts.append(ch)
            continue
        if tab_index >= len(positions):
            parts.append(ch)
            continue
        spaces = TAB_STOP - (positions[tab_index] + correction) % TAB_STOP
        correction += spaces - 1
        parts.append(" " * spaces)
        tab_index += 1

    return "".join(parts)
