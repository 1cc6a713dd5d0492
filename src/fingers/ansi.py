"""Style codec: tmux-style attribute strings to ANSI SGR escape sequences.

``"fg=green,bold"`` becomes ``"\\x1b[32m\\x1b[1m"``. Unknown tokens are
skipped.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

RESET = "\x1b[0m"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
ALT_SCREEN_ENABLE = "\x1b[?1049h"
ALT_SCREEN_DISABLE = "\x1b[?1049l"
CLEAR_SCREEN = "\x1b[2J\x1b[H"

_COLORS: dict[str, int] = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
}

_ATTRIBUTES: dict[str, str] = {
    "bright": "\x1b[1m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "italics": "\x1b[3m",
    "underscore": "\x1b[4m",
    "reverse": "\x1b[7m",
}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_style(spec: str) -> str:
    """Translate a comma/space separated attribute list to escape sequences."""
    output: list[str] = []

    for part in spec.replace(",", " ").split():
        code = _parse_token(part)
        if code is not None:
            output.append(code)

    return "".join(output)


def format_style(spec: str) -> str:
    """Like :func:`parse_style` but accepts a ``#[...]`` wrapped string."""
    if spec.startswith("#[") and spec.endswith("]"):
        spec = spec[2:-1]
    return parse_style(spec)


def _parse_token(token: str) -> str | None:
    if token.startswith("fg="):
        return _parse_color(token[3:], is_bg=False)
    if token.startswith("bg="):
        return _parse_color(token[3:], is_bg=True)
    return _parse_attribute(token)


def _parse_color(color: str, *, is_bg: bool) -> str | None:
    if color == "default":
        return "\x1b[49m" if is_bg else "\x1b[39m"

    for prefix in ("colour", "color"):
        if color.startswith(prefix):
            digits = color[len(prefix):]
            if digits.isascii() and digits.isdigit() and int(digits) <= 255:
                layer = 48 if is_bg else 38
                return f"\x1b[{layer};5;{int(digits)}m"
            return None

    code = _COLORS.get(color)
    if code is None:
        return None
    base = 40 if is_bg else 30
    return f"\x1b[{base + code}m"


def _parse_attribute(attr: str) -> str | None:
    # tmux convention: "nobold" and friends reset everything
    if attr.startswith("no") and attr[2:] in _ATTRIBUTES:
        return RESET
    return _ATTRIBUTES.get(attr)
