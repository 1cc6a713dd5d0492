"""Configuration for fingers.

Settings arrive as a flat string mapping, the shape multiplexer configs and
the JSON config file both have. Precedence is CLI overrides > config file >
defaults. The config file lives at ``$FINGERS_CONFIG`` or
``~/.config/fingers/config.json``.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from fingers.ansi import format_style
from fingers.errors import ConfigError
from fingers.patterns import BUILTIN_PATTERNS, resolve_builtin_patterns
from fingers.utils import graphemes

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "qwerty"

KEYBOARD_LAYOUTS: dict[str, str] = {
    "qwerty": "asdfqwerzxcvjklmiuopghtybn",
    "qwerty-homerow": "asdfjklgh",
    "qwerty-left-hand": "asdfqwerzcxv",
    "qwerty-right-hand": "jkluiopmyhn",
    "azerty": "qsdfazerwxcvjklmuiopghtybn",
    "azerty-homerow": "qsdfjkmgh",
    "azerty-left-hand": "qsdfazerwxcv",
    "azerty-right-hand": "jklmuiophyn",
    "qwertz": "asdfqweryxcvjkluiopmghtzbn",
    "qwertz-homerow": "asdfghjkl",
    "qwertz-left-hand": "asdfqweryxcv",
    "qwertz-right-hand": "jkluiopmhzn",
    "dvorak": "aoeuqjkxpyhtnsgcrlmwvzfidb",
    "dvorak-homerow": "aoeuhtnsid",
    "dvorak-left-hand": "aoeupqjkyix",
    "dvorak-right-hand": "htnsgcrlmwvz",
    "colemak": "arstqwfpzxcvneioluymdhgjbk",
    "colemak-homerow": "arstneiodh",
    "colemak-left-hand": "arstqwfpzxcv",
    "colemak-right-hand": "neioluymjhk",
}

DEFAULT_STYLES: dict[str, str] = {
    "hint_style": "fg=green,bold",
    "highlight_style": "fg=yellow",
    "selected_hint_style": "fg=blue,bold",
    "selected_highlight_style": "fg=blue",
    "backdrop_style": "",
}

_USER_PATTERN_KEY_RE = re.compile(r"^pattern_(\d+)$")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def alphabet_for(layout: str) -> list[str]:
    """Hint alphabet for a keyboard layout; unknown layouts fall back to qwerty."""
    chars = KEYBOARD_LAYOUTS.get(layout)
    if chars is None:
        logger.warning("Unknown keyboard layout %r, using %s", layout, DEFAULT_LAYOUT)
        chars = KEYBOARD_LAYOUTS[DEFAULT_LAYOUT]
    return list(chars)


@dataclass
class Config:
    """Typed settings. Style fields hold raw escape sequences."""

    action: str = ":copy:"
    hint_position: str = "left"
    hint_style: str = field(default_factory=lambda: format_style(DEFAULT_STYLES["hint_style"]))
    highlight_style: str = field(
        default_factory=lambda: format_style(DEFAULT_STYLES["highlight_style"])
    )
    selected_hint_style: str = field(
        default_factory=lambda: format_style(DEFAULT_STYLES["selected_hint_style"])
    )
    selected_highlight_style: str = field(
        default_factory=lambda: format_style(DEFAULT_STYLES["selected_highlight_style"])
    )
    backdrop_style: str = ""
    clipboard_command: str | None = None
    open_command: str | None = None
    alphabet: list[str] = field(default_factory=lambda: alphabet_for(DEFAULT_LAYOUT))
    patterns: list[str] = field(default_factory=lambda: list(BUILTIN_PATTERNS.values()))
    reuse_hints: bool = True

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> Config:
        """Build a config from flat host settings.

        Raises:
            ConfigError: on an invalid hint position, boolean or alphabet.
        """
        if "alphabet" in config and config["alphabet"]:
            alphabet = graphemes(str(config["alphabet"]))
        else:
            alphabet = alphabet_for(str(config.get("keyboard_layout", DEFAULT_LAYOUT)))
        _check_alphabet(alphabet)

        patterns = resolve_builtin_patterns(str(config.get("enabled_builtin_patterns", "all")))
        patterns.extend(_user_patterns(config))

        hint_position = str(config.get("hint_position", "left"))
        if hint_position not in ("left", "right"):
            raise ConfigError(f"hint_position must be 'left' or 'right', got {hint_position!r}")

        styles = {
            key: format_style(str(config.get(key, default)))
            for key, default in DEFAULT_STYLES.items()
        }

        return cls(
            action=str(config.get("action", ":copy:")),
            hint_position=hint_position,
            clipboard_command=_optional_str(config.get("clipboard_command")),
            open_command=_optional_str(config.get("open_command")),
            alphabet=alphabet,
            patterns=patterns,
            reuse_hints=_parse_bool("reuse_hints", config.get("reuse_hints", True)),
            **styles,
        )


def _user_patterns(config: Mapping[str, Any]) -> list[str]:
    """``pattern_<N>`` values ordered by N, then any ``patterns`` list."""
    numbered: list[tuple[int, str]] = []
    for key, value in config.items():
        m = _USER_PATTERN_KEY_RE.match(key)
        if m and value:
            numbered.append((int(m.group(1)), str(value)))
    numbered.sort()

    patterns = [pattern for _, pattern in numbered]
    extra = config.get("patterns")
    if isinstance(extra, str):
        extra = [extra]
    if extra:
        patterns.extend(str(p) for p in extra if p)
    return patterns


def _check_alphabet(alphabet: list[str]) -> None:
    seen: set[str] = set()
    for symbol in alphabet:
        if symbol in seen:
            raise ConfigError(f"alphabet contains {symbol!r} more than once")
        seen.add(symbol)


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


def default_config_path() -> Path:
    env = os.environ.get("FINGERS_CONFIG")
    if env:
        return Path(env)
    return Path.home() / ".config" / "fingers" / "config.json"


def read_config_file(path: Path) -> dict[str, Any]:
    """Settings stored in *path*; a missing file means no settings.

    Raises:
        ConfigError: if the file cannot be read or is not a JSON object.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return data


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Load the config file and apply *overrides* on top (``None`` values skipped)."""
    config_path = Path(path) if path is not None else default_config_path()
    settings = read_config_file(config_path)
    logger.debug("Loaded %d settings from %s", len(settings), config_path)

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    return Config.from_mapping(settings)
