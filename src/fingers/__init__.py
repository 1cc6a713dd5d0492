"""fingers: select text from terminal output by typing short hints."""

# Core
from fingers.ansi import format_style, parse_style
from fingers.huffman import generate_hints
from fingers.hinter import EngineState, Hinter, HintPool, Target
from fingers.match_formatter import MatchFormatter
from fingers.patterns import (
    BUILTIN_PATTERNS,
    Match,
    PatternMatcher,
    compile_patterns,
    count_all,
    count_unique,
)
from fingers.priority_queue import PriorityQueue

# Host integration
from fingers.action import CommandAction, CopyAction, OpenAction, execute_action, parse_action
from fingers.config import KEYBOARD_LAYOUTS, Config, alphabet_for, load_config
from fingers.errors import (
    ActionError,
    AlphabetError,
    CaptureError,
    ConfigError,
    FingersError,
    PatternError,
)
from fingers.key_buffer import KeyBuffer
from fingers.renderer import render_frame
from fingers.state import Phase, Session, parse_key

__all__ = [
    # Core
    "format_style",
    "parse_style",
    "generate_hints",
    "EngineState",
    "Hinter",
    "HintPool",
    "Target",
    "MatchFormatter",
    "BUILTIN_PATTERNS",
    "Match",
    "PatternMatcher",
    "compile_patterns",
    "count_all",
    "count_unique",
    "PriorityQueue",
    # Host integration
    "CommandAction",
    "CopyAction",
    "OpenAction",
    "execute_action",
    "parse_action",
    "KEYBOARD_LAYOUTS",
    "Config",
    "alphabet_for",
    "load_config",
    "ActionError",
    "AlphabetError",
    "CaptureError",
    "ConfigError",
    "FingersError",
    "PatternError",
    "KeyBuffer",
    "render_frame",
    "Phase",
    "Session",
    "parse_key",
]
