"""Exception classes for fingers.

Everything raised on purpose by the package derives from ``FingersError`` so
the command line can report it in one place.
"""

from __future__ import annotations


class FingersError(Exception):
    """Base exception for all fingers errors."""


class PatternError(FingersError):
    """A pattern fragment could not be compiled.

    Raised at hinter construction time; hinting cannot proceed without a
    working matcher.
    """

    def __init__(
        self,
        message: str,
        fragment: str | None = None,
        index: int | None = None,
    ) -> None:
        self.message = message
        self.fragment = fragment
        self.index = index

        location = ""
        if index is not None:
            location = f"pattern {index}: "
        if fragment is not None:
            location += f"{fragment!r}: "

        super().__init__(f"{location}{message}")


class AlphabetError(FingersError):
    """The hint alphabet cannot label the requested number of matches."""


class ConfigError(FingersError):
    """Invalid configuration value or unreadable configuration file."""


class CaptureError(FingersError):
    """Pane content could not be captured."""


class ActionError(FingersError):
    """The selected text could not be handed to its action."""
