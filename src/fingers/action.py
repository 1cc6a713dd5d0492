"""Hand the selected text to its action: copy, open, or a shell command."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass

from fingers.errors import ActionError

logger = logging.getLogger(__name__)

COPY = ":copy:"
OPEN = ":open:"

# First available wins.
CLIPBOARD_COMMANDS: tuple[str, ...] = (
    "pbcopy",
    "wl-copy",
    "xclip -selection clipboard",
    "xsel -i --clipboard",
    "clip.exe",
)
OPEN_COMMANDS: tuple[str, ...] = ("open", "xdg-open", "cygstart")


@dataclass(frozen=True)
class CopyAction:
    clipboard_command: str | None = None


@dataclass(frozen=True)
class OpenAction:
    open_command: str | None = None


@dataclass(frozen=True)
class CommandAction:
    """Shell command receiving the text on stdin and in ``$HINT``."""

    command: str


Action = CopyAction | OpenAction | CommandAction


def parse_action(
    spec: str,
    clipboard_command: str | None = None,
    open_command: str | None = None,
) -> Action | None:
    """Map an action setting to an :data:`Action`; an empty setting means none."""
    spec = spec.strip()
    if not spec:
        return None
    if spec == COPY:
        return CopyAction(clipboard_command)
    if spec == OPEN:
        return OpenAction(open_command)
    return CommandAction(spec)


def _first_available(candidates: tuple[str, ...]) -> str | None:
    for candidate in candidates:
        if shutil.which(candidate.split()[0]):
            return candidate
    return None


def build_command(action: Action, text: str) -> tuple[str, str | None]:
    """Shell command line for *action* and the data to feed on its stdin.

    Raises:
        ActionError: if no suitable clipboard tool or opener is installed.
    """
    if isinstance(action, CopyAction):
        command = action.clipboard_command or _first_available(CLIPBOARD_COMMANDS)
        if command is None:
            raise ActionError("no clipboard command found")
        return command, text

    if isinstance(action, OpenAction):
        opener = action.open_command or _first_available(OPEN_COMMANDS)
        if opener is None:
            raise ActionError("no command to open urls found")
        return f"{opener} {shlex.quote(text)}", None

    return action.command, text


def execute_action(action: Action, text: str) -> int:
    """Run *action* on *text* and return the command's exit status."""
    command, stdin = build_command(action, text)
    logger.info("Running %s action: %s", type(action).__name__, command)

    result = subprocess.run(
        command,
        shell=True,
        input=stdin,
        text=True,
        env={**os.environ, "HINT": text},
        check=False,
    )
    if result.returncode != 0:
        logger.warning("Action exited with status %d", result.returncode)
    return result.returncode
