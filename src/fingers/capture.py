"""Acquire the pane text to hint.

The text comes from a file written by the multiplexer (``tmux
capture-pane``, zellij ``DumpScreen``), from stdin, or straight from tmux.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path

from fingers.errors import CaptureError

logger = logging.getLogger(__name__)


def split_capture(text: str) -> list[str]:
    """Split captured text into lines without trailing whitespace."""
    return [line.rstrip() for line in text.splitlines()]


def read_capture(source: str | Path) -> list[str]:
    """Read captured lines from a file path, or from stdin when *source* is ``-``.

    Raises:
        CaptureError: if the file cannot be read.
    """
    if str(source) == "-":
        return split_capture(sys.stdin.read())

    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise CaptureError(f"cannot read capture file {path}: {e}") from e

    lines = split_capture(text)
    logger.debug("Read %d captured lines from %s", len(lines), path)
    return lines


def capture_tmux_pane(target: str | None = None) -> list[str]:
    """Capture the visible content of a tmux pane.

    Raises:
        CaptureError: if tmux is missing or the capture fails.
    """
    cmd = ["tmux", "capture-pane", "-p", "-J"]
    if target:
        cmd += ["-t", target]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise CaptureError("tmux is not installed") from e

    if result.returncode != 0:
        raise CaptureError(f"tmux capture-pane failed: {result.stderr.strip()}")

    return split_capture(result.stdout)
