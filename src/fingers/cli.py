"""CLI entry point for fingers. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import os
import shutil
import sys

import click

from fingers.action import execute_action, parse_action
from fingers.capture import capture_tmux_pane, read_capture
from fingers.config import KEYBOARD_LAYOUTS, Config, load_config
from fingers.errors import FingersError
from fingers.hinter import Hinter
from fingers.patterns import BUILTIN_PATTERNS

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _setup_logging(level: str, log_file: str | None, *, quiet: bool = False) -> None:
    handlers: list[logging.Handler]
    if log_file:
        handlers = [logging.FileHandler(log_file)]
    elif quiet:
        # stderr shares the screen with the hint overlay
        handlers = [logging.NullHandler()]
    else:
        handlers = [logging.StreamHandler(sys.stderr)]

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


_CONFIG_OPTIONS = [
    click.option("--config", "config_path", default=None, help="JSON config file"),
    click.option("--pattern", "-p", "patterns", multiple=True, help="Extra pattern (repeatable)"),
    click.option("--builtin", "builtins", default=None, help="Builtin patterns: 'all' or names"),
    click.option(
        "--layout",
        type=click.Choice(sorted(KEYBOARD_LAYOUTS)),
        default=None,
        help="Keyboard layout for the hint alphabet",
    ),
    click.option("--alphabet", default=None, help="Explicit hint alphabet"),
    click.option("--action", default=None, help="':copy:', ':open:' or a shell command"),
    click.option("--hint-position", type=click.Choice(["left", "right"]), default=None),
    click.option("--reuse-hints/--no-reuse-hints", default=None),
    click.option(
        "--log-level",
        default="warning",
        type=click.Choice(["debug", "info", "warning", "error"]),
    ),
    click.option("--log-file", default=None, help="Write logs to this file"),
]


def _config_options(fn):
    """Options shared by every command that builds a hinter."""
    for option in reversed(_CONFIG_OPTIONS):
        fn = option(fn)
    return fn


def _load(
    config_path: str | None,
    patterns: tuple[str, ...],
    builtins: str | None,
    layout: str | None,
    alphabet: str | None,
    action: str | None,
    hint_position: str | None,
    reuse_hints: bool | None,
) -> Config:
    overrides = {
        "patterns": list(patterns) or None,
        "enabled_builtin_patterns": builtins,
        "keyboard_layout": layout,
        "alphabet": alphabet,
        "action": action,
        "hint_position": hint_position,
        "reuse_hints": reuse_hints,
    }
    try:
        return load_config(config_path, overrides)
    except FingersError as e:
        raise click.ClickException(str(e)) from e


def _read_lines(source: str | None, tmux_pane: str | None) -> list[str]:
    try:
        if tmux_pane is not None:
            return capture_tmux_pane(tmux_pane)
        if source is None:
            # Piped text wins over the surrounding tmux session.
            if not sys.stdin.isatty():
                source = "-"
            elif os.environ.get("TMUX"):
                return capture_tmux_pane(None)
            else:
                raise click.UsageError("nothing to hint: pass --input or --tmux-pane")
        return read_capture(source)
    except FingersError as e:
        raise click.ClickException(str(e)) from e


def _build_hinter(lines: list[str], width: int, config: Config) -> Hinter:
    try:
        return Hinter.from_config(lines, width, config)
    except FingersError as e:
        raise click.ClickException(str(e)) from e


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx):
    """Select text from a terminal pane by typing short hints."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option("--input", "-i", "source", default=None, help="Captured text file, '-' for stdin")
@click.option("--tmux-pane", default=None, help="Capture this tmux pane instead")
@_config_options
def hint(source, tmux_pane, config_path, patterns, builtins, layout, alphabet, action,
         hint_position, reuse_hints, log_level, log_file):
    """Hint the captured text and run the action on the selection."""
    from fingers.app import run_interactive

    _setup_logging(log_level, log_file, quiet=True)
    config = _load(config_path, patterns, builtins, layout, alphabet, action,
                   hint_position, reuse_hints)
    lines = _read_lines(source, tmux_pane)
    width = shutil.get_terminal_size().columns
    hinter = _build_hinter(lines, width, config)

    selection = run_interactive(hinter)
    if selection is None:
        logger.info("Hinting cancelled")
        return

    selected_action = parse_action(config.action, config.clipboard_command, config.open_command)
    if selected_action is None:
        click.echo(selection)
        return
    try:
        sys.exit(execute_action(selected_action, selection))
    except FingersError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option("--input", "-i", "source", default=None, help="Captured text file, '-' for stdin")
@click.option("--tmux-pane", default=None, help="Capture this tmux pane instead")
@click.option("--typed", default="", help="Hint prefix typed so far")
@click.option("--width", type=int, default=None, help="Render width (default: terminal width)")
@click.option("--height", type=int, default=None, help="Maximum rows (default: all)")
@_config_options
def render(source, tmux_pane, typed, width, height, config_path, patterns, builtins, layout,
           alphabet, action, hint_position, reuse_hints, log_level, log_file):
    """Print one hinted frame without reading keys."""
    _setup_logging(log_level, log_file)
    config = _load(config_path, patterns, builtins, layout, alphabet, action,
                   hint_position, reuse_hints)
    lines = _read_lines(source, tmux_pane)
    width = width if width is not None else shutil.get_terminal_size().columns
    hinter = _build_hinter(lines, width, config)

    rendered = hinter.render(typed)
    if height is not None:
        rendered = rendered[:height]
    for line in rendered:
        click.echo(line, color=True)


@main.command("patterns")
def list_patterns():
    """List builtin patterns."""
    for name, pattern in BUILTIN_PATTERNS.items():
        click.echo(f"{name:<18} {pattern}")


@main.command("layouts")
def list_layouts():
    """List keyboard layouts and their hint alphabets."""
    for name, chars in KEYBOARD_LAYOUTS.items():
        click.echo(f"{name:<18} {chars}")


if __name__ == "__main__":
    main()
