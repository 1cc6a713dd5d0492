"""Tests for fingers.ansi -- tmux style strings to escape sequences."""

from __future__ import annotations

from fingers.ansi import RESET, format_style, parse_style


class TestParseStyle:
    """Attribute lists become concatenated SGR sequences."""

    def test_fg_and_bg_colors(self) -> None:
        assert parse_style("bg=red,fg=yellow,bold") == "\x1b[41m\x1b[33m\x1b[1m"

    def test_256_colour(self) -> None:
        assert parse_style("fg=colour123") == "\x1b[38;5;123m"

    def test_256_color_american_spelling_background(self) -> None:
        assert parse_style("bg=color7") == "\x1b[48;5;7m"

    def test_default_color(self) -> None:
        assert parse_style("fg=default") == "\x1b[39m"
        assert parse_style("bg=default") == "\x1b[49m"

    def test_attributes(self) -> None:
        assert parse_style("bold") == "\x1b[1m"
        assert parse_style("bright") == "\x1b[1m"
        assert parse_style("dim") == "\x1b[2m"
        assert parse_style("italics") == "\x1b[3m"
        assert parse_style("underscore") == "\x1b[4m"
        assert parse_style("reverse") == "\x1b[7m"

    def test_multiple_styles(self) -> None:
        assert parse_style("fg=green,bold") == "\x1b[32m\x1b[1m"

    def test_space_separated(self) -> None:
        assert parse_style("fg=green bold") == "\x1b[32m\x1b[1m"

    def test_no_prefix_emits_full_reset(self) -> None:
        assert parse_style("nobold") == RESET
        assert parse_style("fg=red,noitalics") == "\x1b[31m" + RESET

    def test_unknown_tokens_are_skipped(self) -> None:
        assert parse_style("fg=purple,blink,bold,nosuch") == "\x1b[1m"

    def test_out_of_range_colour_is_skipped(self) -> None:
        assert parse_style("fg=colour256") == ""
        assert parse_style("fg=colourx") == ""

    def test_empty_input(self) -> None:
        assert parse_style("") == ""


class TestFormatStyle:
    """The ``#[...]`` wrapper is optional."""

    def test_strips_tmux_brackets(self) -> None:
        assert format_style("#[fg=green,bold]") == "\x1b[32m\x1b[1m"

    def test_works_without_brackets(self) -> None:
        assert format_style("fg=green,bold") == "\x1b[32m\x1b[1m"

    def test_wrapped_and_bare_agree(self) -> None:
        assert format_style("#[bg=black,fg=white]") == format_style("bg=black,fg=white")
