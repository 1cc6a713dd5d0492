"""Tests for fingers.hinter -- hint assignment and line rendering."""

from __future__ import annotations

import pytest

from fingers.config import Config
from fingers.errors import AlphabetError, PatternError
from fingers.hinter import EngineState, Hinter, HintPool, Target
from fingers.match_formatter import MatchFormatter
from fingers.patterns import BUILTIN_PATTERNS

R = "\x1b[0m"
IP = BUILTIN_PATTERNS["ip"]
ASDF = ["a", "s", "d", "f"]

GIT_STATUS = """\
On branch ruby-rewrite-more-like-crystal-rewrite-amirite
Your branch is up to date with 'origin/ruby-rewrite-more-like-crystal-rewrite-amirite'.

Changes to be committed:
  (use "git restore --staged <file>..." to unstage)
        modified:   spec/lib/fingers/match_formatter_spec.cr

Changes not staged for commit:
  (use "git add <file>..." to update what will be committed)
  (use "git restore <file>..." to discard changes in working directory)
        modified:   .gitignore
        modified:   spec/lib/fingers/hinter_spec.cr
        modified:   spec/lib/fingers/match_formatter_spec.cr
        modified:   spec/spec_helper.cr
        modified:   src/fingers/cli.cr
        modified:   src/fingers/dirs.cr
        modified:   src/fingers/match_formatter.cr
"""


def _five_ips(**kwargs) -> Hinter:
    lines = [f"10.0.0.{i}" for i in range(1, 6)]
    return Hinter(lines, 8, patterns=[IP], alphabet=ASDF, **kwargs)


# ---------------------------------------------------------------------------
# HintPool
# ---------------------------------------------------------------------------


class TestHintPool:
    def test_draws_from_the_end(self) -> None:
        pool = HintPool(["s", "d", "f", "aa", "as"])
        assert [pool.next(t) for t in "vwxyz"] == ["as", "aa", "f", "d", "s"]
        assert pool.next("extra") is None

    def test_recycled_hint_is_drawn_next(self) -> None:
        pool = HintPool(["a", "b", "c"])
        assert pool.next("x") == "c"
        pool.recycle("c")
        assert pool.next("y") == "c"
        assert pool.next("z") == "b"

    def test_reuse_returns_assigned_hint(self) -> None:
        pool = HintPool(["a", "b"], reuse_hints=True)
        hint = pool.next("text")
        pool.assign(Target("text", hint))
        assert pool.next("text") == hint
        assert pool.target_for_text("text") == Target("text", "b")

    def test_no_reuse_hands_out_fresh_hints(self) -> None:
        pool = HintPool(["a", "b"], reuse_hints=False)
        pool.assign(Target("text", pool.next("text")))
        assert pool.next("text") == "a"

    def test_rewind_restores_everything(self) -> None:
        pool = HintPool(["a", "b"])
        pool.assign(Target("x", pool.next("x")))
        pool.recycle(pool.next("y"))
        pool.rewind()
        assert pool.remaining() == 2
        assert pool.target_for_text("x") is None
        assert pool.next("x") == "b"


# ---------------------------------------------------------------------------
# Hinter: assignment
# ---------------------------------------------------------------------------


class TestHintAssignment:
    def test_first_match_gets_last_hint(self) -> None:
        hinter = _five_ips()
        hinter.render()
        assert hinter.hints == ("s", "d", "f", "aa", "as")
        assert [hinter.resolve(h).text for h in ("as", "aa", "f", "d", "s")] == [
            "10.0.0.1",
            "10.0.0.2",
            "10.0.0.3",
            "10.0.0.4",
            "10.0.0.5",
        ]

    def test_same_text_reuses_hint(self) -> None:
        hinter = Hinter(
            ["10.0.0.1 10.0.0.1", "10.0.0.2"], 20, patterns=[IP], alphabet=ASDF
        )
        lines = hinter.render()
        assert hinter.hints == ("a", "s")
        assert hinter.resolve("s") == Target("10.0.0.1", "s")
        assert hinter.resolve("a") == Target("10.0.0.2", "a")
        assert lines[0].count(f"{R}s{R}") == 2

    def test_without_reuse_every_match_has_its_own_hint(self) -> None:
        hinter = Hinter(
            ["10.0.0.1 10.0.0.1", "10.0.0.2"],
            20,
            patterns=[IP],
            alphabet=ASDF,
            reuse_hints=False,
        )
        hinter.render()
        assert hinter.hints == ("a", "s", "d")
        assert hinter.resolve("d").text == "10.0.0.1"
        assert hinter.resolve("s").text == "10.0.0.1"
        assert hinter.resolve("a").text == "10.0.0.2"

    def test_hint_longer_than_text_is_passed_on(self) -> None:
        hinter = Hinter(["x yy zzz"], 8, patterns=[r"\w+"], alphabet=["a", "b"])
        (line,) = hinter.render()
        assert hinter.hints == ("b", "aa", "ab")
        assert line == f"x {R}ab{R}{R} {R}aa{R}z{R}"
        assert hinter.resolve("ab").text == "yy"
        assert hinter.resolve("aa").text == "zzz"
        assert hinter.resolve("b") is None

    def test_extracted_text_is_the_target(self) -> None:
        formatter = MatchFormatter(hint_style="H", highlight_style="L", backdrop_style="B")
        hinter = Hinter(
            ["        modified:   src/app.py"],
            30,
            patterns=[BUILTIN_PATTERNS["git-status"]],
            alphabet=ASDF,
            formatter=formatter,
        )
        (line,) = hinter.render()
        assert line == f"B        {R}Bmodified:   Ha{R}Lrc/app.py{R}BB"
        assert hinter.resolve("a") == Target("src/app.py", "a")

    def test_git_status_targets(self) -> None:
        hinter = Hinter.from_config(GIT_STATUS.splitlines(), 100, Config())
        rendered = hinter.render()
        assert len(rendered) == len(GIT_STATUS.splitlines())
        targets = {hinter.resolve(h).text for h in hinter.hints}
        assert targets == {
            "origin/ruby-rewrite-more-like-crystal-rewrite-amirite",
            "spec/lib/fingers/match_formatter_spec.cr",
            ".gitignore",
            "spec/lib/fingers/hinter_spec.cr",
            "spec/spec_helper.cr",
            "src/fingers/cli.cr",
            "src/fingers/dirs.cr",
            "src/fingers/match_formatter.cr",
        }
        assert all(len(h) == 1 for h in hinter.hints)

    def test_no_matches(self) -> None:
        hinter = Hinter(["nothing here"], 12, patterns=[IP], alphabet=ASDF)
        assert hinter.render() == ["nothing here"]
        assert hinter.hints == ()
        assert hinter.resolve("a") is None


# ---------------------------------------------------------------------------
# Hinter: rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_hint_overlay_and_padding(self) -> None:
        formatter = MatchFormatter(hint_style="H", highlight_style="L")
        hinter = Hinter(
            ["foo 192.168.0.1 bar"], 30, patterns=[IP], alphabet=ASDF, formatter=formatter
        )
        assert hinter.render() == [f"foo {R}Ha{R}L92.168.0.1{R} bar" + " " * 11]

    def test_render_is_idempotent(self) -> None:
        hinter = _five_ips()
        first = hinter.render()
        assert hinter.render() == first
        assert hinter.resolve("as").text == "10.0.0.1"

    def test_typed_prefix_filters_hints(self) -> None:
        hinter = _five_ips()
        lines = hinter.render(typed="a")
        assert lines[0] == f"{R}as{R}0.0.1{R}"
        assert lines[1] == f"{R}aa{R}0.0.2{R}"
        assert lines[2:] == ["10.0.0.3", "10.0.0.4", "10.0.0.5"]
        # Filtered matches keep their hints.
        assert hinter.resolve("f").text == "10.0.0.3"

    def test_typing_does_not_change_assignment(self) -> None:
        hinter = _five_ips()
        before = hinter.render()
        hinter.render(typed="a")
        assert hinter.render() == before

    def test_selected_hints_use_selected_styles(self) -> None:
        formatter = MatchFormatter(
            hint_style="H",
            highlight_style="L",
            selected_hint_style="SH",
            selected_highlight_style="SL",
        )
        hinter = _five_ips(formatter=formatter)
        lines = hinter.render(selected=["as"])
        assert lines[0] == f"{R}SHas{R}SL0.0.1{R}"
        assert lines[1] == f"{R}Haa{R}L0.0.2{R}"

    def test_backdrop_prefixes_every_line(self) -> None:
        formatter = MatchFormatter(backdrop_style="B")
        hinter = Hinter(["plain", ""], 5, patterns=[IP], alphabet=ASDF, formatter=formatter)
        assert hinter.render() == ["Bplain", "B     "]

    def test_render_width_override(self) -> None:
        hinter = Hinter(["abc"], 5, patterns=[IP], alphabet=ASDF)
        assert hinter.render() == ["abc  "]
        assert hinter.render(width=8) == ["abc     "]

    def test_line_wider_than_width_is_not_truncated(self) -> None:
        hinter = Hinter(["abcdef"], 3, patterns=[IP], alphabet=ASDF)
        assert hinter.render() == ["abcdef"]

    def test_wide_characters_reduce_padding(self) -> None:
        hinter = Hinter(["日本 10.0.0.1"], 20, patterns=[IP], alphabet=ASDF)
        (line,) = hinter.render()
        assert line == f"日本 {R}a{R}0.0.0.1{R}" + " " * 7


class TestTabs:
    def test_leading_tab_before_match(self) -> None:
        hinter = Hinter(["\t10.0.0.1"], 20, patterns=[IP], alphabet=ASDF)
        assert hinter.render() == [" " * 8 + f"{R}a{R}0.0.0.1{R}" + " " * 4]

    def test_tab_between_words(self) -> None:
        hinter = Hinter(["ab\tcd"], 12, patterns=[IP], alphabet=ASDF)
        assert hinter.render() == ["ab      cd  "]

    def test_wide_character_before_tab(self) -> None:
        hinter = Hinter(["日\tx"], 12, patterns=[IP], alphabet=ASDF)
        assert hinter.render() == ["日" + " " * 6 + "x" + " " * 3]

    def test_tab_after_match_uses_source_columns(self) -> None:
        hinter = Hinter(["10.0.0.1\tx"], 20, patterns=[IP], alphabet=ASDF)
        (line,) = hinter.render()
        assert line == f"{R}a{R}0.0.0.1{R}" + " " * 8 + "x" + " " * 3


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_state_is_ready_after_build_and_render(self) -> None:
        hinter = _five_ips()
        assert hinter.state is EngineState.READY
        hinter.render()
        assert hinter.state is EngineState.READY

    def test_invalid_pattern(self) -> None:
        with pytest.raises(PatternError):
            Hinter(["x"], 1, patterns=["(oops"], alphabet=ASDF)

    def test_alphabet_too_small(self) -> None:
        with pytest.raises(AlphabetError):
            Hinter(["1.1.1.1 2.2.2.2"], 20, patterns=[IP], alphabet=["a"])

    def test_from_config_uses_config_styles(self) -> None:
        config = Config(hint_position="right", alphabet=["x", "y"], patterns=[IP])
        hinter = Hinter.from_config(["10.0.0.1"], 8, config)
        (line,) = hinter.render()
        assert line == (
            f"{R}{config.highlight_style}10.0.0.{R}{config.hint_style}x{R}"
        )

    def test_lines_and_width(self) -> None:
        hinter = Hinter(["a", "b"], 42, patterns=[], alphabet=ASDF)
        assert hinter.lines == ["a", "b"]
        assert hinter.width == 42
