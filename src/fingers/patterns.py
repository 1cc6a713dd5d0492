"""Multi-pattern scanner.

Independent pattern fragments are compiled into one alternation. Each
fragment may carry a ``(?P<match>...)`` group naming the part of the match
that is actually acted on (the path in ``modified:   src/app.py``). Python's
``re`` rejects duplicate group names, so the compiler gives every fragment
its own extraction group and remembers which name belongs to which fragment.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from fingers.errors import PatternError

logger = logging.getLogger(__name__)

EXTRACTION_GROUP = "match"

_EXTRACTION_OPEN = f"(?P<{EXTRACTION_GROUP}>"
_EXTRACTION_REF = f"(?P={EXTRACTION_GROUP})"
_EXTRACTION_COND = f"(?({EXTRACTION_GROUP})"

# Leading global flags such as "(?i)" are only legal at the very start of a
# pattern, so they become scoped "(?i:...)" groups once wrapped.
_LEADING_FLAGS_RE = re.compile(r"^\(\?([aiLmsux]+)\)")


def _scope_inline_flags(source: str) -> str:
    m = _LEADING_FLAGS_RE.match(source)
    if m is None:
        return source
    return f"(?{m.group(1)}:{source[m.end():]})"


_CONDITIONAL_RE = re.compile(r"\(\?\((\d+)\)")
_DIGITS = "0123456789"
_OCTAL_DIGITS = "01234567"
# re reads at most two digits after a backslash as a group number
_MAX_BACKREFERENCE = 99


def _shift_group_references(source: str, offset: int) -> str:
    """Add *offset* to every ``\\N`` backreference and ``(?(N)`` conditional.

    Octal escapes and character class contents are left untouched.

    Raises:
        ValueError: if a shifted group number cannot be written as a
            backreference.
    """
    out: list[str] = []
    i = 0
    n = len(source)
    in_class = False

    while i < n:
        ch = source[i]

        if ch == "\\" and i + 1 < n:
            is_octal = source[i + 1] == "0" or (
                len(source[i + 1:i + 4]) == 3
                and all(c in _OCTAL_DIGITS for c in source[i + 1:i + 4])
            )
            if in_class or source[i + 1] not in _DIGITS or is_octal:
                out.append(source[i:i + 2])
                i += 2
                continue

            j = i + 1
            while j < n and j < i + 3 and source[j] in _DIGITS:
                j += 1
            number = int(source[i + 1:j]) + offset
            if number > _MAX_BACKREFERENCE:
                raise ValueError(
                    f"backreference \\{source[i + 1:j]} would become group {number}, "
                    f"past the limit of {_MAX_BACKREFERENCE}"
                )
            # "\2" + "7" must not turn into the escape "\27"
            if j < n and source[j] in _DIGITS:
                out.append(f"(?:\\{number})")
            else:
                out.append(f"\\{number}")
            i = j
            continue

        if in_class:
            if ch == "]":
                in_class = False
            out.append(ch)
            i += 1
            continue

        if ch == "[":
            in_class = True
            out.append(ch)
            i += 1
            # "]" right after "[" or "[^" is a literal
            if source.startswith("^", i):
                out.append("^")
                i += 1
            if source.startswith("]", i):
                out.append("]")
                i += 1
            continue

        m = _CONDITIONAL_RE.match(source, i)
        if m is not None:
            out.append(f"(?({int(m.group(1)) + offset})")
            i = m.end()
            continue

        out.append(ch)
        i += 1

    return "".join(out)


# ---------------------------------------------------------------------------
# Builtin patterns
# ---------------------------------------------------------------------------

_KUBERNETES_RESOURCES = (
    r"(deployment\.app|binding|componentstatuse|configmap|endpoint|event|"
    r"limitrange|namespace|node|persistentvolumeclaim|persistentvolume|pod|"
    r"podtemplate|replicationcontroller|resourcequota|secret|serviceaccount|"
    r"service|mutatingwebhookconfiguration\.admissionregistration\.k8s\.io|"
    r"validatingwebhookconfiguration\.admissionregistration\.k8s\.io|"
    r"customresourcedefinition\.apiextension\.k8s\.io|"
    r"apiservice\.apiregistration\.k8s\.io|controllerrevision\.apps|"
    r"daemonset\.apps|deployment\.apps|replicaset\.apps|statefulset\.apps|"
    r"tokenreview\.authentication\.k8s\.io|"
    r"localsubjectaccessreview\.authorization\.k8s\.io|"
    r"selfsubjectaccessreviews\.authorization\.k8s\.io|"
    r"selfsubjectrulesreview\.authorization\.k8s\.io|"
    r"subjectaccessreview\.authorization\.k8s\.io|"
    r"horizontalpodautoscaler\.autoscaling|cronjob\.batch|job\.batch|"
    r"certificatesigningrequest\.certificates\.k8s\.io|"
    r"events\.events\.k8s\.io|daemonset\.extensions|deployment\.extensions|"
    r"ingress\.extensions|networkpolicies\.extensions|"
    r"podsecuritypolicies\.extensions|replicaset\.extensions|"
    r"networkpolicie\.networking\.k8s\.io|"
    r"poddisruptionbudget\.policy|"
    r"clusterrolebinding\.rbac\.authorization\.k8s\.io|"
    r"clusterrole\.rbac\.authorization\.k8s\.io|"
    r"rolebinding\.rbac\.authorization\.k8s\.io|"
    r"role\.rbac\.authorization\.k8s\.io|"
    r"storageclasse\.storage\.k8s\.io)"
)

BUILTIN_PATTERNS: dict[str, str] = {
    "ip": r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}",
    "uuid": r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    "sha": r"[0-9a-f]{7,128}",
    "digit": r"[0-9]{4,}",
    "url": r"((https?://|git@|git://|ssh://|ftp://|file:///)[^\s()\x22']+)",
    "path": r"(([.\w\-~\$@]+)?(/[.\w\-@]+)+/?)",
    "hex": r"(0x[0-9a-fA-F]+)",
    "kubernetes": _KUBERNETES_RESOURCES + r"[a-zA-Z0-9_#$%&+=/@-]+",
    "git-status": r"(modified|deleted|deleted by us|new file): +(?P<match>.+)",
    "git-status-branch": r"Your branch is up to date with '(?P<match>.*)'\.",
    "diff": r"(---|\+\+\+) [ab]/(?P<match>.*)",
}


def resolve_builtin_patterns(enabled: str) -> list[str]:
    """Patterns for a comma separated list of builtin names, or ``"all"``."""
    if enabled.strip() == "all":
        return list(BUILTIN_PATTERNS.values())

    patterns: list[str] = []
    for name in enabled.split(","):
        name = name.strip()
        if not name:
            continue
        pattern = BUILTIN_PATTERNS.get(name)
        if pattern is None:
            logger.warning("Unknown builtin pattern %r, skipping", name)
            continue
        patterns.append(pattern)
    return patterns


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Match:
    """One pattern hit inside a captured line.

    ``start``/``end`` are offsets into the line. ``extracted_offset`` is the
    ``(start, length)`` of the extraction group relative to ``start`` and is
    ``None`` when the whole match is the extracted text.
    """

    line_index: int
    start: int
    end: int
    text: str
    extracted_text: str
    extracted_offset: tuple[int, int] | None
    fragment_index: int


def count_unique(matches: Iterable[Match]) -> int:
    return len({m.extracted_text for m in matches})


def count_all(matches: Iterable[Match]) -> int:
    return sum(1 for _ in matches)


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Fragment:
    index: int
    source: str
    group: str
    extraction_group: str | None


class PatternMatcher:
    """A compiled pattern set. Create with :func:`compile_patterns`."""

    def __init__(self, regex: re.Pattern[str] | None, fragments: Sequence[_Fragment]) -> None:
        self._regex = regex
        self._fragments = {f.group: f for f in fragments}

    @property
    def pattern(self) -> str:
        return self._regex.pattern if self._regex is not None else ""

    def scan_line(self, line: str, line_index: int = 0) -> Iterator[Match]:
        """Yield the non-overlapping matches of *line*, left to right."""
        if self._regex is None:
            return

        for m in self._regex.finditer(line):
            if m.start() == m.end():
                continue

            fragment = self._fragments[m.lastgroup] if m.lastgroup else None
            extracted_text = m.group(0)
            extracted_offset = None

            if fragment is not None and fragment.extraction_group is not None:
                start = m.start(fragment.extraction_group)
                if start != -1:
                    extracted_text = m.group(fragment.extraction_group)
                    extracted_offset = (start - m.start(), len(extracted_text))

            yield Match(
                line_index=line_index,
                start=m.start(),
                end=m.end(),
                text=m.group(0),
                extracted_text=extracted_text,
                extracted_offset=extracted_offset,
                fragment_index=fragment.index if fragment is not None else -1,
            )

    def scan(self, lines: Iterable[str]) -> Iterator[Match]:
        """Yield every match across *lines*. Each call starts a fresh scan."""
        for line_index, line in enumerate(lines):
            yield from self.scan_line(line, line_index)


def compile_patterns(fragments: Sequence[str]) -> PatternMatcher:
    """Compile *fragments* into one leftmost-first alternation.

    Raises:
        PatternError: if a fragment, or the combined pattern, is invalid.
    """
    compiled: list[_Fragment] = []
    parts: list[str] = []
    group_count = 0

    for index, source in enumerate(fragments):
        try:
            n_groups = re.compile(source).groups
        except re.error as e:
            raise PatternError(str(e), fragment=source, index=index) from e

        # Numbered groups shift by every group opened before this fragment,
        # its own wrapper included.
        offset = group_count + 1
        group_count += n_groups + 1
        try:
            rewritten = _shift_group_references(_scope_inline_flags(source), offset)
        except ValueError as e:
            raise PatternError(str(e), fragment=source, index=index) from e

        extraction_group = None
        if _EXTRACTION_OPEN in source:
            extraction_group = f"{EXTRACTION_GROUP}_{index}"
            rewritten = rewritten.replace(_EXTRACTION_OPEN, f"(?P<{extraction_group}>")
            rewritten = rewritten.replace(_EXTRACTION_REF, f"(?P={extraction_group})")
            rewritten = rewritten.replace(_EXTRACTION_COND, f"(?({extraction_group})")

        group = f"_f{index}"
        compiled.append(_Fragment(index, source, group, extraction_group))
        parts.append(f"(?P<{group}>{rewritten})")

    if not parts:
        return PatternMatcher(None, [])

    combined = "|".join(parts)
    try:
        regex = re.compile(combined)
    except re.error as e:
        raise PatternError(f"combined pattern is invalid: {e}") from e

    logger.debug("Compiled %d pattern fragments", len(compiled))
    return PatternMatcher(regex, compiled)
