"""Line classification rules for TAP streams.

Each rule is anchored to the whole line and applied to a line that has
already been stripped of surrounding whitespace.  Classification is pure:
it never reads input, it only inspects the text it is given.
"""

from __future__ import annotations

import enum
import re

from tapsuite.parsing.errors import GrammarError, NumericParseError
from tapsuite.parsing.models import Directive, Testline

VERSION_RE = re.compile(r"^TAP version (?P<version>[0-9]+)$")
PLAN_RE = re.compile(r"^1\.\.(?P<count>\S+)$")
TESTLINE_RE = re.compile(
    r"^(?P<not>not )?ok(?=\s|#|$)"
    r"(?:\s+(?P<num>[0-9]+)(?=\s|#|$))?"
    r"\s*(?P<description>(?:[^#\\]|\\.?)*?)\s*"
    r"(?:#\s*(?:(?P<directive>(?i:todo|skipped|skip)):?(?=\s|$))?\s*(?P<explanation>.*))?$"
)
DIAGNOSTIC_RE = re.compile(r"^#\s*(?P<text>.*)$")
BLOCK_START_RE = re.compile(r"^\s*---\s*$")
BLOCK_END_RE = re.compile(r"^\s*\.\.\.\s*$")

_DIRECTIVES = {"todo": Directive.TODO, "skip": Directive.SKIP}


class LineKind(enum.Enum):
    """Category of a single TAP line."""

    VERSION = "version"
    PLAN = "plan"
    TEST = "test"
    DIAGNOSTIC = "diagnostic"
    BLOCK_START = "block_start"
    BLOCK_END = "block_end"
    BLANK = "blank"
    UNKNOWN = "unknown"


# Checked in order; the first match wins.
_RULES: tuple[tuple[LineKind, re.Pattern[str]], ...] = (
    (LineKind.TEST, TESTLINE_RE),
    (LineKind.PLAN, PLAN_RE),
    (LineKind.DIAGNOSTIC, DIAGNOSTIC_RE),
    (LineKind.BLOCK_START, BLOCK_START_RE),
    (LineKind.BLOCK_END, BLOCK_END_RE),
    (LineKind.VERSION, VERSION_RE),
)


def classify(line: str) -> tuple[LineKind, re.Match[str] | None]:
    """Return the kind of *line* together with the match that decided it.

    Args:
        line: A single line with surrounding whitespace removed.

    Returns:
        ``(kind, match)``; ``match`` is ``None`` for blank and unknown
        lines.
    """
    if not line:
        return LineKind.BLANK, None
    for kind, pattern in _RULES:
        match = pattern.match(line)
        if match is not None:
            return kind, match
    return LineKind.UNKNOWN, None


def parse_count(text: str) -> int:
    """Convert a plan count or test number to a non-negative integer."""
    if not text.isascii() or not text.isdigit():
        raise NumericParseError(text)
    return int(text)


def _unescape(description: str) -> str:
    if description.startswith("- "):
        description = description[2:].lstrip()
    elif description == "-":
        description = ""
    return description.replace("\\#", "#")


def parse_testline(line: str) -> Testline:
    """Build a :class:`Testline` from a test-result line.

    Directive words are ``TODO``, ``SKIP`` and ``SKIPPED`` (any case), with an
    optional trailing colon. Any other ``# comment`` is dropped.

    Raises:
        GrammarError: *line* does not match the test-result grammar.
    """
    match = TESTLINE_RE.match(line)
    if match is None:
        raise GrammarError(line)

    num = match.group("num")
    directive_word = match.group("directive")
    directive = (
        _DIRECTIVES[directive_word[:4].lower()] if directive_word else Directive.NONE
    )

    return Testline(
        ok=match.group("not") is None,
        num=parse_count(num) if num is not None else None,
        description=_unescape(match.group("description")),
        directive=directive,
        explanation=(
            (match.group("explanation") or "").strip()
            if directive is not Directive.NONE
            else ""
        ),
    )
