"""Errors raised while parsing TAP, and the end-of-input sentinel."""

from __future__ import annotations

import enum


class EndOfInput(enum.Enum):
    """Marker type for :data:`END_OF_INPUT`."""

    TOKEN = "end of input"

    def __repr__(self) -> str:
        return "END_OF_INPUT"

    def __bool__(self) -> bool:
        return False


# Returned by ``Parser.next()`` once the stream holds no more test lines.
# Compare with ``is``.
END_OF_INPUT = EndOfInput.TOKEN


class TapError(Exception):
    """Base class for all TAP parsing failures."""


class TapIOError(TapError):
    """The underlying line source failed to produce a line."""


class GrammarError(TapError):
    """A line expected to be a test result does not match the grammar."""

    def __init__(self, line: str) -> None:
        super().__init__(f'Does not match a test line: "{line}"')
        self.line = line


class NumericParseError(TapError):
    """A plan count or test number is not a valid non-negative integer."""

    def __init__(self, text: str) -> None:
        super().__init__(f'Could not parse number "{text}"')
        self.text = text


class ProtocolError(TapError):
    """The stream violates TAP structure, e.g. declares its plan twice."""
