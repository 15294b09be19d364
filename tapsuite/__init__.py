"""Parser for the Test Anything Protocol (TAP)."""

from tapsuite.parsing import (
    END_OF_INPUT,
    Directive,
    EndOfInput,
    GrammarError,
    NumericParseError,
    Parser,
    ProtocolError,
    TapError,
    TapIOError,
    Testline,
    Testsuite,
    parse_suite,
    parse_text,
)

__all__ = [
    "END_OF_INPUT",
    "Directive",
    "EndOfInput",
    "GrammarError",
    "NumericParseError",
    "Parser",
    "ProtocolError",
    "TapError",
    "TapIOError",
    "Testline",
    "Testsuite",
    "parse_suite",
    "parse_text",
]
