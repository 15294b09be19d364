"""TAP parsing: line grammar, data model, incremental parser, aggregation."""

from tapsuite.parsing.errors import (
    END_OF_INPUT,
    EndOfInput,
    GrammarError,
    NumericParseError,
    ProtocolError,
    TapError,
    TapIOError,
)
from tapsuite.parsing.grammar import LineKind, classify, parse_testline
from tapsuite.parsing.models import Directive, Testline, Testsuite
from tapsuite.parsing.parser import Parser, parse_suite, parse_text

__all__ = [
    "END_OF_INPUT",
    "Directive",
    "EndOfInput",
    "GrammarError",
    "LineKind",
    "NumericParseError",
    "Parser",
    "ProtocolError",
    "TapError",
    "TapIOError",
    "Testline",
    "Testsuite",
    "classify",
    "parse_suite",
    "parse_testline",
    "parse_text",
]
