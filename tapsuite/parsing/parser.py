"""Incremental TAP parser.

Reads a TAP stream one line at a time with a single line of lookahead.
The header (optional ``TAP version N`` and a leading ``1..N`` plan) is
consumed when the parser is constructed.  Each call to :meth:`Parser.next`
then returns one completed :class:`Testline`, after absorbing the comment
lines, ``---``/``...`` blocks and trailing plan that follow it.

Typical use::

    with open("results.tap", "rb") as f:
        suite = parse_suite(f)
    if not suite.ok:
        for test in suite.failed:
            print(test.num, test.description)
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, Iterator

from tapsuite.parsing.errors import (
    END_OF_INPUT,
    EndOfInput,
    ProtocolError,
)
from tapsuite.parsing.grammar import (
    BLOCK_END_RE,
    LineKind,
    classify,
    parse_count,
    parse_testline,
)
from tapsuite.parsing.models import Testline, Testsuite
from tapsuite.parsing.source import LineSource, RawLine

logger = logging.getLogger(__name__)


class Parser:
    """Parses a TAP stream into :class:`Testline` values.

    The parser exclusively owns *source*; nothing else may read from it
    while the parser is in use.  It never closes the source.

    Args:
        source: A text or binary stream, or any iterable of lines.
        encoding: Used to decode ``bytes`` lines and to encode block
            content read from text sources.
        errors: Codec error handler (``"strict"``, ``"replace"``, ...).

    Raises:
        TapIOError: The source failed while reading the header.
        NumericParseError: The leading plan has a malformed count.
    """

    def __init__(
        self,
        source: Iterable[RawLine],
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        self._source = LineSource(source, encoding=encoding, errors=errors)
        self._line: str | None = None
        self._suite = Testsuite()
        self._read_header()

    @property
    def suite(self) -> Testsuite:
        """The suite accumulated so far (partial until input is exhausted)."""
        return self._suite

    def _next_nonblank(self) -> str | None:
        while True:
            line = self._source.read()
            if line is None or line:
                return line

    def _read_header(self) -> None:
        line = self._next_nonblank()
        if line is None:
            logger.debug("Empty TAP stream")
            return

        kind, match = classify(line)
        if kind is LineKind.VERSION:
            assert match is not None
            self._suite.version = int(match.group("version"))
            logger.debug("TAP version %d", self._suite.version)
            line = self._next_nonblank()
            if line is None:
                return
            kind, match = classify(line)

        if kind is LineKind.PLAN:
            assert match is not None
            self._record_plan(match.group("count"))
            line = self._next_nonblank()

        self._line = line

    def _record_plan(self, count: str) -> None:
        if self._suite.plan is not None:
            raise ProtocolError(
                f"Duplicate plan: 1..{count} after 1..{self._suite.plan}"
            )
        self._suite.plan = parse_count(count)
        logger.debug("Plan declares %d tests", self._suite.plan)

    def _read_block(self, test: Testline) -> bool:
        """Append raw lines to ``test.block`` up to the closing ``...``.

        Returns ``False`` if input ended before the block was closed.
        """
        chunks: list[bytes] = []
        closed = False
        while True:
            raw = self._source.read_raw()
            if raw is None:
                break
            # Block lines stay raw bytes; only the end marker is decoded.
            if BLOCK_END_RE.match(self._source.decode(raw, errors="replace")):
                closed = True
                break
            chunks.append(self._source.encode(raw))
        test.block += b"".join(chunks)
        logger.debug(
            "Captured %d block line(s) for test %s%s",
            len(chunks), test.num, "" if closed else " (unterminated)",
        )
        return closed

    def _complete(self, test: Testline) -> Testline:
        self._suite.tests.append(test)
        return test

    def next(self) -> Testline | EndOfInput:
        """Return the next completed test line, or :data:`END_OF_INPUT`.

        Raises:
            GrammarError: The pending line is not a test-result line.
            NumericParseError: A trailing plan has a malformed count.
            ProtocolError: A second plan line was found.
            TapIOError: The source failed.
        """
        if self._line is None:
            return END_OF_INPUT

        test = parse_testline(self._line)
        self._line = None

        while True:
            line = self._source.read()
            if line is None:
                return self._complete(test)

            kind, match = classify(line)
            if kind is LineKind.BLANK:
                continue
            if kind is LineKind.DIAGNOSTIC:
                assert match is not None
                test.diagnostic += match.group("text") + "\n"
                continue
            if kind is LineKind.BLOCK_START:
                if not self._read_block(test):
                    return self._complete(test)
                continue
            if kind is LineKind.PLAN:
                assert match is not None
                self._record_plan(match.group("count"))
                return self._complete(test)

            self._line = line
            return self._complete(test)

    def __iter__(self) -> Iterator[Testline]:
        return self

    def __next__(self) -> Testline:
        test = self.next()
        if test is END_OF_INPUT:
            raise StopIteration
        return test

    def parse_suite(self) -> Testsuite:
        """Read the stream to the end and return the final suite.

        Blocks until the source is exhausted.  On error the exception
        propagates and :attr:`suite` keeps the tests read so far, which is
        not a valid verdict.
        """
        suite = self._suite
        # Lines already pulled through next() count toward the verdict too.
        suite.ok = all(test.ok for test in suite.tests)
        for test in self:
            suite.ok = suite.ok and test.ok

        if suite.plan is None:
            logger.debug("No plan declared")
            suite.ok = False
        elif suite.plan == 0:
            suite.ok = False
        elif len(suite.tests) != suite.plan:
            logger.debug(
                "Planned %d tests but saw %d", suite.plan, len(suite.tests),
            )
            suite.ok = False
        return suite


def parse_suite(
    source: Iterable[RawLine],
    encoding: str = "utf-8",
    errors: str = "strict",
) -> Testsuite:
    """Parse a whole TAP stream and return its :class:`Testsuite`."""
    return Parser(source, encoding=encoding, errors=errors).parse_suite()


def parse_text(text: str) -> Testsuite:
    """Parse a TAP document held in a string."""
    return parse_suite(io.StringIO(text))
