"""Entry point for the tapsuite command.

Reads a TAP stream from a file or stdin, prints failing tests and a
one-line verdict, and optionally writes a YAML or JSON report.  The exit
code is 0 when the suite passed, 1 when it failed, and 2 when the input
could not be read or parsed.
"""

from __future__ import annotations

import argparse
import codecs
import logging
import sys
from pathlib import Path
from typing import BinaryIO

from tapsuite.config import TapConfig
from tapsuite.parsing.errors import TapError
from tapsuite.parsing.models import Testline, Testsuite
from tapsuite.parsing.parser import Parser
from tapsuite.reporting.reporter import REPORT_FORMATS, Reporter

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Parse Test Anything Protocol output and report the verdict"
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="TAP file to parse, or '-' for stdin (default: -)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Path to write the report file",
    )
    parser.add_argument(
        "--format",
        choices=list(REPORT_FORMATS),
        default=None,
        help="Report format (default: from config, else yaml)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to a tapsuite JSON config file",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="Encoding of the TAP input (default: from config, else utf-8)",
    )
    parser.add_argument(
        "--show-passed",
        action="store_true",
        default=False,
        help="List passing tests as well as failures",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        default=False,
        help="Write the effective settings back to --config-file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _format_test(test: Testline) -> str:
    status = "ok" if test.ok else "not ok"
    parts = [status]
    if test.num is not None:
        parts.append(str(test.num))
    if test.description:
        parts.append(test.description)
    line = " ".join(parts)
    if test.todo or test.skip:
        line += f" # {test.directive}"
        if test.explanation:
            line += f" {test.explanation}"
    return line


def _print_results(suite: Testsuite, show_passed: bool) -> None:
    for test in suite.tests:
        if test.ok and not show_passed:
            continue
        print(_format_test(test))
        for diag in test.diagnostic.splitlines():
            print(f"    # {diag}")

    plan = f"1..{suite.plan}" if suite.plan is not None else "no plan"
    verdict = "PASS" if suite.ok else "FAIL"
    print(
        f"Result: {verdict} ({len(suite.tests)} tests, "
        f"{len(suite.failed)} failed, {len(suite.todo)} todo, "
        f"{len(suite.skipped)} skipped, {plan})"
    )


def _parse_stream(
    stream: BinaryIO, config: TapConfig, reporter: Reporter,
) -> Testsuite | None:
    """Parse *stream* into ``reporter.suite``.

    Returns the final suite, or ``None`` if parsing failed.  On failure
    the reporter keeps the partial suite and the error message.
    """
    try:
        parser = Parser(stream, encoding=config.encoding, errors=config.errors)
    except TapError as e:
        print(f"Error: {e}", file=sys.stderr)
        reporter.set_error(e)
        return None

    reporter.suite = parser.suite
    try:
        return parser.parse_suite()
    except TapError as e:
        print(f"Error: {e}", file=sys.stderr)
        reporter.set_error(e)
        return None


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    config = TapConfig(args.config_file)
    config.set_config(
        encoding=args.encoding,
        report_format=args.format,
        show_passed=True if args.show_passed else None,
    )
    if config.report_format not in REPORT_FORMATS:
        print(
            f"Error: Unknown report format in config: {config.report_format}",
            file=sys.stderr,
        )
        return EXIT_ERROR

    try:
        codecs.lookup(config.encoding)
        codecs.lookup_error(config.errors)
    except LookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    logger.debug("Effective config: %s", config.config)

    if args.save_config:
        try:
            config.save()
        except (ValueError, OSError) as e:
            print(f"Error: Cannot save config: {e}", file=sys.stderr)
            return EXIT_ERROR

    reporter = Reporter()
    reporter.set_source(args.input)

    if args.input == "-":
        suite = _parse_stream(sys.stdin.buffer, config, reporter)
    else:
        try:
            with open(args.input, "rb") as f:
                suite = _parse_stream(f, config, reporter)
        except OSError as e:
            print(f"Error: Cannot read {args.input}: {e}", file=sys.stderr)
            return EXIT_ERROR

    if suite is not None:
        _print_results(suite, config.show_passed)

    if args.output is not None:
        try:
            reporter.write(args.output, config.report_format)
        except OSError as e:
            print(f"Error: Cannot write report: {e}", file=sys.stderr)
            return EXIT_ERROR
        print(f"Report written to {args.output}")

    if suite is None:
        return EXIT_ERROR
    return EXIT_OK if suite.ok else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
