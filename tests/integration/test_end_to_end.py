"""End-to-end integration tests exercising the full pipeline.

Tests the complete flow from a TAP-producing process -> parser ->
suite verdict -> reporter, and the ``tapsuite`` command run as a
subprocess.
"""

from __future__ import annotations

import json
import stat
import subprocess
import sys
import tempfile
from pathlib import Path

import yaml

from tapsuite import END_OF_INPUT, Directive, Parser, parse_suite
from tapsuite.reporting.reporter import Reporter

REPO_ROOT = Path(__file__).resolve().parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_script(tmpdir: Path, name: str, content: str) -> str:
    """Create an executable script and return its path."""
    script_path = tmpdir / name
    script_path.write_text(content)
    script_path.chmod(script_path.stat().st_mode | stat.S_IEXEC)
    return str(script_path)


def _tap_script(tmpdir: Path, name: str = "producer.sh") -> str:
    return _make_script(tmpdir, name, (
        "#!/bin/bash\n"
        "echo 'TAP version 13'\n"
        "echo 'ok 1 - database connects'\n"
        "echo 'not ok 2 - order total'\n"
        "echo '  ---'\n"
        "echo '  message: totals differ'\n"
        "echo '  got: 41'\n"
        "echo '  expected: 42'\n"
        "echo '  ...'\n"
        "echo 'ok 3 - refunds # SKIP payment sandbox offline'\n"
        "echo 'not ok 4 - coupons # TODO not implemented'\n"
        "echo '# 2 of 4 tests failed'\n"
        "echo '1..4'\n"
        "exit 1\n"
    ))


def _run_producer(script: str) -> subprocess.Popen:
    return subprocess.Popen([script], stdout=subprocess.PIPE)


# ---------------------------------------------------------------------------
# Parsing a live process
# ---------------------------------------------------------------------------


class TestProcessOutput:
    """Parse TAP straight from a child process's stdout pipe."""

    def test_full_suite_from_pipe(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            proc = _run_producer(_tap_script(Path(tmpdir)))
            assert proc.stdout is not None
            with proc.stdout:
                suite = parse_suite(proc.stdout)
            proc.wait()

        assert suite.version == 13
        assert suite.plan == 4
        assert len(suite.tests) == 4
        assert suite.ok is False

        order = suite.tests[1]
        assert order.ok is False
        assert b"message: totals differ" in order.block
        assert order.block.count(b"\n") == 3

        refunds = suite.tests[2]
        assert refunds.directive is Directive.SKIP
        assert refunds.explanation == "payment sandbox offline"

        coupons = suite.tests[3]
        assert coupons.directive is Directive.TODO
        assert coupons.diagnostic == "2 of 4 tests failed\n"

    def test_incremental_consumption(self):
        """Tests can be consumed one at a time as the producer writes."""
        with tempfile.TemporaryDirectory() as tmpdir:
            proc = _run_producer(_tap_script(Path(tmpdir)))
            assert proc.stdout is not None
            with proc.stdout:
                parser = Parser(proc.stdout)
                seen = []
                while True:
                    test = parser.next()
                    if test is END_OF_INPUT:
                        break
                    seen.append(test.num)
            proc.wait()

        assert seen == [1, 2, 3, 4]
        assert parser.suite.plan == 4

    def test_report_from_process(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            proc = _run_producer(_tap_script(tmp))
            assert proc.stdout is not None
            with proc.stdout:
                suite = parse_suite(proc.stdout)
            proc.wait()

            reporter = Reporter(suite)
            reporter.set_source("producer.sh")
            path = tmp / "reports" / "suite.yaml"
            reporter.write_yaml(path)

            report = yaml.safe_load(path.read_text())["report"]
            assert report["source"] == "producer.sh"
            assert report["summary"]["failed"] == 2
            assert report["summary"]["skipped"] == 1
            assert report["summary"]["todo"] == 1
            assert "got: 41" in report["tests"][1]["block"]


# ---------------------------------------------------------------------------
# Command-line tool
# ---------------------------------------------------------------------------


class TestCommandLine:
    """Run ``python -m tapsuite.main`` as a real subprocess."""

    def _run_cli(self, args: list[str], stdin: bytes = b"") -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, "-m", "tapsuite.main", *args],
            input=stdin,
            capture_output=True,
            cwd=REPO_ROOT,
            timeout=60,
        )

    def test_pass_from_stdin(self):
        result = self._run_cli([], stdin=b"1..2\nok 1\nok 2\n")
        assert result.returncode == 0
        assert b"Result: PASS" in result.stdout

    def test_fail_from_stdin(self):
        result = self._run_cli([], stdin=b"1..2\nok 1\nnot ok 2 - broken\n")
        assert result.returncode == 1
        assert b"not ok 2 broken" in result.stdout

    def test_error_from_stdin(self):
        result = self._run_cli([], stdin=b"1..1\nok 1\n1..1\n")
        assert result.returncode == 2
        assert b"Duplicate plan" in result.stderr

    def test_json_report_from_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            tap_file = tmp / "results.tap"
            tap_file.write_text("1..1\nok 1 - only # SKIP not today\n")
            report_path = tmp / "report.json"
            result = self._run_cli([
                str(tap_file), "--format", "json", "--output", str(report_path),
            ])
            assert result.returncode == 0
            report = json.loads(report_path.read_text())["report"]
            assert report["tests"][0]["directive"] == "SKIP"
            assert report["summary"]["ok"] is True
