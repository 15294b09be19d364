"""Report generation for parsed TAP suites.

Turns a :class:`Testsuite` into a plain dict and writes it as YAML or
JSON.  A report can also describe a parse that failed part way: the
tests read before the error are kept and the error message is recorded
next to them.
"""

from __future__ import annotations

import datetime
import json
from pathlib import Path
from typing import Any

import yaml

from tapsuite.parsing.models import Directive, Testline, Testsuite

# Output formats accepted by Reporter.write()
REPORT_FORMATS = ("yaml", "json")


class Reporter:
    """Collects a parsed suite and generates YAML or JSON reports."""

    def __init__(self, suite: Testsuite | None = None) -> None:
        self.suite: Testsuite = suite if suite is not None else Testsuite()
        self.source: str | None = None
        self.error: str | None = None

    def set_source(self, source: str) -> None:
        """Record where the TAP stream came from (file name or ``-``)."""
        self.source = source

    def set_error(self, error: BaseException | str) -> None:
        """Mark the report as describing a failed parse."""
        self.error = str(error)

    def generate_report(self) -> dict[str, Any]:
        """Generate the report data structure.

        Returns:
            Dictionary representing the full report, suitable for YAML
            or JSON serialization.
        """
        now = datetime.datetime.now(tz=datetime.timezone.utc).isoformat()

        report: dict[str, Any] = {"generated_at": now}
        if self.source is not None:
            report["source"] = self.source
        report["summary"] = self._compute_summary()
        report["tests"] = [self._format_test(t) for t in self.suite.tests]
        if self.error is not None:
            report["error"] = self.error

        return {"report": report}

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file.

        Args:
            path: File path to write the YAML report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(
                report,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def write_json(self, path: Path) -> None:
        """Write the report as a JSON file.

        Args:
            path: File path to write the JSON report to.
        """
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(report, f, indent=2)
            f.write("\n")

    def write(self, path: Path, fmt: str = "yaml") -> None:
        """Write the report in *fmt* (one of :data:`REPORT_FORMATS`)."""
        if fmt == "yaml":
            self.write_yaml(path)
        elif fmt == "json":
            self.write_json(path)
        else:
            raise ValueError(
                f"Unknown report format {fmt!r}, expected one of {REPORT_FORMATS}"
            )

    def _compute_summary(self) -> dict[str, Any]:
        suite = self.suite
        return {
            # A failed parse never yields a passing verdict.
            "ok": suite.ok and self.error is None,
            "plan": suite.plan,
            "version": suite.version,
            "total": len(suite.tests),
            "passed": len(suite.passed),
            "failed": len(suite.failed),
            "todo": len(suite.todo),
            "skipped": len(suite.skipped),
        }

    def _format_test(self, test: Testline) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "ok": test.ok,
            "num": test.num,
            "description": test.description,
        }

        # Include optional fields only if set
        if test.directive is not Directive.NONE:
            entry["directive"] = str(test.directive)
            entry["explanation"] = test.explanation
        if test.diagnostic:
            entry["diagnostic"] = test.diagnostic
        if test.block:
            entry["block"] = test.block.decode("utf-8", errors="replace")

        return entry
