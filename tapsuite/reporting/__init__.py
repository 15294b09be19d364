"""Suite reporting: YAML and JSON report generation."""

from tapsuite.reporting.reporter import REPORT_FORMATS, Reporter

__all__ = [
    "REPORT_FORMATS",
    "Reporter",
]
