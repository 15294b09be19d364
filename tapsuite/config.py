"""Command-line configuration file management.

Reads and writes a small JSON file holding defaults for the ``tapsuite``
command: input decoding and the report format.  Command-line flags take
precedence over values loaded here.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "encoding": "utf-8",
    "errors": "strict",
    "report_format": "yaml",
    "show_passed": False,
}


class TapConfig:
    """Manages the tapsuite JSON configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._data: dict[str, Any] = dict(DEFAULT_CONFIG)
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        """Load config from the file."""
        assert self.path is not None
        try:
            text = self.path.read_text()
            data = json.loads(text)
            if isinstance(data, dict):
                self._data = {**DEFAULT_CONFIG, **data}
        except (json.JSONDecodeError, OSError):
            self._data = dict(DEFAULT_CONFIG)

    def save(self) -> None:
        """Write config to the file."""
        if self.path is None:
            raise ValueError("No config file path specified")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(self._data, f, indent=2)
            f.write("\n")

    @property
    def config(self) -> dict[str, Any]:
        """Get the full configuration dict."""
        return dict(self._data)

    @property
    def encoding(self) -> str:
        """Codec used to decode TAP input."""
        return str(self._data.get("encoding") or DEFAULT_CONFIG["encoding"])

    @property
    def errors(self) -> str:
        """Codec error handler used when decoding TAP input."""
        return str(self._data.get("errors") or DEFAULT_CONFIG["errors"])

    @property
    def report_format(self) -> str:
        return str(
            self._data.get("report_format", DEFAULT_CONFIG["report_format"])
        )

    @property
    def show_passed(self) -> bool:
        """Whether the summary lists passing tests as well as failures."""
        val = self._data.get("show_passed")
        if isinstance(val, bool):
            return val
        return bool(DEFAULT_CONFIG["show_passed"])

    def set_config(
        self,
        encoding: str | None = None,
        errors: str | None = None,
        report_format: str | None = None,
        show_passed: bool | None = None,
    ) -> None:
        """Update configuration values."""
        if encoding is not None:
            self._data["encoding"] = encoding
        if errors is not None:
            self._data["errors"] = errors
        if report_format is not None:
            self._data["report_format"] = report_format
        if show_passed is not None:
            self._data["show_passed"] = show_passed
