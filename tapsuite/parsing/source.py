"""Sequential line source over streams and iterables of lines."""

from __future__ import annotations

from typing import Iterable, Union

from tapsuite.parsing.errors import TapIOError

RawLine = Union[str, bytes]


class LineSource:
    """Pull raw lines one at a time from a TAP producer.

    Accepts anything that iterates over lines: a text or binary file
    object, ``sys.stdin``, a list of strings, a generator of ``bytes``.
    Failures of the underlying source (``OSError``, undecodable bytes)
    surface as :class:`TapIOError`.
    """

    def __init__(
        self,
        source: Iterable[RawLine],
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> None:
        if isinstance(source, (str, bytes)):
            raise TypeError(
                "LineSource expects a stream or an iterable of lines; "
                "use parse_text() for a whole document"
            )
        self._lines = iter(source)
        self.encoding = encoding
        self.errors = errors
        self.line_number = 0
        self._done = False

    @property
    def exhausted(self) -> bool:
        return self._done

    def read_raw(self) -> RawLine | None:
        """Return the next raw line, or ``None`` at end of input."""
        if self._done:
            return None
        try:
            raw = next(self._lines)
        except StopIteration:
            self._done = True
            return None
        except (OSError, UnicodeDecodeError) as e:
            self._done = True
            raise TapIOError(
                f"Failed to read line {self.line_number + 1}: {e}"
            ) from e
        self.line_number += 1
        return raw

    def read(self) -> str | None:
        """Return the next line stripped of surrounding whitespace."""
        raw = self.read_raw()
        if raw is None:
            return None
        return self.decode(raw).strip()

    def decode(self, raw: RawLine, errors: str | None = None) -> str:
        if isinstance(raw, str):
            return raw
        try:
            return raw.decode(self.encoding, errors or self.errors)
        except (UnicodeDecodeError, LookupError) as e:
            raise TapIOError(
                f"Could not decode line {self.line_number} as {self.encoding}: {e}"
            ) from e

    def encode(self, raw: RawLine) -> bytes:
        """Return *raw* as newline-terminated bytes."""
        if isinstance(raw, bytes):
            data = raw
        else:
            try:
                data = raw.encode(self.encoding, self.errors)
            except (UnicodeEncodeError, LookupError) as e:
                raise TapIOError(
                    f"Could not encode line {self.line_number} as {self.encoding}: {e}"
                ) from e
        if not data.endswith(b"\n"):
            data += b"\n"
        return data
