"""Value types produced by the TAP parser."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Directive(enum.Enum):
    """Annotation on a test result: TODO (expected to fail) or SKIP."""

    NONE = "None"
    TODO = "TODO"
    SKIP = "SKIP"

    def __str__(self) -> str:
        return self.value


@dataclass
class Testline:
    """A single reported test result.

    ``diagnostic`` and ``block`` are filled in by the parser from the
    lines that follow the result line, until the next result line begins
    or input ends.  ``num`` is ``None`` when the line carries no number.
    """

    __test__ = False  # not a pytest test class

    ok: bool
    num: int | None = None
    description: str = ""
    directive: Directive = Directive.NONE
    explanation: str = ""
    diagnostic: str = ""
    block: bytes = b""

    @property
    def todo(self) -> bool:
        return self.directive is Directive.TODO

    @property
    def skip(self) -> bool:
        return self.directive is Directive.SKIP


@dataclass
class Testsuite:
    """The outcome of parsing a whole TAP stream.

    ``ok`` starts out optimistic and is only conclusive once the stream
    has been read to the end.  ``plan`` is ``None`` until a ``1..N`` line
    has been seen.
    """

    __test__ = False

    ok: bool = True
    tests: list[Testline] = field(default_factory=list)
    plan: int | None = None
    version: int | None = None

    @property
    def has_plan(self) -> bool:
        return self.plan is not None

    @property
    def passed(self) -> list[Testline]:
        """Tests reported ``ok``."""
        return [t for t in self.tests if t.ok]

    @property
    def failed(self) -> list[Testline]:
        """Tests reported ``not ok``."""
        return [t for t in self.tests if not t.ok]

    @property
    def todo(self) -> list[Testline]:
        return [t for t in self.tests if t.todo]

    @property
    def skipped(self) -> list[Testline]:
        return [t for t in self.tests if t.skip]
