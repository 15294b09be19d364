"""Tests for the TAP data model."""

from __future__ import annotations

from tapsuite.parsing.models import Directive, Testline, Testsuite


class TestDirective:

    def test_str(self):
        assert str(Directive.NONE) == "None"
        assert str(Directive.TODO) == "TODO"
        assert str(Directive.SKIP) == "SKIP"


class TestTestline:
    """Tests for Testline defaults and helpers."""

    def test_defaults(self):
        t = Testline(ok=True)
        assert t.num is None
        assert t.description == ""
        assert t.directive is Directive.NONE
        assert t.explanation == ""
        assert t.diagnostic == ""
        assert t.block == b""
        assert t.todo is False
        assert t.skip is False

    def test_directive_helpers(self):
        assert Testline(ok=False, directive=Directive.TODO).todo is True
        assert Testline(ok=True, directive=Directive.SKIP).skip is True


class TestTestsuite:
    """Tests for Testsuite defaults and grouping properties."""

    def test_new_suite(self):
        suite = Testsuite()
        assert suite.ok is True
        assert suite.tests == []
        assert suite.plan is None
        assert suite.version is None
        assert suite.has_plan is False

    def test_instances_do_not_share_tests(self):
        a, b = Testsuite(), Testsuite()
        a.tests.append(Testline(ok=True))
        assert b.tests == []

    def test_grouping(self):
        suite = Testsuite(plan=4, tests=[
            Testline(ok=True, num=1),
            Testline(ok=False, num=2),
            Testline(ok=False, num=3, directive=Directive.TODO),
            Testline(ok=True, num=4, directive=Directive.SKIP),
        ])
        assert [t.num for t in suite.passed] == [1, 4]
        assert [t.num for t in suite.failed] == [2, 3]
        assert [t.num for t in suite.todo] == [3]
        assert [t.num for t in suite.skipped] == [4]
        assert suite.has_plan is True
