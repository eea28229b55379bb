"""Tests for the full Scan -> Remap -> Resolve -> Build pipeline."""

import pytest

from reftestgen.core.errors import (
    MarkerIntegrityError,
    MarkerParseError,
    MarkerReferenceError,
    Stage,
)
from reftestgen.core.models import Highlight, SuiteSource, TestKind
from reftestgen.core.pipeline import build_test_suite, read_source, read_test_suite


class TestReadTestSuite:
    """Tests for read_test_suite()."""

    def test_example_suite(self, example_text, example_clean):
        suite = read_test_suite("Example", None, "basic", example_text).unwrap()

        assert suite.qualified_name == "Example"
        assert [case.name for case in suite.cases] == [
            "Example: parse test",
            "Example: default analysis",
            "Example: test analysis",
            "Example: refret test 1",
        ]
        assert all(case.text == example_clean for case in suite.cases)

        check = suite.cases_of_kind(TestKind.REFRET)[0]
        assert check.declaration == Highlight(10, 13)
        assert check.reference.slice(check.text) == "A.foo"
        assert check.input_text == "foo"

    def test_disabled_suite(self):
        suite = read_test_suite("D", None, "", "[[{disabled}]] [[@1|x]]").unwrap()

        assert suite.is_disabled
        assert suite.cases[0].text == " x"
        assert all(case.is_disabled for case in suite.cases)

    def test_context_indexes_flow_through(self, annotated_unit):
        suite = read_test_suite("A", "before", "move", annotated_unit).unwrap()

        checks = suite.cases_of_kind(TestKind.REFRET)
        assert len(checks) == 3
        last = checks[2]
        assert [last.highlights[i].slice(last.text) for i in last.context_indexes] == ["B"]
        assert last.declaration.slice(last.text) == "x"

    def test_text_without_markers(self):
        suite = read_test_suite("Plain", None, "", "class A {}").unwrap()

        assert not suite.has_reference_checks
        assert suite.cases[0].text == "class A {}"

    def test_analysis_variants(self, example_text):
        suite = read_test_suite("E", None, "", example_text, ["default"]).unwrap()

        assert len(suite.cases_of_kind(TestKind.ANALYSIS)) == 1

    @pytest.mark.parametrize(
        "text, error_type, stage",
        [
            ("[[?1|x]]", MarkerParseError, Stage.SCAN),
            ("[[->1]]", MarkerParseError, Stage.SCAN),
            ("[[->1|foo]]", MarkerReferenceError, Stage.RESOLVE),
            ("[[@1|a]] [[@1|b]]", MarkerIntegrityError, Stage.RESOLVE),
        ],
    )
    def test_first_failing_stage_is_reported(self, text, error_type, stage):
        result = read_test_suite("Bad", None, "", text)

        assert not result.ok
        assert isinstance(result.error, error_type)
        assert result.stage is stage


class TestReadSource:
    """Tests for read_source() and build_test_suite()."""

    def test_read_source(self, example_text):
        source = SuiteSource("Example", "after", "dir", example_text)

        suite = read_source(source).unwrap()

        assert suite.qualified_name == "Example_after"
        assert suite.directory == "dir"

    def test_build_test_suite_raises(self):
        with pytest.raises(MarkerReferenceError):
            build_test_suite("Bad", None, "", "[[->1|foo]]")

    def test_build_test_suite_returns_suite(self, example_text):
        suite = build_test_suite("Example", None, "", example_text)

        assert suite.has_reference_checks
