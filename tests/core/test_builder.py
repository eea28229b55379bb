"""Tests for TestCaseBuilder."""

from reftestgen.core.builder import DEFAULT_ANALYSIS_VARIANTS, TestCaseBuilder
from reftestgen.core.errors import MarkerIntegrityError, Stage
from reftestgen.core.models import (
    AnalysisCheck,
    Highlight,
    ParseCheck,
    ReferenceResolutionCheck,
    ResolvedReference,
    TestKind,
)

TEXT = "class A { foo } foo"
HIGHLIGHTS = (Highlight(10, 13), Highlight(16, 19))
RESOLVED = (ResolvedReference(1, 0, (), "foo"),)


def build(resolved=RESOLVED, highlights=HIGHLIGHTS, is_disabled=False, builder=None):
    builder = builder or TestCaseBuilder()
    return builder.build("Simple", "before", "move", TEXT, highlights, resolved, is_disabled)


class TestTestCaseBuilder:
    """Tests for case construction and naming."""

    def test_case_order_and_names(self):
        suite = build().unwrap()

        assert [case.name for case in suite.cases] == [
            "Simple: parse test",
            "Simple: default analysis",
            "Simple: test analysis",
            "Simple: refret test 1",
        ]
        assert [type(case) for case in suite.cases] == [
            ParseCheck,
            AnalysisCheck,
            AnalysisCheck,
            ReferenceResolutionCheck,
        ]

    def test_suite_fields(self):
        suite = build().unwrap()

        assert suite.name == "Simple"
        assert suite.qualifier == "before"
        assert suite.directory == "move"
        assert suite.qualified_name == "Simple_before"
        assert str(suite) == "move/Simple_before"
        assert not suite.is_disabled

    def test_suite_keeps_text_and_highlights(self):
        suite = build().unwrap()

        assert suite.text == TEXT
        assert suite.highlights == HIGHLIGHTS

    def test_reference_check(self):
        suite = build().unwrap()

        check = suite.cases_of_kind(TestKind.REFRET)[0]
        assert check.text == TEXT
        assert check.highlights == HIGHLIGHTS
        assert check.input_text == "foo"
        assert check.reference == Highlight(16, 19)
        assert check.declaration == Highlight(10, 13)
        assert check.context_indexes == ()

    def test_reference_checks_numbered_from_one(self):
        resolved = (ResolvedReference(1, 0, (), "foo"), ResolvedReference(1, 0, (), "foo"))

        suite = build(resolved=resolved).unwrap()

        names = [case.name for case in suite.cases_of_kind(TestKind.REFRET)]
        assert names == ["Simple: refret test 1", "Simple: refret test 2"]

    def test_no_references(self):
        suite = build(resolved=()).unwrap()

        assert not suite.has_reference_checks
        assert len(suite.cases) == 1 + len(DEFAULT_ANALYSIS_VARIANTS)

    def test_disabled_flag_on_every_case(self):
        suite = build(is_disabled=True).unwrap()

        assert suite.is_disabled
        assert all(case.is_disabled for case in suite.cases)

    def test_custom_analysis_variants(self):
        suite = build(builder=TestCaseBuilder(["default", "strict", "test"])).unwrap()

        variants = [case.variant for case in suite.cases_of_kind(TestKind.ANALYSIS)]
        assert variants == ["default", "strict", "test"]

    def test_empty_variants_fall_back_to_default(self):
        suite = build(builder=TestCaseBuilder([])).unwrap()

        analysis = suite.cases_of_kind(TestKind.ANALYSIS)
        assert [case.name for case in analysis] == ["Simple: default analysis"]

    def test_index_out_of_range_fails(self):
        resolved = (ResolvedReference(5, 0, (), "foo"),)

        result = build(resolved=resolved)

        assert isinstance(result.error, MarkerIntegrityError)
        assert result.stage is Stage.BUILD

    def test_context_index_out_of_range_fails(self):
        resolved = (ResolvedReference(1, 0, (2,), "foo"),)

        result = build(resolved=resolved)

        assert not result.ok
