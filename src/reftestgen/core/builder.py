"""
reftestgen.core.builder - Test suite construction.

Assembles the cleaned text, the highlights and the resolved references into
an immutable TestSuite.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from reftestgen.core.errors import MarkerIntegrityError, Stage, StageResult
from reftestgen.core.models import (
    AnalysisCheck,
    Highlight,
    ParseCheck,
    ReferenceResolutionCheck,
    ResolvedReference,
    TestCase,
    TestSuite,
)

DEFAULT_ANALYSIS_VARIANTS = ("default", "test")

PARSE_LABEL = "parse test"
ANALYSIS_LABEL = "analysis"
REFRET_LABEL = "refret test"


class TestCaseBuilder:
    """
    Builds the test suite for one text.

    Args:
        analysis_variants: Analysis variants to emit an AnalysisCheck for.
    """

    __test__ = False

    def __init__(self, analysis_variants: Sequence[str] = DEFAULT_ANALYSIS_VARIANTS) -> None:
        self.analysis_variants = tuple(analysis_variants) or ("default",)

    def build(
        self,
        name: str,
        qualifier: Optional[str],
        directory: str,
        text: str,
        highlights: Sequence[Highlight],
        resolved: Sequence[ResolvedReference],
        is_disabled: bool,
    ) -> StageResult[TestSuite]:
        """Build a TestSuite.

        Args:
            name: Suite name.
            qualifier: Optional suite qualifier.
            directory: Suite directory.
            text: Cleaned text.
            highlights: Global highlight sequence.
            resolved: Resolved references in text order.
            is_disabled: Whether the whole suite is disabled.

        Returns:
            StageResult with the TestSuite, or a MarkerIntegrityError when a
            resolved reference points outside the highlight sequence.
        """
        highlights = tuple(highlights)
        try:
            for ref in resolved:
                self._check_indexes(ref, len(highlights))
        except MarkerIntegrityError as e:
            return StageResult.failure(e)

        cases: List[TestCase] = [ParseCheck(f"{name}: {PARSE_LABEL}", is_disabled, text)]
        cases.extend(
            AnalysisCheck(f"{name}: {variant} {ANALYSIS_LABEL}", is_disabled, text, variant)
            for variant in self.analysis_variants
        )
        cases.extend(
            ReferenceResolutionCheck(
                name=f"{name}: {REFRET_LABEL} {i}",
                is_disabled=is_disabled,
                text=text,
                highlights=highlights,
                input_text=ref.input_text,
                reference_index=ref.reference_index,
                declaration_index=ref.declaration_index,
                context_indexes=ref.context_indexes,
            )
            for i, ref in enumerate(resolved, start=1)
        )

        return StageResult.success(
            TestSuite(
                name=name,
                qualifier=qualifier,
                directory=directory,
                is_disabled=is_disabled,
                cases=tuple(cases),
                text=text,
                highlights=highlights,
            )
        )

    @staticmethod
    def _check_indexes(ref: ResolvedReference, count: int) -> None:
        for index in (ref.reference_index, ref.declaration_index, *ref.context_indexes):
            if not 0 <= index < count:
                raise MarkerIntegrityError(
                    f"Highlight index {index} out of range for reference '{ref.input_text}'",
                    Stage.BUILD,
                )
