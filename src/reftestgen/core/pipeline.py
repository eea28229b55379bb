"""
reftestgen.core.pipeline - Annotated text to test suite.

Runs Scan -> Remap -> Resolve -> Build once over a single text. The first
failing stage aborts the run; no partial suite is produced.
"""

from __future__ import annotations

from typing import Optional, Sequence

from reftestgen.core.builder import DEFAULT_ANALYSIS_VARIANTS, TestCaseBuilder
from reftestgen.core.errors import StageResult
from reftestgen.core.markers import DISABLED_ANNOTATION
from reftestgen.core.models import SuiteSource, TestSuite
from reftestgen.core.remapper import remap
from reftestgen.core.resolver import resolve_references
from reftestgen.core.scanner import scan_markers


def read_test_suite(
    name: str,
    qualifier: Optional[str],
    directory: str,
    text: str,
    analysis_variants: Sequence[str] = DEFAULT_ANALYSIS_VARIANTS,
) -> StageResult[TestSuite]:
    """Read a test suite from annotated text.

    Args:
        name: Suite name.
        qualifier: Suite qualifier, or None.
        directory: Suite directory relative to the input root.
        text: Text with markers.
        analysis_variants: Analysis variants to emit checks for.

    Returns:
        StageResult with the TestSuite, or the error of the first stage
        that failed.
    """
    scanned = scan_markers(text)
    if not scanned.ok:
        return scanned.forward()
    scan = scanned.unwrap()

    remapped = remap(text, scan.markers, scan.annotations)
    if not remapped.ok:
        return remapped.forward()
    clean = remapped.unwrap()

    resolved = resolve_references(scan.markers)
    if not resolved.ok:
        return resolved.forward()

    is_disabled = DISABLED_ANNOTATION in scan.annotation_keys
    return TestCaseBuilder(analysis_variants).build(
        name,
        qualifier,
        directory,
        clean.text,
        clean.highlights,
        resolved.unwrap(),
        is_disabled,
    )


def read_source(
    source: SuiteSource,
    analysis_variants: Sequence[str] = DEFAULT_ANALYSIS_VARIANTS,
) -> StageResult[TestSuite]:
    """Read a test suite from a SuiteSource."""
    return read_test_suite(
        source.name,
        source.qualifier,
        source.directory,
        source.text,
        analysis_variants,
    )


def build_test_suite(
    name: str,
    qualifier: Optional[str],
    directory: str,
    text: str,
    analysis_variants: Sequence[str] = DEFAULT_ANALYSIS_VARIANTS,
) -> TestSuite:
    """Like read_test_suite, but raises the MarkerError on failure."""
    return read_test_suite(name, qualifier, directory, text, analysis_variants).unwrap()
