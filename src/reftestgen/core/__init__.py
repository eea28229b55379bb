"""
reftestgen.core - Marker extraction and cross-reference resolution.

The pipeline turns one annotated text into one TestSuite:
- MarkerScanner: finds and classifies ``[[ ... ]]`` markers
- remap: strips markers and computes highlights in the cleaned text
- ReferenceResolver: links references to declarations and contexts
- TestCaseBuilder: assembles the immutable TestSuite
"""

from reftestgen.core.builder import TestCaseBuilder
from reftestgen.core.errors import (
    MarkerError,
    MarkerIntegrityError,
    MarkerParseError,
    MarkerReferenceError,
    Stage,
    StageResult,
)
from reftestgen.core.markers import Annotation, ContextAnchor, Declaration, Reference, TextRange
from reftestgen.core.models import (
    AnalysisCheck,
    Highlight,
    ParseCheck,
    ReferenceResolutionCheck,
    ResolvedReference,
    SuiteSource,
    TestKind,
    TestSuite,
)
from reftestgen.core.pipeline import build_test_suite, read_source, read_test_suite
from reftestgen.core.remapper import RemapResult, remap
from reftestgen.core.resolver import ReferenceResolver, resolve_references
from reftestgen.core.scanner import MarkerScanner, ScanResult, scan_markers

__all__ = [
    "AnalysisCheck",
    "Annotation",
    "ContextAnchor",
    "Declaration",
    "Highlight",
    "MarkerError",
    "MarkerIntegrityError",
    "MarkerParseError",
    "MarkerReferenceError",
    "MarkerScanner",
    "ParseCheck",
    "Reference",
    "ReferenceResolutionCheck",
    "ReferenceResolver",
    "RemapResult",
    "ResolvedReference",
    "ScanResult",
    "Stage",
    "StageResult",
    "SuiteSource",
    "TestCaseBuilder",
    "TestKind",
    "TestSuite",
    "TextRange",
    "build_test_suite",
    "read_source",
    "read_test_suite",
    "remap",
    "resolve_references",
    "scan_markers",
]
