"""
reftestgen - Reference retention test generator

Derives SPT test suites from Java sources annotated with inline
``[[ ... ]]`` markers for declarations, references and context anchors.
Markers are stripped, their positions remapped into the cleaned text, and
every reference is resolved to its declaration to produce parse, analysis
and reference resolution tests.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("reftestgen")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from reftestgen.core import (
    MarkerError,
    MarkerIntegrityError,
    MarkerParseError,
    MarkerReferenceError,
    StageResult,
    SuiteSource,
    TestKind,
    TestSuite,
    build_test_suite,
    read_test_suite,
)

__all__ = [
    "__version__",
    "MarkerError",
    "MarkerIntegrityError",
    "MarkerParseError",
    "MarkerReferenceError",
    "StageResult",
    "SuiteSource",
    "TestKind",
    "TestSuite",
    "build_test_suite",
    "read_test_suite",
]
