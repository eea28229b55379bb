"""
reftestgen.core.models - Test suite data model.

Provides immutable dataclasses for highlights, resolved references,
test cases and test suites produced from one annotated source text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class TestKind(Enum):
    """Kind of test a case checks, and the kind of SPT file it lands in."""

    __test__ = False

    PARSING = "parsing"
    ANALYSIS = "analysis"
    REFRET = "refret"

    @classmethod
    def from_name(cls, name: str) -> "TestKind":
        """Look up a kind by its value, case-insensitively."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown test kind '{name}' (expected one of: {valid})") from None


@dataclass(frozen=True)
class Highlight:
    """Half-open ``[start, end)`` span in the cleaned text."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def slice(self, text: str) -> str:
        """Return the highlighted part of ``text``."""
        return text[self.start : self.end]


@dataclass(frozen=True)
class ResolvedReference:
    """
    A reference linked to its declaration and context anchors.

    Attributes:
        reference_index: Index of the reference's highlight
        declaration_index: Index of the target declaration's highlight
        context_indexes: Indexes of the context anchors' highlights, in
            the reference's declared order
        input_text: Literal input text of the reference
    """

    reference_index: int
    declaration_index: int
    context_indexes: Tuple[int, ...]
    input_text: str


@dataclass(frozen=True)
class ParseCheck:
    """Checks that the cleaned text parses."""

    name: str
    is_disabled: bool
    text: str

    kind = TestKind.PARSING


@dataclass(frozen=True)
class AnalysisCheck:
    """Checks that the cleaned text passes one analysis variant."""

    name: str
    is_disabled: bool
    text: str
    variant: str = "default"

    kind = TestKind.ANALYSIS


@dataclass(frozen=True)
class ReferenceResolutionCheck:
    """
    Checks that one reference resolves to its declaration.

    Attributes:
        name: Deterministic case name
        is_disabled: Suite-wide disabled flag
        text: Cleaned text
        highlights: Global highlight sequence of the cleaned text
        input_text: Input text of the reference
        reference_index: Index of the reference in ``highlights``
        declaration_index: Index of the declaration in ``highlights``
        context_indexes: Indexes of the context anchors in ``highlights``
    """

    name: str
    is_disabled: bool
    text: str
    highlights: Tuple[Highlight, ...]
    input_text: str
    reference_index: int
    declaration_index: int
    context_indexes: Tuple[int, ...] = ()

    kind = TestKind.REFRET

    @property
    def reference(self) -> Highlight:
        return self.highlights[self.reference_index]

    @property
    def declaration(self) -> Highlight:
        return self.highlights[self.declaration_index]


TestCase = Union[ParseCheck, AnalysisCheck, ReferenceResolutionCheck]


@dataclass(frozen=True)
class TestSuite:
    """
    All test cases derived from one annotated source text.

    Attributes:
        name: Suite name
        qualifier: Optional qualifier (e.g., "before", "after")
        directory: Directory of the suite relative to the input root
        is_disabled: True when the source carries a disabled annotation
        cases: Test cases, in emission order
        text: Cleaned text shared by every case
        highlights: Global highlight sequence of the cleaned text
    """

    __test__ = False

    name: str
    qualifier: Optional[str]
    directory: str
    is_disabled: bool
    cases: Tuple[TestCase, ...] = field(default_factory=tuple)
    text: str = ""
    highlights: Tuple[Highlight, ...] = ()

    @property
    def qualified_name(self) -> str:
        """Name with the qualifier appended, as used for file names."""
        if self.qualifier:
            return f"{self.name}_{self.qualifier}"
        return self.name

    @property
    def has_reference_checks(self) -> bool:
        """True when the suite tests at least one reference."""
        return any(isinstance(case, ReferenceResolutionCheck) for case in self.cases)

    def cases_of_kind(self, kind: TestKind) -> Tuple[TestCase, ...]:
        return tuple(case for case in self.cases if case.kind is kind)

    def __str__(self) -> str:
        return f"{self.directory}/{self.qualified_name}" if self.directory else self.qualified_name


@dataclass(frozen=True)
class SuiteSource:
    """
    One annotated text to turn into a test suite.

    Attributes:
        name: Suite name
        qualifier: Optional suite qualifier
        directory: Suite directory relative to the input root
        text: Raw annotated text
    """

    name: str
    qualifier: Optional[str]
    directory: str
    text: str
