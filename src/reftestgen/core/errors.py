"""Error taxonomy and stage results for the marker pipeline.

Every failure of the pipeline is fatal to the text being processed. Each
stage returns a StageResult carrying either its value or the first
MarkerError it hit, so a driver can see which stage and which identifier
failed without catching exceptions across stage boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Stage(Enum):
    """Pipeline stage that produced a result or an error."""

    SCAN = "scan"
    REMAP = "remap"
    RESOLVE = "resolve"
    BUILD = "build"


class MarkerError(Exception):
    """Base class for all fatal marker pipeline errors.

    Attributes:
        message: Human-readable description of the failure.
        stage: Pipeline stage that failed.
        identifier: Offending declaration/context identifier, if any.
        marker: Source form of the offending marker, if any.
    """

    kind = "error"

    def __init__(
        self,
        message: str,
        stage: Stage,
        identifier: str | None = None,
        marker: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.identifier = identifier
        self.marker = marker

    def to_dict(self) -> dict[str, str | None]:
        return {
            "kind": self.kind,
            "stage": self.stage.value,
            "message": self.message,
            "identifier": self.identifier,
            "marker": self.marker,
        }

    def __str__(self) -> str:
        return f"{self.kind} ({self.stage.value}): {self.message}"


class MarkerParseError(MarkerError):
    """Unknown marker operator or a required marker field is missing."""

    kind = "parse error"


class MarkerIntegrityError(MarkerError):
    """Overlapping or out-of-order markers, or duplicate identifiers."""

    kind = "integrity error"


class MarkerReferenceError(MarkerError):
    """A reference names a declaration or context that does not exist."""

    kind = "reference error"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one pipeline stage: a value or the error that stopped it.

    Exactly one of ``value`` and ``error`` is set.
    """

    value: T | None = None
    error: MarkerError | None = None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: MarkerError) -> StageResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stage(self) -> Stage | None:
        """Stage that failed, or None on success."""
        return self.error.stage if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def forward(self) -> StageResult[U]:
        """Re-type a failed result so it can be returned by a later stage."""
        if self.error is None:
            raise ValueError("Cannot forward a successful stage result")
        return StageResult(error=self.error)
