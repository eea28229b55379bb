"""
reftestgen.core.remapper - Marker stripping and offset remapping.

Replaces each marker by its replacement text and computes the highlight of
that replacement text in the cleaned output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from reftestgen.core.errors import MarkerIntegrityError, Stage, StageResult
from reftestgen.core.markers import Annotation, Marker
from reftestgen.core.models import Highlight


@dataclass(frozen=True)
class RemapResult:
    """
    Cleaned text and the highlight of every marker.

    Attributes:
        text: Text with every marker replaced by its replacement text
        highlights: ``highlights[i]`` is the span of ``markers[i]``
    """

    text: str
    highlights: Tuple[Highlight, ...]


class OutputBuffer:
    """Running output of the remap step.

    Attributes:
        chunks: Output pieces in order
        length: Total length of ``chunks`` (the output cursor)
        consumed: Offset in the original text copied up to
    """

    def __init__(self) -> None:
        self.chunks: List[str] = []
        self.length = 0
        self.consumed = 0

    def copy_until(self, original: str, offset: int) -> None:
        """Copy the untouched original text up to ``offset``."""
        piece = original[self.consumed : offset]
        self.chunks.append(piece)
        self.length += len(piece)
        self.consumed = offset

    def emit(self, replacement: str) -> Highlight:
        """Append replacement text and return its span in the output."""
        highlight = Highlight(self.length, self.length + len(replacement))
        self.chunks.append(replacement)
        self.length += len(replacement)
        return highlight

    def skip_to(self, offset: int) -> None:
        """Mark the original text up to ``offset`` as consumed."""
        self.consumed = offset

    def getvalue(self) -> str:
        return "".join(self.chunks)


def check_marker_order(markers: Sequence[Union[Marker, Annotation]]) -> None:
    """Raise MarkerIntegrityError unless markers are ordered and disjoint."""
    for previous, current in zip(markers, markers[1:]):
        if current.range.start < previous.range.end:
            problem = "overlaps" if current.range.overlaps(previous.range) else "precedes"
            raise MarkerIntegrityError(
                f"Marker {current} at {current.range.start} {problem} "
                f"marker {previous} at {previous.range.start}",
                Stage.REMAP,
                marker=str(current),
            )


def splice_marker(buffer: OutputBuffer, original: str, marker: Marker) -> Highlight:
    """Copy the text before ``marker`` and replace the marker itself."""
    buffer.copy_until(original, marker.range.start)
    highlight = buffer.emit(marker.replacement_text)
    buffer.skip_to(marker.range.end)
    return highlight


def remap(
    original: str,
    markers: Sequence[Marker],
    annotations: Sequence[Annotation] = (),
) -> StageResult[RemapResult]:
    """Strip markers from text and compute their highlights.

    Annotations are removed from the text but get no highlight.

    Args:
        original: The original annotated text.
        markers: Markers sorted by start offset, non-overlapping.
        annotations: Annotations sorted by start offset.

    Returns:
        StageResult with the RemapResult, or a MarkerIntegrityError when
        the markers overlap or are out of order.
    """
    spans: List[Union[Marker, Annotation]] = sorted(
        [*markers, *annotations], key=lambda m: m.range.start
    )
    try:
        check_marker_order(markers)
        check_marker_order(annotations)
        check_marker_order(spans)
    except MarkerIntegrityError as e:
        return StageResult.failure(e)

    buffer = OutputBuffer()
    highlights: List[Highlight] = []
    for span in spans:
        if isinstance(span, Annotation):
            buffer.copy_until(original, span.range.start)
            buffer.skip_to(span.range.end)
        else:
            highlights.append(splice_marker(buffer, original, span))
    buffer.copy_until(original, len(original))

    return StageResult.success(RemapResult(buffer.getvalue(), tuple(highlights)))
