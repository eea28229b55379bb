"""
reftestgen.core.scanner - Marker scanner.

Finds every ``[[ ... ]]`` marker in annotated text and classifies it as a
declaration, reference, context anchor or annotation. Offsets are those of
the original text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

from reftestgen.core.errors import MarkerParseError, Stage, StageResult
from reftestgen.core.markers import (
    Annotation,
    ContextAnchor,
    Declaration,
    Marker,
    Reference,
    TextRange,
)

# A marker never spans lines and never contains "]]"
MARKER_PATTERN = re.compile(r"\[\[(.*?)\]\]")

DECLARATION_PREFIX = "@"
REFERENCE_PREFIX = "->"
CONTEXT_PREFIX = "&"
ANNOTATION_PREFIX = "{"
LEGACY_CONTEXT_PREFIX = "&->"


@dataclass(frozen=True)
class ScanResult:
    """
    Markers found in one text.

    Attributes:
        markers: Declarations, references and context anchors in ascending
            order of their start offset
        annotations: Annotations in text order
    """

    markers: Tuple[Marker, ...] = ()
    annotations: Tuple[Annotation, ...] = ()

    @property
    def annotation_keys(self) -> FrozenSet[str]:
        return frozenset(a.key for a in self.annotations)

    @property
    def declarations(self) -> List[Declaration]:
        return [m for m in self.markers if isinstance(m, Declaration)]

    @property
    def references(self) -> List[Reference]:
        return [m for m in self.markers if isinstance(m, Reference)]

    @property
    def contexts(self) -> List[ContextAnchor]:
        return [m for m in self.markers if isinstance(m, ContextAnchor)]


class MarkerScanner:
    """Scans annotated text for markers.

    The scanner holds no state between calls; ``scan`` is a pure function
    of the text.
    """

    def scan(self, text: str) -> StageResult[ScanResult]:
        """Scan text for markers.

        Args:
            text: Raw annotated text.

        Returns:
            StageResult with the ScanResult, or the first MarkerParseError.
        """
        try:
            return StageResult.success(self._scan(text))
        except MarkerParseError as e:
            return StageResult.failure(e)

    def _scan(self, text: str) -> ScanResult:
        markers: list[Marker] = []
        annotations: list[Annotation] = []

        for match in MARKER_PATTERN.finditer(text):
            text_range = TextRange(match.start(), match.end())
            content = match.group(1)

            if content.startswith(ANNOTATION_PREFIX):
                annotations.append(self._parse_annotation(content, text_range, match.group(0)))
            else:
                markers.append(self._parse_marker(content, text_range, match.group(0)))

        return ScanResult(markers=tuple(markers), annotations=tuple(annotations))

    def _parse_marker(self, content: str, text_range: TextRange, source: str) -> Marker:
        operator, *values = content.split("|")

        if operator.startswith(REFERENCE_PREFIX):
            target_id = self._parse_id(operator, REFERENCE_PREFIX, source)
            return self._parse_reference(target_id, values, text_range, source)
        if operator.startswith(DECLARATION_PREFIX):
            decl_id = self._parse_id(operator, DECLARATION_PREFIX, source)
            name = self._first_value(values, f"No name for declaration {source}", decl_id, source)
            return Declaration(decl_id, name, text_range)
        if operator.startswith(CONTEXT_PREFIX):
            ctx_id = self._parse_id(operator, CONTEXT_PREFIX, source)
            name = self._first_value(values, f"No name for context {source}", ctx_id, source)
            return ContextAnchor(ctx_id, name, text_range)

        raise MarkerParseError(
            f"Unknown operator: {operator!r} in {source}",
            Stage.SCAN,
            marker=source,
        )

    def _parse_reference(
        self,
        target_id: str,
        values: list[str],
        text_range: TextRange,
        source: str,
    ) -> Reference:
        context_ids: list[str] = []
        texts: list[str] = []
        for value in values:
            if value.startswith(LEGACY_CONTEXT_PREFIX):
                raise MarkerParseError(
                    f"Single-context syntax '&->' is not supported, use '&id': {source}",
                    Stage.SCAN,
                    identifier=target_id,
                    marker=source,
                )
            if value.startswith(CONTEXT_PREFIX):
                context_ids.append(self._parse_id(value, CONTEXT_PREFIX, source))
            else:
                texts.append(value)

        if not texts or not texts[0]:
            raise MarkerParseError(
                f"No initial name for reference {source}",
                Stage.SCAN,
                identifier=target_id,
                marker=source,
            )
        if len(texts) > 2:
            raise MarkerParseError(
                f"Too many fields in reference {source}",
                Stage.SCAN,
                identifier=target_id,
                marker=source,
            )

        input_text = texts[0]
        expected_text = texts[1] if len(texts) > 1 and texts[1] else input_text
        return Reference(target_id, tuple(context_ids), input_text, expected_text, text_range)

    def _parse_annotation(self, content: str, text_range: TextRange, source: str) -> Annotation:
        if not content.endswith("}") or not content[1:-1].strip():
            raise MarkerParseError(
                f"Malformed annotation {source}",
                Stage.SCAN,
                marker=source,
            )
        return Annotation(content[1:-1].strip(), text_range)

    @staticmethod
    def _parse_id(field_text: str, prefix: str, source: str) -> str:
        identifier = field_text[len(prefix) :].strip()
        if not identifier:
            raise MarkerParseError(
                f"Missing identifier in {source}",
                Stage.SCAN,
                marker=source,
            )
        return identifier

    @staticmethod
    def _first_value(values: list[str], message: str, identifier: str, source: str) -> str:
        if not values or not values[0]:
            raise MarkerParseError(message, Stage.SCAN, identifier=identifier, marker=source)
        return values[0]


def scan_markers(text: str) -> StageResult[ScanResult]:
    """Scan text for markers with a fresh MarkerScanner."""
    return MarkerScanner().scan(text)
