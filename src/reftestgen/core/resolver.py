"""
reftestgen.core.resolver - Cross-reference resolution.

Links every reference marker to its declaration and context anchors by
identifier. Links are expressed as indexes into the global highlight
sequence produced by the remapper.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple, Type

from reftestgen.core.errors import (
    MarkerIntegrityError,
    MarkerReferenceError,
    Stage,
    StageResult,
)
from reftestgen.core.markers import ContextAnchor, Declaration, Marker, Reference
from reftestgen.core.models import ResolvedReference


class ReferenceResolver:
    """Resolves references against the declarations and context anchors
    of one text.

    The identifier lookups are built once on construction.

    Args:
        markers: All markers of the text; ``markers[i]`` owns highlight ``i``.
    """

    def __init__(self, markers: Sequence[Marker]) -> None:
        self._markers = markers
        self.declarations = self._index(Declaration, "declaration")
        self.contexts = self._index(ContextAnchor, "context")

    def _index(self, marker_type: Type[Marker], label: str) -> Dict[str, int]:
        lookup: Dict[str, int] = {}
        for index, marker in enumerate(self._markers):
            if not isinstance(marker, marker_type):
                continue
            if marker.id in lookup:
                first = self._markers[lookup[marker.id]]
                raise MarkerIntegrityError(
                    f"Duplicate {label} id '{marker.id}': {first} and {marker}",
                    Stage.RESOLVE,
                    identifier=marker.id,
                    marker=str(marker),
                )
            lookup[marker.id] = index
        return lookup

    def resolve_all(self) -> List[ResolvedReference]:
        """Resolve every reference, in text order."""
        return [
            self.resolve(index, marker)
            for index, marker in enumerate(self._markers)
            if isinstance(marker, Reference)
        ]

    def resolve(self, index: int, ref: Reference) -> ResolvedReference:
        """Resolve one reference.

        Args:
            index: Highlight index of the reference.
            ref: The reference marker.

        Returns:
            The ResolvedReference.

        Raises:
            MarkerReferenceError: If the declaration or a context is missing.
        """
        decl_index = self.declarations.get(ref.target_id)
        if decl_index is None:
            raise MarkerReferenceError(
                f"No declaration '{ref.target_id}' for reference {ref}",
                Stage.RESOLVE,
                identifier=ref.target_id,
                marker=str(ref),
            )

        context_indexes: List[int] = []
        for ctx_id in ref.context_ids:
            ctx_index = self.contexts.get(ctx_id)
            if ctx_index is None:
                raise MarkerReferenceError(
                    f"No context '{ctx_id}' for reference {ref}",
                    Stage.RESOLVE,
                    identifier=ctx_id,
                    marker=str(ref),
                )
            context_indexes.append(ctx_index)

        return ResolvedReference(
            reference_index=index,
            declaration_index=decl_index,
            context_indexes=tuple(context_indexes),
            input_text=ref.input_text,
        )


def resolve_references(markers: Sequence[Marker]) -> StageResult[Tuple[ResolvedReference, ...]]:
    """Resolve all references among ``markers``.

    Returns:
        StageResult with the resolved references in text order, or the
        first MarkerIntegrityError/MarkerReferenceError.
    """
    try:
        resolver = ReferenceResolver(markers)
        return StageResult.success(tuple(resolver.resolve_all()))
    except (MarkerIntegrityError, MarkerReferenceError) as e:
        return StageResult.failure(e)
