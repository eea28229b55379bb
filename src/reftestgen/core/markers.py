"""Marker types found in annotated source text.

A marker is one ``[[ ... ]]`` span. The variants are a closed set:

- Declaration: ``[[@id|name]]``
- Reference: ``[[->id|&ctx|...|input|expected]]``
- ContextAnchor: ``[[&id|name]]``
- Annotation: ``[[{key}]]``

Declarations, references and context anchors are replaced by text in the
cleaned output and each gets a highlight. Annotations are removed entirely
and only set suite-level flags.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextRange:
    """Half-open ``[start, end)`` offset pair into the original text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid text range: [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def overlaps(self, other: TextRange) -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Declaration:
    """A declaration marker ``[[@id|name]]``."""

    id: str
    name: str
    range: TextRange

    @property
    def replacement_text(self) -> str:
        return self.name

    def __str__(self) -> str:
        return f"[[@{self.id}|{self.name}]]"


@dataclass(frozen=True)
class Reference:
    """A reference marker ``[[->id(|&ctx)*|input(|expected)?]]``.

    Attributes:
        target_id: Identifier of the declaration the reference resolves to.
        context_ids: Identifiers of the context anchors, in declared order.
        input_text: Text of the reference before the refactoring.
        expected_text: Expected (possibly qualified) text afterwards.
        range: Span of the whole marker in the original text.
    """

    target_id: str
    context_ids: tuple[str, ...]
    input_text: str
    expected_text: str
    range: TextRange

    @property
    def replacement_text(self) -> str:
        return self.expected_text

    def __str__(self) -> str:
        parts = [f"->{self.target_id}"]
        parts.extend(f"&{ctx}" for ctx in self.context_ids)
        parts.append(self.input_text)
        if self.expected_text != self.input_text:
            parts.append(self.expected_text)
        return "[[" + "|".join(parts) + "]]"


@dataclass(frozen=True)
class ContextAnchor:
    """A context anchor marker ``[[&id|name]]``."""

    id: str
    name: str
    range: TextRange

    @property
    def replacement_text(self) -> str:
        return self.name

    def __str__(self) -> str:
        return f"[[&{self.id}|{self.name}]]"


@dataclass(frozen=True)
class Annotation:
    """An annotation marker ``[[{key}]]``."""

    key: str
    range: TextRange

    def __str__(self) -> str:
        return f"[[{{{self.key}}}]]"


# Markers that are replaced by text and receive a highlight
Marker = Union[Declaration, Reference, ContextAnchor]

DISABLED_ANNOTATION = "disabled"
