"""SPT renderer for test suites.

Renders a TestSuite into a Spoofax Testing Language (SPT) module, one
module per test kind. Uses the Jinja2 template in ``templates/``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

from reftestgen.core.models import (
    AnalysisCheck,
    Highlight,
    ParseCheck,
    ReferenceResolutionCheck,
    TestKind,
)

if TYPE_CHECKING:
    from reftestgen.core.models import TestCase, TestSuite

OPEN_SELECTION = "[["
CLOSE_SELECTION = "]]"

_MODULE_SEGMENT_PATTERN = re.compile(r"[^\w]")


def mark_highlights(text: str, highlights: Sequence[Highlight]) -> str:
    """Wrap every highlight of ``text`` in SPT selection brackets.

    Args:
        text: Cleaned text.
        highlights: Ordered, non-overlapping highlights.

    Returns:
        Text with ``[[`` and ``]]`` around each highlight.
    """
    parts = []
    position = 0
    for highlight in highlights:
        parts.append(text[position : highlight.start])
        parts.append(OPEN_SELECTION + highlight.slice(text) + CLOSE_SELECTION)
        position = highlight.end
    parts.append(text[position:])
    return "".join(parts)


def comment_out(text: str) -> str:
    """Prefix every line of ``text`` with an SPT line comment."""
    return "\n".join(f"// {line}" if line else "//" for line in text.split("\n"))


def module_segment(name: str) -> str:
    return _MODULE_SEGMENT_PATTERN.sub("_", name)


class WriteOutcome(Enum):
    """What happened when writing one SPT file."""

    WRITTEN = "written"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class WriteResult:
    path: Path
    outcome: WriteOutcome


class SptRenderer:
    """Renders test suites into SPT modules.

    Args:
        module_prefix: First segment of every module name.
        language: SPT language under test.
        start_symbol: Optional SPT start symbol.
    """

    def __init__(
        self,
        module_prefix: str = "refret",
        language: str = "Java",
        start_symbol: Optional[str] = None,
    ) -> None:
        self.module_prefix = module_prefix
        self.language = language
        self.start_symbol = start_symbol
        self._template = None

    def _get_template(self):
        if self._template is None:
            from jinja2 import Environment, PackageLoader, StrictUndefined

            env = Environment(
                loader=PackageLoader("reftestgen.render", "templates"),
                autoescape=False,
                keep_trailing_newline=True,
                undefined=StrictUndefined,
            )
            self._template = env.get_template("suite.spt.j2")
        return self._template

    def module_name(self, suite: TestSuite, kind: TestKind) -> str:
        """Return the SPT module name of a suite for one kind."""
        segments = [self.module_prefix, kind.value]
        segments.extend(s for s in suite.directory.split("/") if s)
        segments.append(suite.qualified_name)
        return "/".join(module_segment(s) for s in segments)

    def relative_path(self, suite: TestSuite, kind: TestKind) -> Path:
        """Return the file path of a suite for one kind, relative to the output."""
        path = Path(kind.value)
        for segment in suite.directory.split("/"):
            if segment:
                path = path / segment
        return path / f"{suite.qualified_name}.spt"

    def render(self, suite: TestSuite, kind: TestKind) -> str:
        """Render the cases of one kind of a suite into SPT text."""
        return self._get_template().render(
            module=self.module_name(suite, kind),
            language=self.language,
            start_symbol=self.start_symbol,
            disabled=suite.is_disabled,
            tests=[
                self._render_case(case, suite.is_disabled) for case in suite.cases_of_kind(kind)
            ],
        )

    def _render_case(self, case: TestCase, disabled: bool) -> str:
        if isinstance(case, ReferenceResolutionCheck):
            fragment = mark_highlights(case.text, case.highlights)
            expectations = [f"resolve #{case.reference_index + 1} to #{case.declaration_index + 1}"]
            if case.context_indexes:
                contexts = ", ".join(f"#{i + 1}" for i in case.context_indexes)
                expectations.append(f"// contexts: {contexts}")
        elif isinstance(case, AnalysisCheck):
            fragment = case.text
            if case.variant == "default":
                expectations = ["analysis succeeds"]
            else:
                expectations = [f"run {case.variant}-analyze"]
        elif isinstance(case, ParseCheck):
            fragment = case.text
            expectations = ["parse succeeds"]
        else:
            raise TypeError(f"Unknown test case type: {type(case).__name__}")

        block = "\n".join([f"test {case.name} [[", fragment, "]]", *expectations])
        return comment_out(block) if disabled else block

    def write_suite(
        self,
        suite: TestSuite,
        output: Path,
        kind: TestKind,
        force: bool = False,
    ) -> WriteResult:
        """Render a suite for one kind and write it below ``output``.

        An existing file is left alone unless ``force`` is set.

        Returns:
            WriteResult with the path and what was done.
        """
        path = output / self.relative_path(suite, kind)
        existed = path.exists()
        if existed and not force:
            return WriteResult(path, WriteOutcome.SKIPPED)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(suite, kind), encoding="utf-8")
        return WriteResult(path, WriteOutcome.OVERWRITTEN if existed else WriteOutcome.WRITTEN)
