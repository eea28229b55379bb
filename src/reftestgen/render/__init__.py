"""Rendering of test suites into target test-file formats."""

from reftestgen.render.spt import SptRenderer, WriteOutcome, WriteResult, mark_highlights

__all__ = ["SptRenderer", "WriteOutcome", "WriteResult", "mark_highlights"]
