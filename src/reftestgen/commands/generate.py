"""
reftestgen.commands.generate - Generate SPT test files.

Finds annotated test projects in the input directories, turns every
compilation unit into a test suite and writes one SPT file per suite and
test kind.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set

from reftestgen.config import GeneratorConfig
from reftestgen.core.models import SuiteSource, TestKind, TestSuite
from reftestgen.core.pipeline import read_source
from reftestgen.discovery import find_test_projects
from reftestgen.render import SptRenderer, WriteOutcome


@dataclass
class GenerateSummary:
    """Counts reported at the end of a generate run."""

    suites: List[TestSuite] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    written: int = 0
    skipped_existing: int = 0

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)


def run(args: argparse.Namespace) -> int:
    """
    Run the generate command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 if any source failed or nothing to do)
    """
    from reftestgen.commands import load_configuration

    config = load_configuration(args)
    if config is None:
        return 1

    settings = apply_arguments(GeneratorConfig.from_dict(config), args)
    if settings.output is None:
        print("Error: no output directory (use -o/--out or generate.output)", file=sys.stderr)
        return 1
    output = Path(settings.output)

    sources = collect_sources(args.inputs, settings, args.quiet)
    summary = GenerateSummary()

    for source in sources:
        result = read_source(source, settings.analysis_variants)
        if not result.ok:
            label = f"{source.directory}/{source.name}" if source.directory else source.name
            print(f"Error: {label}: {result.error}", file=sys.stderr)
            summary.failed.append(label)
            if settings.fail_fast:
                print("Stopping at first failure (--fail-fast).", file=sys.stderr)
                return 1
            continue
        summary.suites.append(result.unwrap())

    if not args.quiet:
        print(f"Found {len(summary.suites)} test suites.")

    suites = summary.suites
    if not settings.include_empty:
        suites = [s for s in suites if s.has_reference_checks]
        if len(suites) != len(summary.suites) and not args.quiet:
            print(
                f"Filtered out {len(summary.suites) - len(suites)} test suites "
                f"without references.",
                file=sys.stderr,
            )

    if suites:
        write_suites(suites, output, settings, summary, args)

    if not args.quiet:
        print(f"Generated {summary.written} SPT test files for {len(suites)} test suites.")
        if summary.skipped_existing:
            print(
                f"Skipped {summary.skipped_existing} existing files (use -f/--force to overwrite)."
            )
        if summary.failed:
            print(f"{len(summary.failed)} sources failed.", file=sys.stderr)
        print("Done!")

    return 1 if summary.has_failures else 0


def apply_arguments(settings: GeneratorConfig, args: argparse.Namespace) -> GeneratorConfig:
    """Override configured settings with command line arguments."""
    if getattr(args, "out", None) is not None:
        settings.output = str(args.out)
    if getattr(args, "module", None):
        settings.module = args.module
    if getattr(args, "kind", None):
        settings.kinds = [TestKind.from_name(k) for k in args.kind]
    if getattr(args, "all", False):
        settings.include_empty = True
    if getattr(args, "force", False):
        settings.force = True
    if getattr(args, "fail_fast", False):
        settings.fail_fast = True
    return settings


def collect_sources(inputs: List[Path], settings: GeneratorConfig, quiet: bool) -> List[SuiteSource]:
    """Find all suite sources under the input directories."""
    sources: List[SuiteSource] = []
    for input_dir in inputs:
        if not quiet:
            print(f"Finding test suites in: {input_dir}")
        discovered = find_test_projects(
            input_dir,
            skip_dirs=settings.skip_dirs,
            extensions=settings.extensions,
        )
        if discovered.skipped:
            print(
                "Files that are not test projects, skipped:\n  "
                + "\n  ".join(str(p) for p in discovered.skipped),
                file=sys.stderr,
            )
        sources.extend(discovered.sources())
    return sources


def write_suites(
    suites: List[TestSuite],
    output: Path,
    settings: GeneratorConfig,
    summary: GenerateSummary,
    args: argparse.Namespace,
) -> None:
    """Write one SPT file per suite and kind that has cases of that kind."""
    renderer = SptRenderer(settings.module, settings.language, settings.start_symbol)

    if not args.quiet:
        print(f"Generating SPT test files in: {output}")
    output.mkdir(parents=True, exist_ok=True)

    claimed: Set[Path] = set()
    for suite in suites:
        for kind in settings.kinds:
            if not suite.cases_of_kind(kind):
                continue
            target = output / renderer.relative_path(suite, kind)
            if target in claimed:
                print(f"Error: {suite}: {target} already written in this run", file=sys.stderr)
                summary.failed.append(str(suite))
                continue
            claimed.add(target)
            result = renderer.write_suite(suite, output, kind, force=settings.force)
            if result.outcome is WriteOutcome.SKIPPED:
                summary.skipped_existing += 1
            else:
                summary.written += 1
            if args.verbose:
                print(f"  {result.outcome.value}: {result.path}")
        if not args.quiet:
            print(f"  {suite}")
