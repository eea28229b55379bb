"""
reftestgen.commands.check - Check annotated files.

Runs the marker pipeline on individual files and reports the cleaned
highlights and test cases, or the first error, per file.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from reftestgen.core.models import ReferenceResolutionCheck, TestSuite
from reftestgen.core.pipeline import read_test_suite


def run(args: argparse.Namespace) -> int:
    """Run the check command."""
    from reftestgen.commands import load_configuration

    config = load_configuration(args)
    if config is None:
        return 1
    variants = config.get("analysis", {}).get("variants", ["default", "test"])

    reports: List[Dict[str, Any]] = []
    failures = 0
    for file in args.files:
        path = Path(file)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error: cannot read {path}: {e}", file=sys.stderr)
            failures += 1
            continue

        result = read_test_suite(path.stem, None, str(path.parent), text, variants)
        if result.ok:
            reports.append(suite_report(path, result.unwrap()))
        else:
            failures += 1
            reports.append({"file": str(path), "ok": False, "error": result.error.to_dict()})

    if args.json:
        print(json.dumps(reports, indent=2))
    else:
        for report in reports:
            print_report(report, args.verbose)

    return 1 if failures else 0


def suite_report(path: Path, suite: TestSuite) -> Dict[str, Any]:
    """Describe a successfully built suite as a JSON-ready dict."""
    refs = [c for c in suite.cases if isinstance(c, ReferenceResolutionCheck)]
    return {
        "file": str(path),
        "ok": True,
        "disabled": suite.is_disabled,
        "cases": [case.name for case in suite.cases],
        "highlights": [
            {"start": h.start, "end": h.end, "text": h.slice(suite.text)}
            for h in suite.highlights
        ],
        "references": [
            {
                "input": ref.input_text,
                "reference": ref.reference_index,
                "declaration": ref.declaration_index,
                "contexts": list(ref.context_indexes),
            }
            for ref in refs
        ],
    }


def print_report(report: Dict[str, Any], verbose: bool = False) -> None:
    if not report["ok"]:
        error = report["error"]
        print(f"✗ {report['file']}: {error['kind']} ({error['stage']}): {error['message']}")
        return

    disabled = " [disabled]" if report["disabled"] else ""
    print(
        f"✓ {report['file']}: {len(report['cases'])} cases, "
        f"{len(report['references'])} references{disabled}"
    )
    if verbose:
        for i, h in enumerate(report["highlights"], start=1):
            print(f"    #{i} [{h['start']}, {h['end']}) {h['text']!r}")
        for ref in report["references"]:
            contexts = ", ".join(f"#{c + 1}" for c in ref["contexts"])
            suffix = f" in {contexts}" if contexts else ""
            print(
                f"    {ref['input']!r}: #{ref['reference'] + 1} -> "
                f"#{ref['declaration'] + 1}{suffix}"
            )
