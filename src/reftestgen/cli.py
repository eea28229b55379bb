"""
reftestgen.cli - Command-line interface.

Main entry point for the reftestgen CLI tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from reftestgen import __version__
from reftestgen.commands import check, generate
from reftestgen.core.models import TestKind


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="reftestgen",
        description="Generate reference retention SPT test files from annotated sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reftestgen generate tests/ -o out/        # Generate SPT files for all kinds
  reftestgen generate tests/ -o out/ -k refret
  reftestgen generate tests/ -o out/ -f     # Overwrite existing files
  reftestgen check Foo_in.java -v           # Show highlights and references

Markers:
  [[@1|foo]]            Declaration 1, replaced by "foo"
  [[->1|foo|A.foo]]     Reference to 1, input "foo", expected "A.foo"
  [[->1|&c|foo]]        Reference to 1 in context c
  [[&c|bar]]            Context anchor c, replaced by "bar"
  [[{disabled}]]        Disable the whole test suite

Configuration:
  reftestgen looks for .reftestgen.toml in the current directory
  or parent directories.

For detailed command help: reftestgen <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"reftestgen {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate SPT test files from annotated test projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Test projects are found by searching the input directories for:
  before/ and after/ directories    one project per directory
  *_after.java or *.java.after      one project per file in that directory

Exit codes:
  0  all sources were turned into test suites
  1  one or more sources failed, or the configuration is invalid
""",
    )
    generate_parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="Directories with input directories and files",
        metavar="INPUT",
    )
    generate_parser.add_argument(
        "-o",
        "--out",
        type=Path,
        help="Directory for output directories and files",
        metavar="PATH",
    )
    generate_parser.add_argument(
        "--module",
        help="Module prefix for SPT tests (default: refret)",
        metavar="PREFIX",
    )
    generate_parser.add_argument(
        "-k",
        "--kind",
        action="append",
        choices=[k.value for k in TestKind],
        help="Kind of test to generate (can be repeated; default: all)",
    )
    generate_parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        help="Include test suites without references",
    )
    generate_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Force overwrite of existing files",
    )
    generate_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first source that fails",
    )

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check markers in annotated files",
    )
    check_parser.add_argument(
        "files",
        type=Path,
        nargs="+",
        help="Annotated files to check",
        metavar="FILE",
    )
    check_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output results as JSON",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install reftestgen[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "generate":
            return generate.run(args)
        elif args.command == "check":
            return check.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
