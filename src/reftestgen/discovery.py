"""
reftestgen.discovery - Finds annotated Java test projects on disk.

A test project is either:
- a ``before``/``after`` (or similar) subdirectory of a directory that has
  such subdirectories, holding one or more Java packages; or
- a single file named ``Name_in.java``, ``Name_out.java``,
  ``Name_after.java``, ``Name.java.after`` or ``Name.java`` beside files
  with an ``after`` suffix.

Both kinds honour the configured source extensions (``.java`` above stands
for each of them).

Each compilation unit of a project becomes one SuiteSource.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from reftestgen.core.models import SuiteSource

# Directory names that hold one project each
PROJECT_DIR_NAMES = ("before", "after")

DEFAULT_EXTENSIONS = (".java",)

PACKAGE_PATTERN = re.compile(r"^\s*package\s+([^;]+);\s*$", re.MULTILINE)
UNIT_PATTERN = re.compile(r"^\s*public\s+class\s+(\w+)", re.MULTILINE)

DEFAULT_UNIT_NAME = "Test"


def suite_name_suffixes(
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> List[Tuple[str, Optional[str]]]:
    """Return ``(filename suffix, qualifier)`` pairs, most specific first."""
    qualified: List[Tuple[str, Optional[str]]] = []
    plain: List[Tuple[str, Optional[str]]] = []
    for ext in extensions:
        qualified.extend(
            [
                (f"_after{ext}", "after"),
                (f"{ext}.after", "after"),
                (f"_in{ext}", "in"),
                (f"_out{ext}", "out"),
            ]
        )
        plain.append((ext, None))
    return qualified + plain


@dataclass(frozen=True)
class JavaUnit:
    """A Java compilation unit."""

    name: str
    text: str


@dataclass(frozen=True)
class JavaPackage:
    """A Java package and its compilation units."""

    name: str
    units: Tuple[JavaUnit, ...]


@dataclass(frozen=True)
class JavaProject:
    """
    A Java test project.

    Attributes:
        name: Test name
        qualifier: Test qualifier (e.g., "before", "after", "in"), or None
        directory: Directory of the test relative to the search root
        packages: Packages in the project
    """

    name: str
    qualifier: Optional[str]
    directory: str
    packages: Tuple[JavaPackage, ...]

    @property
    def units(self) -> List[JavaUnit]:
        return [unit for package in self.packages for unit in package.units]

    def to_sources(self) -> Iterator[SuiteSource]:
        """Yield one SuiteSource per compilation unit.

        With several units the suite is named ``<project>_<unit>``; a unit
        name found in more than one package is prefixed with its package
        (dots replaced by ``_``) so every suite name stays unique.
        """
        units = self.units
        if len(units) == 1:
            yield SuiteSource(self.name, self.qualifier, self.directory, units[0].text)
            return

        counts = Counter(unit.name for unit in units)
        for package in self.packages:
            for unit in package.units:
                if counts[unit.name] > 1 and package.name:
                    name = f"{self.name}_{package.name.replace('.', '_')}_{unit.name}"
                else:
                    name = f"{self.name}_{unit.name}"
                yield SuiteSource(name, self.qualifier, self.directory, unit.text)


@dataclass
class DiscoveryResult:
    """
    Projects found under one directory.

    Attributes:
        projects: Projects found
        skipped: Files that could not be turned into a project
    """

    projects: List[JavaProject] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)

    def extend(self, other: DiscoveryResult) -> None:
        self.projects.extend(other.projects)
        self.skipped.extend(other.skipped)

    def sources(self) -> Iterator[SuiteSource]:
        for project in self.projects:
            yield from project.to_sources()


def get_package_name(text: str) -> Optional[str]:
    """Return the package declared in Java code, or None."""
    match = PACKAGE_PATTERN.search(text)
    return match.group(1).strip() if match else None


def get_unit_name(text: str) -> Optional[str]:
    """Return the name of the first public class in Java code, or None."""
    match = UNIT_PATTERN.search(text)
    return match.group(1) if match else None


def get_test_suite_name(
    filename: str,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> Optional[Tuple[str, Optional[str]]]:
    """Split a file name into test name and qualifier.

    Args:
        filename: File name such as ``Foo_in.java``.
        extensions: Source file extensions.

    Returns:
        ``(name, qualifier)``; or None if the name has no known suffix.
    """
    for suffix, qualifier in suite_name_suffixes(extensions):
        if filename.endswith(suffix) and len(filename) > len(suffix):
            return filename[: -len(suffix)], qualifier
    return None


def _relative_parts(path: Path, root: Path) -> List[str]:
    return list(path.resolve().relative_to(root.resolve()).parts)


def read_project_from_file(
    file: Path,
    root: Path,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> Optional[JavaProject]:
    """Read a single-file Java project.

    Args:
        file: The source file.
        root: Root relative to which the test directory is determined.
        extensions: Source file extensions.

    Returns:
        The project; or None if the file name has no known suffix.
    """
    suite_name = get_test_suite_name(file.name, extensions)
    if suite_name is None:
        return None
    name, qualifier = suite_name

    text = file.read_text(encoding="utf-8")
    unit = JavaUnit(get_unit_name(text) or DEFAULT_UNIT_NAME, text)
    package = JavaPackage(get_package_name(text) or "", (unit,))

    directory = "/".join(_relative_parts(file, root)[:-1])
    return JavaProject(name, qualifier, directory, (package,))


def read_project_from_directory(
    directory: Path,
    root: Path,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> JavaProject:
    """Read a Java project from the files under a directory.

    Packages are named after the subdirectories the units live in.

    Args:
        directory: Project directory, e.g. ``.../SomeTest/before``.
        root: Root relative to which the test directory is determined.
        extensions: File extensions of compilation units.

    Returns:
        The project, named after the parent of ``directory`` and
        qualified by the name of ``directory``.
    """
    packages: dict[str, list[JavaUnit]] = {}
    for path in sorted(directory.rglob("*")):
        if not path.is_file() or path.suffix not in extensions:
            continue
        package_name = ".".join(path.relative_to(directory).parts[:-1])
        packages.setdefault(package_name, []).append(
            JavaUnit(path.stem, path.read_text(encoding="utf-8"))
        )

    parts = _relative_parts(directory, root)
    return JavaProject(
        name=parts[-2] if len(parts) >= 2 else directory.resolve().parent.name,
        qualifier=parts[-1] if parts else directory.name,
        directory="/".join(parts[:-2]),
        packages=tuple(JavaPackage(name, tuple(units)) for name, units in packages.items()),
    )


def _has_after_files(entries: Sequence[Path], extensions: Sequence[str]) -> bool:
    after_suffixes = tuple(
        suffix for suffix, qualifier in suite_name_suffixes(extensions) if qualifier == "after"
    )
    return any(e.name.endswith(after_suffixes) for e in entries)


def find_test_projects(
    directory: Path,
    root: Optional[Path] = None,
    skip_dirs: Sequence[str] = (),
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> DiscoveryResult:
    """Find all Java test projects under a directory.

    Args:
        directory: Directory to search.
        root: Root relative to which test directories are named; defaults
            to ``directory``.
        skip_dirs: Directory names not to descend into.
        extensions: File extensions of compilation units.

    Returns:
        DiscoveryResult with the projects and skipped files.
    """
    root = root or directory
    result = DiscoveryResult()
    entries = sorted(directory.iterdir())

    if any(e.name in PROJECT_DIR_NAMES and e.is_dir() for e in entries):
        for entry in entries:
            if entry.is_dir():
                result.projects.append(
                    read_project_from_directory(entry, root, extensions=extensions)
                )
            else:
                result.skipped.append(entry)
    elif _has_after_files(entries, extensions):
        for entry in entries:
            if not entry.is_file():
                continue
            project = read_project_from_file(entry, root, extensions)
            if project is None:
                result.skipped.append(entry)
            else:
                result.projects.append(project)
    else:
        for entry in entries:
            if entry.is_dir() and entry.name not in skip_dirs:
                result.extend(find_test_projects(entry, root, skip_dirs, extensions))

    return result
