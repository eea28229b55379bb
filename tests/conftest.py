"""Shared pytest fixtures."""

from pathlib import Path

import pytest

EXAMPLE_TEXT = "class A { [[@1|foo]] int x; } class B { void m() { [[->1|foo|A.foo]]; } }"
EXAMPLE_CLEAN = "class A { foo int x; } class B { void m() { A.foo; } }"

ANNOTATED_UNIT = """\
package p;

public class [[@1|A]] {
    int [[@2|x]];
}

class [[&b|B]] {
    void m() {
        [[->1|A]] a = new [[->1|A|p.A]]();
        int y = a.[[->2|&b|x]];
    }
}
"""


@pytest.fixture
def example_text():
    """Annotated text with one declaration and one qualified reference."""
    return EXAMPLE_TEXT


@pytest.fixture
def example_clean():
    """Expected clean text of ``example_text``."""
    return EXAMPLE_CLEAN


@pytest.fixture
def annotated_unit():
    """Annotated Java compilation unit with declarations, references and a context."""
    return ANNOTATED_UNIT


@pytest.fixture
def before_after_tree(tmp_path: Path) -> Path:
    """Test tree with a before/after project and a directory of single-file projects.

    Layout::

        root/
          moveMember/simple/before/p/A.java
          moveMember/simple/after/p/A.java
          rename/Field_in.java
          rename/Field_after.java
          rename/README.txt
    """
    root = tmp_path / "input"

    for qualifier in ("before", "after"):
        unit = root / "moveMember" / "simple" / qualifier / "p" / "A.java"
        unit.parent.mkdir(parents=True)
        unit.write_text(ANNOTATED_UNIT, encoding="utf-8")

    rename = root / "rename"
    rename.mkdir(parents=True)
    (rename / "Field_in.java").write_text(
        "public class Field { int [[@1|f]]; int g() { return [[->1|f|this.f]]; } }",
        encoding="utf-8",
    )
    (rename / "Field_after.java").write_text(
        "[[{disabled}]]\npublic class Field { int [[@1|f]]; }",
        encoding="utf-8",
    )
    (rename / "README.txt").write_text("not a test", encoding="utf-8")
    return root
