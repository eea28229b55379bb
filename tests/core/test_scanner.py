"""Tests for MarkerScanner - marker discovery and classification."""

import pytest

from reftestgen.core.errors import MarkerParseError, Stage
from reftestgen.core.markers import Annotation, ContextAnchor, Declaration, Reference, TextRange
from reftestgen.core.scanner import MarkerScanner, scan_markers


def scan_ok(text):
    result = scan_markers(text)
    assert result.ok, result.error
    return result.unwrap()


def scan_error(text):
    result = scan_markers(text)
    assert not result.ok
    return result.error


class TestScannerDeclarations:
    """Tests for [[@id|name]] declarations."""

    def test_declaration_fields_and_range(self):
        scan = scan_ok("class A { [[@1|foo]] int x; }")

        assert scan.markers == (Declaration("1", "foo", TextRange(10, 20)),)

    def test_identifier_is_trimmed(self):
        scan = scan_ok("[[@ 1 |foo]]")

        assert scan.declarations[0].id == "1"

    def test_name_is_kept_verbatim(self):
        scan = scan_ok("[[@1| foo ]]")

        assert scan.declarations[0].name == " foo "

    def test_declaration_without_name_fails(self):
        error = scan_error("[[@1]]")

        assert isinstance(error, MarkerParseError)
        assert error.stage is Stage.SCAN
        assert error.identifier == "1"
        assert error.marker == "[[@1]]"

    def test_declaration_with_empty_name_fails(self):
        error = scan_error("[[@1|]]")

        assert isinstance(error, MarkerParseError)

    def test_declaration_without_identifier_fails(self):
        error = scan_error("[[@|foo]]")

        assert isinstance(error, MarkerParseError)
        assert "Missing identifier" in error.message


class TestScannerReferences:
    """Tests for [[->id(|&ctx)*|input(|expected)?]] references."""

    def test_reference_with_expected_text(self):
        scan = scan_ok("[[->1|foo|A.foo]]")

        ref = scan.references[0]
        assert ref.target_id == "1"
        assert ref.context_ids == ()
        assert ref.input_text == "foo"
        assert ref.expected_text == "A.foo"
        assert ref.replacement_text == "A.foo"

    def test_expected_text_defaults_to_input(self):
        scan = scan_ok("[[->1|foo]]")

        ref = scan.references[0]
        assert ref.expected_text == "foo"

    def test_contexts_in_declared_order(self):
        scan = scan_ok("[[->1|&b|&a|foo|A.foo]]")

        ref = scan.references[0]
        assert ref.context_ids == ("b", "a")
        assert ref.input_text == "foo"
        assert ref.expected_text == "A.foo"

    def test_reference_without_input_fails(self):
        error = scan_error("x = [[->1]];")

        assert isinstance(error, MarkerParseError)
        assert error.identifier == "1"
        assert "No initial name" in error.message

    def test_reference_with_only_contexts_fails(self):
        error = scan_error("[[->1|&a]]")

        assert isinstance(error, MarkerParseError)

    def test_too_many_fields_fails(self):
        error = scan_error("[[->1|a|b|c]]")

        assert isinstance(error, MarkerParseError)
        assert "Too many fields" in error.message

    def test_legacy_single_context_syntax_fails(self):
        error = scan_error("[[->1|&->2|foo]]")

        assert isinstance(error, MarkerParseError)
        assert "&->" in error.message

    def test_str_round_trips_source_form(self):
        scan = scan_ok("[[->1|&c|foo|A.foo]] [[->2|bar]]")

        assert [str(r) for r in scan.references] == ["[[->1|&c|foo|A.foo]]", "[[->2|bar]]"]


class TestScannerContextsAndAnnotations:
    """Tests for [[&id|name]] contexts and [[{key}]] annotations."""

    def test_context_anchor(self):
        scan = scan_ok("class [[&c|B]] {}")

        assert scan.markers == (ContextAnchor("c", "B", TextRange(6, 14)),)

    def test_context_without_name_fails(self):
        error = scan_error("[[&c]]")

        assert isinstance(error, MarkerParseError)
        assert error.identifier == "c"

    def test_annotation_is_collected_separately(self):
        scan = scan_ok("[[{disabled}]] [[@1|x]]")

        assert scan.annotations == (Annotation("disabled", TextRange(0, 14)),)
        assert scan.annotation_keys == frozenset({"disabled"})
        assert len(scan.markers) == 1

    def test_unknown_annotation_key_is_not_an_error(self):
        scan = scan_ok("[[{flaky}]]")

        assert scan.annotation_keys == frozenset({"flaky"})

    def test_malformed_annotation_fails(self):
        error = scan_error("[[{disabled]]")

        assert isinstance(error, MarkerParseError)


class TestScannerGeneral:
    """Tests for ordering, unknown operators and marker-free text."""

    def test_no_markers(self):
        scan = scan_ok("class A { int x; }")

        assert scan.markers == ()
        assert scan.annotations == ()

    def test_markers_in_ascending_order(self):
        scan = scan_ok("[[&c|C]] [[->1|foo]] [[@1|foo]]")

        starts = [m.range.start for m in scan.markers]
        assert starts == sorted(starts)
        assert [type(m) for m in scan.markers] == [ContextAnchor, Reference, Declaration]

    @pytest.mark.parametrize("text", ["[[?1|x]]", "[[1|foo]]", "[[]]"])
    def test_unknown_operator_fails(self, text):
        error = scan_error(text)

        assert isinstance(error, MarkerParseError)
        assert "Unknown operator" in error.message

    def test_first_error_is_reported(self):
        error = scan_error("[[@1]] [[?2|x]]")

        assert "No name for declaration" in error.message

    def test_markers_do_not_span_lines(self):
        scan = scan_ok("[[@1|\nfoo]]")

        assert scan.markers == ()

    def test_scanner_is_reusable(self):
        scanner = MarkerScanner()

        first = scanner.scan("[[@1|a]]").unwrap()
        second = scanner.scan("[[@2|b]]").unwrap()

        assert first.declarations[0].id == "1"
        assert second.declarations[0].id == "2"
