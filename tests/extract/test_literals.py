"""Tests for literal collection and literal decoding."""

from __future__ import annotations

import pytest

from bundlescope.extract.literals import collapse_literals, literal_filter, literal_sort_key
from bundlescope.extract.models import TreePath
from bundlescope.extract.nodes import cook
from bundlescope.extract.signature import extract_structure
from bundlescope.extract.walker import walk


def _literals(source: str) -> list:
    return extract_structure(source).literal_signature


class TestLiteralCollection:
    """What ends up in the literal signature."""

    def test_given_mixed_literals_when_collected_then_sorted_values(self) -> None:
        """Strings, numbers, regexes and templates are captured and sorted."""
        # Given
        source = (
            "var a = 'hello', b = 42, c = 3, d = -1, e = 1.5, f = true,"
            " g = null, h = /ab+c/gi, i = `x${y}z`;"
        )

        # When
        literals = _literals(source)

        # Then
        assert literals == ["/ab+c/gi", 1.5, 42, "hello", "x...z"]

    @pytest.mark.parametrize("source", ["-1", "0", "1", "2", "3", "4", "5", "true", "false", "null"])
    def test_given_exempt_value_when_collected_then_not_captured(self, source: str) -> None:
        """Exempt numbers, booleans and null never appear."""
        assert _literals(f"f({source});") == []

    def test_given_empty_string_when_collected_then_not_captured(self) -> None:
        """The empty string is not discriminative."""
        assert _literals("f('');") == []

    def test_given_duplicates_when_collected_then_once(self) -> None:
        """Each value appears once."""
        assert _literals("f('a'); g('a'); h(6); h(6.0);") == [6, "a"]

    def test_given_string_and_number_spelled_alike_when_collected_then_both_kept(self) -> None:
        """The number 7 and the string '7' are different literals."""
        assert _literals("f(7); f('7');") == [7, "7"]

    def test_given_hex_number_when_collected_then_decimal_value(self) -> None:
        """Non-decimal notations are normalized."""
        assert _literals("f(0x10, 0b111, 0o17);") == [15, 16, 7]

    def test_given_escapes_when_collected_then_cooked(self) -> None:
        """Escape sequences are applied."""
        assert _literals(r"f('a\nb', 'A\x42');") == ["AB", "a\nb"]

    def test_given_literal_in_nested_function_when_collected_then_captured(self) -> None:
        """Literals are harvested from every depth."""
        assert _literals("function a(){ return function(){ return 'deep'; }; }") == ["deep"]

    def test_given_function_directive_when_collected_then_skipped(self) -> None:
        """Directive prologue strings are not literals."""
        assert _literals("function a(){ 'use strict'; return x; }") == []

    def test_given_program_directive_when_collected_then_skipped(self) -> None:
        """A leading directive at file level is skipped; later strings are kept."""
        assert _literals("'use strict'; f('x');") == ["x"]

    def test_given_method_directive_when_collected_then_skipped(self) -> None:
        """Method bodies have directive prologues too."""
        assert _literals("class A { m() { 'use strict'; f('y'); } }") == ["y"]

    def test_given_string_statement_after_code_when_collected_then_kept(self) -> None:
        """String statements past the prologue are ordinary literals."""
        assert _literals("function a(){ f(); 'late'; }") == ["late"]

    def test_given_string_statement_in_block_when_collected_then_kept(self) -> None:
        """Plain blocks have no directive prologue."""
        assert _literals("if (x) { 'block'; }") == ["block"]

    def test_given_template_without_substitution_when_collected_then_raw_text(self) -> None:
        """Plain templates keep their text."""
        assert _literals("f(`plain`);") == ["plain"]


class TestLiteralFilter:
    """literal_filter() decisions."""

    def test_given_non_literal_when_filtered_then_continue(self, parse_js) -> None:
        """Non-literal nodes are descended into without data."""
        root = parse_js("x;")
        expression = root.named_children[0]

        signal = literal_filter("[0]", expression)

        assert signal.proceed
        assert signal.data is None

    def test_given_string_when_walked_then_leaf(self, parse_js) -> None:
        """String literals stop the walk with their value."""
        forest = walk(parse_js("f('v');"), literal_filter)

        assert [item.data for item in forest] == ["v"]
        assert forest[0].children is None


class TestCollapse:
    """collapse_literals() ordering and de-duplication."""

    def test_given_nested_paths_when_collapsed_then_flattened(self) -> None:
        """Children are collected along with their parents."""
        forest = [TreePath("a", "z", [TreePath("a.b", 10)]), TreePath("c", "z")]

        assert collapse_literals(forest) == [10, "z"]

    def test_sort_key_puts_number_before_equal_string(self) -> None:
        """Numbers sort before strings with the same text."""
        assert sorted(["1", 1], key=literal_sort_key) == [1, "1"]


class TestCook:
    """cook() escape handling."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (r"a\tb", "a\tb"),
            (r"\u{1F600}", "\U0001F600"),
            (r"\uD83D\uDE00", "\U0001F600"),
            (r"\101", "A"),
            (r"\q", "q"),
            ("a\\\nb", "ab"),
            ("plain", "plain"),
        ],
    )
    def test_given_escape_when_cooked_then_decoded(self, raw: str, expected: str) -> None:
        """Escape sequences decode like a JavaScript engine would."""
        assert cook(raw) == expected
