"""Helpers for reading tree-sitter JavaScript nodes.

tree-sitter keeps literals as raw source text; the functions here decode
them into the values a JavaScript engine would see (cooked strings,
numbers, regex and template text).
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from typing import Any

from bundlescope.core.errors import ExtractionError

Node = Any  # tree_sitter.Node

COMMENT_TYPES = frozenset({"comment", "html_comment"})

FUNCTION_EXPRESSION_TYPES = frozenset({"function_expression", "function", "generator_function"})
FUNCTION_DECLARATION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
FUNCTION_TYPES = FUNCTION_EXPRESSION_TYPES | FUNCTION_DECLARATION_TYPES | {"arrow_function"}

IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "private_property_identifier",
        "statement_identifier",
        "undefined",
    }
)

_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-3][0-7]{0,2}|[4-7][0-7]?|\r\n|[\s\S])"
)
_LEGACY_OCTAL_RE = re.compile(r"0[0-7]+")
_LEADING_ZERO_DECIMAL_RE = re.compile(r"0[0-9]+")


def text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def named(node: Node) -> Iterator[Node]:
    """Named children, comments excluded."""
    for child in node.named_children:
        if child.type not in COMMENT_TYPES:
            yield child


def first_named(node: Node) -> Node | None:
    return next(named(node), None)


def unwrap_parens(node: Node | None) -> Node | None:
    while node is not None and node.type == "parenthesized_expression":
        node = first_named(node)
    return node


def field(node: Node, name: str) -> Node | None:
    return node.child_by_field_name(name)


def required_field(node: Node, name: str) -> Node:
    child = node.child_by_field_name(name)
    if child is None:
        raise ExtractionError.malformed_node(node.type, name)
    return child


def has_token(node: Node, token: str) -> bool:
    """True when an anonymous child spells ``token`` (e.g. ``get``, ``of``)."""
    return any(not child.is_named and child.type == token for child in node.children)


def _unescape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq in _LINE_CONTINUATIONS:
        return ""
    head = seq[0]
    if head == "u" and len(seq) > 1:
        digits = seq[2:-1] if seq.startswith("u{") else seq[1:]
        return chr(int(digits, 16))
    if head == "x" and len(seq) == 3:
        return chr(int(seq[1:], 16))
    if head in "01234567":
        return chr(int(seq, 8))
    return _SIMPLE_ESCAPES.get(seq, seq)


def cook(raw: str) -> str:
    """Apply JavaScript escape sequences to raw string or template text."""
    if "\\" not in raw:
        return raw
    cooked = _ESCAPE_RE.sub(_unescape, raw)
    # Pair up \uD83D\uDE00 style surrogate escapes into one code point.
    return cooked.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def string_value(node: Node) -> str:
    raw = text(node)
    return cook(raw[1:-1])


def number_value(node: Node) -> int | float | str:
    """Numeric value of a number literal.

    Integral values come back as ``int``; values a float cannot hold
    (``Infinity`` from an overflowing literal) keep their source text.
    """
    raw = text(node).replace("_", "")
    if raw.endswith("n"):
        return int(raw[:-1], 0)
    prefix = raw[:2].lower()
    if prefix in ("0x", "0o", "0b"):
        return int(raw, 0)
    if _LEGACY_OCTAL_RE.fullmatch(raw):
        return int(raw, 8)
    if _LEADING_ZERO_DECIMAL_RE.fullmatch(raw):
        return int(raw, 10)
    value = float(raw)
    if not math.isfinite(value):
        return raw
    if value.is_integer():
        return int(value)
    return value


def regex_value(node: Node) -> str:
    pattern = field(node, "pattern")
    flags = field(node, "flags")
    return f"/{text(pattern) if pattern is not None else ''}/{text(flags) if flags is not None else ''}"


def template_chunks(node: Node) -> list[str]:
    """Cooked static chunks of a template literal, substitutions removed."""
    source: bytes = node.text
    base = node.start_byte
    chunks: list[bytes] = []
    pos = 1
    for child in node.named_children:
        if child.type == "template_substitution":
            chunks.append(source[pos : child.start_byte - base])
            pos = child.end_byte - base
    chunks.append(source[pos : len(source) - 1])
    return [cook(chunk.decode("utf-8", errors="replace")) for chunk in chunks]


def own_name(node: Node) -> str | None:
    """Identifier a function-like node names itself with, if any."""
    name = field(node, "name")
    return text(name) if name is not None else None
