"""Literal collector: harvests discriminative literal values."""

from __future__ import annotations

from collections.abc import Iterable

from bundlescope.config.constants import EXEMPT_NUMBERS, TEMPLATE_CHUNK_SEPARATOR
from bundlescope.extract.models import LiteralValue, TreePath, WalkSignal
from bundlescope.extract.nodes import (
    FUNCTION_TYPES,
    Node,
    named,
    number_value,
    regex_value,
    string_value,
    template_chunks,
)
from bundlescope.extract.tokens import split_directives

_NEVER_CAPTURED = frozenset({"true", "false", "null", "undefined"})
_DIRECTIVE_SCOPES = FUNCTION_TYPES | {"method_definition"}


def is_directive(node: Node) -> bool:
    """True for a string forming a directive prologue entry (``'use strict'``)."""
    statement = node.parent
    if statement is None or statement.type != "expression_statement":
        return False
    body = statement.parent
    if body is None:
        return False
    if body.type == "statement_block":
        owner = body.parent
        if owner is None or owner.type not in _DIRECTIVE_SCOPES:
            return False
    elif body.type != "program":
        return False
    directives, _rest = split_directives(body)
    prologue = list(named(body))[: len(directives)]
    return any(entry.id == statement.id for entry in prologue)


def literal_filter(_path: str, node: Node) -> WalkSignal[LiteralValue]:
    """Node filter capturing strings, non-trivial numbers, regexes and templates.

    Directive prologue strings are not literals and are skipped.
    """
    kind = node.type
    if kind == "string":
        if is_directive(node):
            return WalkSignal.stop()
        value = string_value(node)
        return WalkSignal.stop(value if value != "" else None)
    if kind == "number":
        number = number_value(node)
        if isinstance(number, str):
            return WalkSignal.stop(number)
        return WalkSignal.stop(None if number in EXEMPT_NUMBERS else number)
    if kind == "regex":
        return WalkSignal.stop(regex_value(node))
    if kind == "template_string":
        return WalkSignal.stop(TEMPLATE_CHUNK_SEPARATOR.join(template_chunks(node)))
    if kind in _NEVER_CAPTURED:
        return WalkSignal.stop()
    return WalkSignal.cont()


def literal_sort_key(value: LiteralValue) -> tuple[str, bool]:
    return str(value), isinstance(value, str)


def collapse_literals(paths: Iterable[TreePath[LiteralValue]]) -> list[LiteralValue]:
    """De-duplicate collected literals into a sorted literal signature."""
    unique: dict[tuple[type, LiteralValue], LiteralValue] = {}
    stack = list(paths)
    while stack:
        item = stack.pop()
        value = item.data
        unique.setdefault((str if isinstance(value, str) else float, value), value)
        if item.children:
            stack.extend(item.children)
    return sorted(unique.values(), key=literal_sort_key)
