"""React Native bundle support.

Metro bundles wrap every module in a ``__d(...)`` call. The argument
layout changed across React Native releases; three are known, oldest
first:

1. ``__d("id", [deps], factory)`` where factory is an object or function
2. ``__d(123, factory)``
3. ``__d(factory, 123[, [deps]])``
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from bundlescope.extract.models import WalkSignal
from bundlescope.extract.nodes import (
    FUNCTION_TYPES,
    Node,
    field,
    named,
    number_value,
    string_value,
    text,
    unwrap_parens,
)

log = structlog.get_logger(__name__)

DEFINE_FUNCTION_NAME = "__d"


@dataclass(frozen=True, slots=True)
class ModuleFactory:
    """One module declaration found in a bundle."""

    module_id: str | int | float
    factory: Node


def _is_function(node: Node | None) -> bool:
    return node is not None and node.type in FUNCTION_TYPES


def _kind(node: Node | None) -> str | None:
    return node.type if node is not None else None


def module_factory_filter(path: str, node: Node) -> WalkSignal[ModuleFactory]:
    """Node filter emitting the factory of every ``__d(...)`` call."""
    if node.type != "call_expression":
        return WalkSignal.cont()
    callee = field(node, "function")
    if callee is None or callee.type != "identifier" or text(callee) != DEFINE_FUNCTION_NAME:
        return WalkSignal.cont()

    arguments = field(node, "arguments")
    args = [unwrap_parens(arg) for arg in named(arguments)] if arguments is not None else []
    first, second, third = (args + [None, None, None])[:3]

    if (
        _kind(first) == "string"
        and _kind(second) == "array"
        and (_kind(third) == "object" or _is_function(third))
    ):
        return WalkSignal.stop(ModuleFactory(string_value(first), third))
    if _kind(first) == "number" and _is_function(second) and len(args) == 2:
        return WalkSignal.stop(ModuleFactory(number_value(first), second))
    if (
        _is_function(first)
        and _kind(second) == "number"
        and (third is None or _kind(third) == "array")
    ):
        return WalkSignal.stop(ModuleFactory(number_value(second), first))

    log.warning(
        "bundles.unknown_define_layout",
        path=path,
        argument_kinds=[arg.type for arg in args],
        line=node.start_point[0] + 1,
    )
    return WalkSignal.stop()
