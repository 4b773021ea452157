"""Function locator: finds and names every function-like node.

Functions rarely carry their own names in minified code, so a name is
inferred from the syntactic container the function sits in (the variable
it initializes, the property it is assigned to, the object key it is the
value of). A container that names a function marks it as handled so the
walker does not emit it a second time when it reaches the function node.
"""

from __future__ import annotations

import structlog

from bundlescope.config.constants import ANONYMOUS_FN_NAME
from bundlescope.extract.models import ExtractOptions, FunctionSignature, WalkSignal
from bundlescope.extract.nodes import (
    FUNCTION_EXPRESSION_TYPES,
    FUNCTION_TYPES,
    IDENTIFIER_TYPES,
    Node,
    field,
    first_named,
    number_value,
    own_name,
    string_value,
    text,
    unwrap_parens,
)
from bundlescope.extract.tokens import StatementTokenizer

log = structlog.get_logger(__name__)

# container kind -> (field holding the name, field holding the function)
_CONTAINERS: dict[str, tuple[str | None, str | None]] = {
    "variable_declarator": ("name", "value"),
    "assignment_expression": ("left", "right"),
    "augmented_assignment_expression": ("left", "right"),
    "assignment_pattern": ("left", "right"),
    "pair": ("key", "value"),
    "field_definition": ("property", "value"),
    "return_statement": (None, None),
    "method_definition": ("name", None),
}

_LITERAL_KEY_NAMES = {
    "regex": "*regexp literal*",
    "null": "*null literal*",
    "template_string": "*template literal*",
}
_KEY_OPERAND_TYPES = IDENTIFIER_TYPES | {"string", "number", "true", "false", *_LITERAL_KEY_NAMES}


def infer_name(node: Node | None) -> str | None:
    """Name a container key or assignment target, or None if it has none."""
    node = unwrap_parens(node)
    if node is None:
        return None
    kind = node.type
    if kind in IDENTIFIER_TYPES:
        return text(node)
    if kind == "string":
        return string_value(node)
    if kind == "number":
        return str(number_value(node))
    if kind in ("true", "false"):
        return kind
    if kind in _LITERAL_KEY_NAMES:
        return _LITERAL_KEY_NAMES[kind]
    if kind == "computed_property_name":
        return infer_name(first_named(node))
    if kind == "member_expression":
        prop = field(node, "property")
        return infer_name(prop) if prop is not None and prop.type != "call_expression" else None
    if kind == "subscript_expression":
        return _infer_subscript_name(field(node, "index"))
    if kind == "binary_expression":
        left = _infer_operand_name(field(node, "left"))
        right = _infer_operand_name(field(node, "right"))
        operator = field(node, "operator")
        if left is None or right is None or operator is None:
            return None
        return f"{left}{operator.type}{right}"
    return None


def _infer_operand_name(operand: Node | None) -> str | None:
    operand = unwrap_parens(operand)
    if operand is None or operand.type not in _KEY_OPERAND_TYPES:
        return None
    return infer_name(operand)


def _infer_subscript_name(index: Node | None) -> str | None:
    index = unwrap_parens(index)
    if index is None or index.type in ("member_expression", "subscript_expression", "call_expression"):
        return None
    return infer_name(index)


class FunctionLocator:
    """Node filter emitting a ``FunctionSignature`` per function-like node.

    Instances are single-use: the handled set is scoped to one extraction
    call and keyed by tree-sitter node id.
    """

    def __init__(self, options: ExtractOptions | None = None) -> None:
        self._options = options or ExtractOptions()
        self._tokenizer = StatementTokenizer(self._options.version)
        self._handled: set[int] = set()

    def __call__(self, path: str, node: Node) -> WalkSignal[FunctionSignature]:
        if node.id in self._handled:
            return WalkSignal.cont()

        kind = node.type
        if kind in FUNCTION_TYPES:
            self._handled.add(node.id)
            return WalkSignal.cont(self._signature(own_name(node) or ANONYMOUS_FN_NAME, node))

        if kind in _CONTAINERS:
            return self._container(path, node)

        return WalkSignal.cont()

    def _container(self, path: str, node: Node) -> WalkSignal[FunctionSignature]:
        name_field, fn_field = _CONTAINERS[node.type]
        if node.type == "return_statement":
            fn = unwrap_parens(first_named(node))
        elif fn_field is None:
            fn = node
        else:
            fn = unwrap_parens(field(node, fn_field))
        if fn is None or fn.id in self._handled:
            return WalkSignal.cont()

        var_name = infer_name(field(node, name_field)) if name_field else None
        if fn.type in FUNCTION_EXPRESSION_TYPES:
            name = own_name(fn) or var_name
        elif fn.type in ("arrow_function", "method_definition"):
            name = var_name
        else:
            return WalkSignal.cont()

        if name is None:
            if name_field is not None:
                log.debug("functions.ambiguous_name", path=path, container=node.type)
            name = ANONYMOUS_FN_NAME
        self._handled.add(fn.id)
        return WalkSignal.cont(self._signature(name, fn))

    def _signature(self, name: str, fn: Node) -> FunctionSignature:
        return FunctionSignature(
            name=name,
            fn_statement_types=self._tokenizer.statement_types(fn),
            fn_statement_tokens=self._tokenizer.tokenize(fn),
        )
