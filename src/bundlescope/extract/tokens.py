"""Statement/expression tokenizer.

Turns the body of one function into canonical structural tokens shaped
``<Category>:<Kind>[<predicate>]``. Literal values are abstracted to their
type while identifier names are kept verbatim, so the tokens survive
reformatting but still tell two implementations of the same shape apart.

Node kinds the tokenizer does not model produce ``t_<Category>:<raw-kind>``
and one warning per kind per tokenizer instance. Subtrees nested deeper
than ``MAX_TOKEN_DEPTH`` collapse to the same raw form.
"""

from __future__ import annotations

from collections.abc import Callable, Container

import structlog

from bundlescope.config.constants import MAX_TOKEN_DEPTH
from bundlescope.extract.models import ExtractorVersion
from bundlescope.extract.nodes import (
    COMMENT_TYPES,
    FUNCTION_EXPRESSION_TYPES,
    IDENTIFIER_TYPES,
    Node,
    field,
    first_named,
    has_token,
    named,
    own_name,
    required_field,
    text,
    unwrap_parens,
)

log = structlog.get_logger(__name__)

DECLARATION = "Declaration"
DIRECTIVE = "Directive"
EXPRESSION = "Expression"
LITERAL = "Literal"
PARAM = "Parameter"
STATEMENT = "Statement"
UNKNOWN = "Unknown"

RETURN_ANONYMOUS_FUNCTION = f"{STATEMENT}:Return[{EXPRESSION}:Function[anonymous]]"

_LITERAL_KINDS = {
    "string": "String",
    "number": "Numeric",
    "true": "Boolean",
    "false": "Boolean",
    "null": "Null",
    "regex": "RegExp",
    "template_string": "Template",
}
_LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})
_DECLARATION_TYPES = frozenset({"variable_declaration", "lexical_declaration"})
# member kind -> (separator, field holding the property)
_MEMBER_KINDS = {
    "member_expression": (">>>", "property"),
    "subscript_expression": (">c>", "index"),
}


def token(category: str, kind: str, predicate: str | None = None) -> str:
    return f"{category}:{kind}[{predicate}]" if predicate else f"{category}:{kind}"


def raw_token(category: str, raw_kind: str) -> str:
    return f"t_{category}:{raw_kind}"


def function_params(fn: Node) -> list[Node]:
    single = field(fn, "parameter")
    if single is not None:
        return [single]
    params = field(fn, "parameters")
    return list(named(params)) if params is not None else []


def split_directives(block: Node) -> tuple[list[str], list[Node]]:
    """Split a function body into its directive prologue and the rest."""
    statements = list(named(block))
    directives: list[str] = []
    for statement in statements:
        if statement.type != "expression_statement":
            break
        expr = first_named(statement)
        if expr is None or expr.type != "string":
            break
        directives.append(text(expr)[1:-1])
    return directives, statements[len(directives) :]


class StatementTokenizer:
    """Tokenizes function bodies for one extraction call."""

    def __init__(self, version: ExtractorVersion = ExtractorVersion.V1) -> None:
        self._version = version
        self._reported: set[tuple[str, str]] = set()
        self._depth = 0
        self._statements: dict[str, Callable[[Node], list[str]]] = {
            "statement_block": self._block,
            "break_statement": self._jump("Break"),
            "continue_statement": self._jump("Continue"),
            "debugger_statement": lambda _node: [token(STATEMENT, "Debugger")],
            "do_statement": self._do_while,
            "empty_statement": lambda _node: [],
            "expression_statement": self._expression_statement,
            "for_in_statement": self._for_in,
            "for_statement": self._for,
            "function_declaration": self._function_declaration,
            "generator_function_declaration": self._function_declaration,
            "if_statement": self._if,
            "labeled_statement": self._labeled,
            "return_statement": self._return,
            "switch_statement": self._switch,
            "throw_statement": self._throw,
            "try_statement": self._try,
            "variable_declaration": self._declaration,
            "lexical_declaration": self._declaration,
            "while_statement": self._while,
            "with_statement": self._with,
        }
        self._expressions: dict[str, Callable[[Node], str]] = {
            "array": self._array,
            "assignment_expression": self._assignment,
            "augmented_assignment_expression": self._assignment,
            "binary_expression": self._binary,
            "call_expression": self._call,
            "new_expression": self._new,
            "ternary_expression": self._conditional,
            "arrow_function": lambda _node: token(EXPRESSION, "ArrowFunction"),
            "object": self._object,
            "sequence_expression": self._sequence,
            "this": lambda _node: token(EXPRESSION, "This"),
            "unary_expression": self._unary,
            "update_expression": self._update,
            "member_expression": self._reference,
            "subscript_expression": self._reference,
        }
        for kind in FUNCTION_EXPRESSION_TYPES:
            self._expressions[kind] = self._function_expression
        for kind in IDENTIFIER_TYPES:
            self._expressions[kind] = self._reference
        for kind in _LITERAL_KINDS:
            self._expressions[kind] = self._literal

    # -- entry points -------------------------------------------------------

    def tokenize(self, fn: Node) -> list[str]:
        """Sorted structural tokens of a function-like node."""
        tokens: list[str] = []
        if not self._version.skips_parameters:
            tokens.extend(self.lval(param) for param in function_params(fn))
        body = required_field(fn, "body")
        if body.type == "statement_block":
            directives, statements = split_directives(body)
            tokens.extend(token(DIRECTIVE, directive) for directive in directives)
            for statement in statements:
                tokens.extend(self.statement(statement))
        else:
            tokens.append(self.expression(body))
        return sorted(tokens)

    def statement_types(self, fn: Node) -> list[str]:
        """Sorted raw kinds of the parameters and top-level body statements."""
        types = [raw_token(PARAM, param.type) for param in function_params(fn)]
        body = required_field(fn, "body")
        if body.type == "statement_block":
            directives, statements = split_directives(body)
            types.extend(raw_token(DIRECTIVE, directive) for directive in directives)
            types.extend(raw_token(STATEMENT, statement.type) for statement in statements)
        else:
            types.append(raw_token(EXPRESSION, unwrap_parens(body).type))
        return sorted(types)

    def statement(self, node: Node) -> list[str]:
        handler = self._statements.get(node.type)
        if handler is None:
            return [self._unrecognized(STATEMENT, node)]
        if self._depth >= MAX_TOKEN_DEPTH:
            return [self._too_deep(STATEMENT, node)]
        self._depth += 1
        try:
            return handler(node)
        finally:
            self._depth -= 1

    def expression(self, node: Node) -> str:
        node = unwrap_parens(node)
        handler = self._expressions.get(node.type)
        if handler is None:
            return self._unrecognized(EXPRESSION, node)
        if self._depth >= MAX_TOKEN_DEPTH:
            return self._too_deep(EXPRESSION, node)
        self._depth += 1
        try:
            return handler(node)
        finally:
            self._depth -= 1

    def lval(self, node: Node) -> str:
        """Token for an assignment target, parameter or label."""
        node = unwrap_parens(node)
        parts = self._reference_parts(node)
        if parts is None:
            return self._unrecognized(PARAM, node)
        return token(PARAM, *parts)

    def _unrecognized(self, category: str, node: Node) -> str:
        key = (category, node.type)
        if key not in self._reported:
            self._reported.add(key)
            log.warning(
                "tokens.unrecognized_node",
                category=category,
                kind=node.type,
                line=node.start_point[0] + 1,
            )
        return raw_token(category, node.type)

    def _too_deep(self, category: str, node: Node) -> str:
        key = ("depth", category)
        if key not in self._reported:
            self._reported.add(key)
            log.warning(
                "tokens.nesting_limit",
                category=category,
                kind=node.type,
                line=node.start_point[0] + 1,
                limit=MAX_TOKEN_DEPTH,
            )
        return raw_token(category, node.type)

    def _left_chain(self, node: Node, kinds: Container[str], operand: str) -> list[Node]:
        """``node`` and its nested ``kinds`` nodes down the ``operand`` field, outermost first."""
        chain = [node]
        while True:
            inner = unwrap_parens(required_field(chain[-1], operand))
            if inner.type not in kinds:
                return chain
            chain.append(inner)

    # -- statements ---------------------------------------------------------

    def _block(self, node: Node) -> list[str]:
        tokens: list[str] = []
        for statement in named(node):
            tokens.extend(self.statement(statement))
        return tokens

    def _body(self, node: Node | None) -> list[str]:
        return self.statement(node) if node is not None else []

    def _jump(self, kind: str) -> Callable[[Node], list[str]]:
        def handler(node: Node) -> list[str]:
            label = field(node, "label")
            return [token(STATEMENT, kind, self.lval(label) if label is not None else None)]

        return handler

    def _do_while(self, node: Node) -> list[str]:
        test = self.expression(required_field(node, "condition"))
        return [token(STATEMENT, "Do-While", test), *self._body(field(node, "body"))]

    def _expression_statement(self, node: Node) -> list[str]:
        expr = first_named(node)
        return [self.expression(expr)] if expr is not None else []

    def _for_in(self, node: Node) -> list[str]:
        kind = "For-Of" if has_token(node, "of") else "For-In"
        left = required_field(node, "left")
        tokens = [token(STATEMENT, kind)]
        if left.type in _DECLARATION_TYPES:
            tokens.extend(self._declaration(left))
        elif field(node, "kind") is not None:
            tokens.extend(self._declarators([left]))
        else:
            tokens.append(self.lval(left))
        tokens.append(self.expression(required_field(node, "right")))
        tokens.extend(self._body(field(node, "body")))
        return tokens

    def _for_clause(self, node: Node | None) -> list[str]:
        if node is None or node.type == "empty_statement":
            return []
        if node.type in _DECLARATION_TYPES:
            return self._declaration(node)
        if node.type == "expression_statement":
            return self._expression_statement(node)
        return [self.expression(node)]

    def _for(self, node: Node) -> list[str]:
        return [
            token(STATEMENT, "For"),
            *self._for_clause(field(node, "initializer")),
            *self._for_clause(field(node, "condition")),
            *self._for_clause(field(node, "increment")),
            *self._body(field(node, "body")),
        ]

    def _function_declaration(self, node: Node) -> list[str]:
        name = own_name(node)
        identifier = token(EXPRESSION, "Identifier", name) if name else "anonymous"
        return [token(DECLARATION, "Function", identifier)]

    def _if(self, node: Node) -> list[str]:
        tokens: list[str] = []
        kind = "If"
        while True:
            test = self.expression(required_field(node, "condition"))
            tokens.append(token(STATEMENT, kind, test))
            tokens.extend(self._body(field(node, "consequence")))
            alternative = field(node, "alternative")
            if alternative is None:
                return tokens
            branch = first_named(alternative) if alternative.type == "else_clause" else alternative
            if branch is None:
                return [*tokens, token(STATEMENT, "Else")]
            if branch.type != "if_statement":
                return [*tokens, token(STATEMENT, "Else"), *self.statement(branch)]
            node, kind = branch, "Else-If"

    def _labeled(self, node: Node) -> list[str]:
        label = self.lval(required_field(node, "label"))
        return [token(STATEMENT, "Label", label), *self._body(field(node, "body"))]

    def _return(self, node: Node) -> list[str]:
        returned = first_named(node)
        return [token(STATEMENT, "Return", self.expression(returned) if returned is not None else None)]

    def _switch(self, node: Node) -> list[str]:
        discriminant = self.expression(required_field(node, "value"))
        tests: list[str] = []
        body_tokens: list[str] = []
        body = field(node, "body")
        for case in named(body) if body is not None else ():
            value = field(case, "value")
            tests.append(f"c {self.expression(value) if value is not None else 'default'}")
            for statement in case.children_by_field_name("body"):
                if statement.is_named:
                    body_tokens.extend(self.statement(statement))
        predicate = f"s {discriminant};"
        if tests:
            predicate += " " + ", ".join(tests)
        return [token(STATEMENT, "Switch", predicate), *body_tokens]

    def _throw(self, node: Node) -> list[str]:
        thrown = first_named(node)
        return [token(STATEMENT, "Throw", self.expression(thrown) if thrown is not None else None)]

    def _try(self, node: Node) -> list[str]:
        handler = field(node, "handler")
        finalizer = field(node, "finalizer")
        kind = "Try"
        param = None
        if handler is not None:
            kind += "-Catch"
            catch_param = field(handler, "parameter")
            param = self.lval(catch_param) if catch_param is not None else None
        if finalizer is not None:
            kind += "-Finally"
        tokens = [token(STATEMENT, kind, param), *self._block(required_field(node, "body"))]
        if handler is not None:
            tokens.extend(self._block(required_field(handler, "body")))
        if finalizer is not None:
            tokens.extend(self._block(required_field(finalizer, "body")))
        return tokens

    def _declaration(self, node: Node) -> list[str]:
        return self._declarators(
            [child for child in named(node) if child.type == "variable_declarator"]
        )

    def _declarators(self, declarators: list[Node]) -> list[str]:
        tokens: list[str] = []
        for declarator in declarators:
            if declarator.type == "variable_declarator":
                target = required_field(declarator, "name")
                value = field(declarator, "value")
            else:
                target, value = declarator, None
            if value is None and self._version.skips_uninitialized_declarators:
                continue
            predicate = self.lval(target)
            if value is not None:
                predicate += f" = {self.expression(value)}"
            tokens.append(token(DECLARATION, "Variable", predicate))
        return tokens

    def _while(self, node: Node) -> list[str]:
        test = self.expression(required_field(node, "condition"))
        return [token(STATEMENT, "While", test), *self._body(field(node, "body"))]

    def _with(self, node: Node) -> list[str]:
        target = self.expression(required_field(node, "object"))
        return [token(STATEMENT, "With", target), *self._body(field(node, "body"))]

    # -- expressions --------------------------------------------------------

    def _reference_parts(self, node: Node) -> tuple[str, str] | None:
        kind = node.type
        if kind in IDENTIFIER_TYPES:
            return "Identifier", text(node)
        if kind not in _MEMBER_KINDS:
            return None
        chain = self._left_chain(node, _MEMBER_KINDS, "object")
        obj = self.expression(required_field(chain[-1], "object"))
        predicate = ""
        for link in reversed(chain):
            separator, key = _MEMBER_KINDS[link.type]
            predicate = f"{obj} {separator} {self.expression(required_field(link, key))}"
            obj = token(EXPRESSION, "Member", predicate)
        return "Member", predicate

    def _reference(self, node: Node) -> str:
        parts = self._reference_parts(node)
        if parts is None:
            return self._unrecognized(EXPRESSION, node)
        return token(EXPRESSION, *parts)

    def _literal(self, node: Node) -> str:
        return token(LITERAL, _LITERAL_KINDS[node.type])

    def _spreadable(self, node: Node) -> str:
        if node.type == "spread_element":
            argument = first_named(node)
            return f"...{self.expression(argument) if argument is not None else ''}"
        return self.expression(node)

    def _array(self, node: Node) -> str:
        # Holes leave no node behind, so rebuild them from the commas.
        elements: list[str] = []
        current: str | None = None
        for child in node.children:
            if child.type == ",":
                elements.append(current or "")
                current = None
            elif child.is_named and child.type not in COMMENT_TYPES:
                current = self._spreadable(child)
        if current is not None:
            elements.append(current)
        return token(EXPRESSION, "Array", ", ".join(elements))

    def _assignment(self, node: Node) -> str:
        left = self.lval(required_field(node, "left"))
        right = self.expression(required_field(node, "right"))
        if node.type == "assignment_expression":
            operator = "="
        else:
            operator = required_field(node, "operator").type
        return token(EXPRESSION, "Assignment", f"{left} {operator} {right}")

    def _binary(self, node: Node) -> str:
        chain = self._left_chain(node, ("binary_expression",), "left")
        result = self.expression(required_field(chain[-1], "left"))
        for link in reversed(chain):
            operator = required_field(link, "operator").type
            right = self.expression(required_field(link, "right"))
            kind = "Logical" if operator in _LOGICAL_OPERATORS else "Binary"
            result = token(EXPRESSION, kind, f"{result} {operator} {right}")
        return result

    def _arguments(self, node: Node | None) -> str:
        if node is None:
            return ""
        return ", ".join(self._spreadable(arg) for arg in named(node))

    def _callee(self, kind: str, node: Node, callee: Node) -> str:
        if callee.type == "super":
            log.debug("tokens.super_callee", kind=kind, line=node.start_point[0] + 1)
            return token(EXPRESSION, kind, "super")
        arguments = self._arguments(field(node, "arguments"))
        return token(EXPRESSION, kind, f"{self.expression(callee)}({arguments})")

    def _call(self, node: Node) -> str:
        callee = required_field(node, "function")
        arguments = field(node, "arguments")
        if arguments is not None and arguments.type == "template_string":
            return token(EXPRESSION, "TaggedTemplate", self.expression(callee))
        return self._callee("Call", node, callee)

    def _new(self, node: Node) -> str:
        return self._callee("New", node, required_field(node, "constructor"))

    def _conditional(self, node: Node) -> str:
        test = self.expression(required_field(node, "condition"))
        consequence = self.expression(required_field(node, "consequence"))
        alternative = self.expression(required_field(node, "alternative"))
        return token(EXPRESSION, "Conditional", f"{test} ? {consequence} : {alternative}")

    def _function_expression(self, node: Node) -> str:
        name = own_name(node)
        return token(EXPRESSION, "Function", token(EXPRESSION, "Identifier", name) if name else "anonymous")

    def _object(self, node: Node) -> str:
        members: list[str] = []
        for member in named(node):
            kind = member.type
            if kind == "pair":
                key = self._object_key(required_field(member, "key"))
                value = self.expression(required_field(member, "value"))
                members.append(f"{key} : {value}")
            elif kind == "shorthand_property_identifier":
                members.append(token(EXPRESSION, "Identifier", text(member)))
            elif kind == "method_definition":
                name = field(member, "name")
                key = self._object_key(name) if name is not None else "anonymous"
                if has_token(member, "get"):
                    direction = "< "
                elif has_token(member, "set"):
                    direction = "> "
                else:
                    direction = ""
                members.append(token(UNKNOWN, "Method", f"{direction}{key}"))
            elif kind == "spread_element":
                members.append(self._spreadable(member))
            else:
                members.append(self._unrecognized(EXPRESSION, member))
        return token(EXPRESSION, "Object", ", ".join(members))

    def _object_key(self, key: Node) -> str:
        if key.type == "computed_property_name":
            inner = first_named(key)
            return self.expression(inner) if inner is not None else ""
        return self.expression(key)

    def _sequence(self, node: Node) -> str:
        # Some grammar releases nest sequences to the right: a, (b, c).
        parts: list[str] = []
        pending = list(named(node))[::-1]
        while pending:
            child = pending.pop()
            if child.type == "sequence_expression":
                pending.extend(list(named(child))[::-1])
            else:
                parts.append(self.expression(child))
        return token(EXPRESSION, "Sequence", ", ".join(parts))

    def _unary(self, node: Node) -> str:
        operator = required_field(node, "operator").type
        argument = self.expression(required_field(node, "argument"))
        return token(EXPRESSION, "Unary", f"{operator} {argument}")

    def _update(self, node: Node) -> str:
        argument_node = required_field(node, "argument")
        operator = required_field(node, "operator").type
        argument = self.expression(argument_node)
        if node.start_byte < argument_node.start_byte:
            return token(EXPRESSION, "Update", f"{operator}{argument}")
        return token(EXPRESSION, "Update", f"{argument}{operator}")
