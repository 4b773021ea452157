"""Tree-sitter parsing for JavaScript sources.

The extraction core only ever sees parsed trees; this adapter is the one
place that turns source text into them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog
import tree_sitter
import tree_sitter_javascript

from bundlescope.core.errors import ParseError

log = structlog.get_logger(__name__)

JS_LANGUAGE = tree_sitter.Language(tree_sitter_javascript.language())


@dataclass
class ParseResult:
    """Result of parsing one source unit."""

    tree: Any  # Tree-sitter Tree (not serializable)
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node
    first_error: tuple[int, int] | None = None  # (row, column)


@dataclass
class JavaScriptParser:
    """Tree-sitter JavaScript parser.

    Usage::

        parser = JavaScriptParser()
        result = parser.parse(source)
        signature = extract_signature(result.root_node)

    With ``strict`` set, sources the parser could only partially recover
    raise ``ParseError`` instead of returning a tree with ERROR nodes.
    """

    strict: bool = True
    _parser: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser(JS_LANGUAGE)

    def parse(self, content: str | bytes) -> ParseResult:
        if isinstance(content, str):
            content = content.encode("utf-8")
        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0
        first_error: tuple[int, int] | None = None

        # Iterative walk: minified bundles nest deeper than the recursion limit.
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
                if first_error is None or tuple(node.start_point) < first_error:
                    first_error = (node.start_point[0], node.start_point[1])
            stack.extend(node.children)

        result = ParseResult(
            tree=tree,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
            first_error=first_error,
        )
        if error_count:
            log.debug("parser.syntax_errors", error_count=error_count, first_error=first_error)
            if self.strict:
                raise ParseError.syntax_errors(error_count, first_error)
        return result
