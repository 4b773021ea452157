"""Generic depth-first traversal of a tree-sitter syntax tree.

A node filter decides, per node, what data to emit at that location and
whether to descend. The walker turns those decisions into a forest of
``TreePath`` records:

- data + continue: emit, attach the (non-empty) subtree results as children
- data + stop: emit a leaf, skip the subtree
- no data + continue: splice the subtree results into the parent's list
- no data + stop: skip silently
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from bundlescope.extract.models import TreePath, WalkSignal
from bundlescope.extract.nodes import COMMENT_TYPES, Node

T = TypeVar("T")

NodeFilter = Callable[[str, Node], WalkSignal[T]]


@dataclass(slots=True)
class _Frame(Generic[T]):
    """A node whose children are being walked."""

    node: Node
    path: str
    data: T | None
    children: list[Node]
    results: list[TreePath[T]] = field(default_factory=list)
    seen_fields: set[str] = field(default_factory=set)
    next_index: int = 0


def _child_path(path: str, field_name: str | None, index: int, seen: set[str]) -> str:
    if field_name is None:
        return f"{path}[{index}]"
    if field_name in seen:
        return f"{path}.{field_name}[{index}]"
    seen.add(field_name)
    return f"{path}.{field_name}"


def walk(node: Node, node_filter: NodeFilter[T], path: str = "") -> list[TreePath[T]]:
    """Walk the named, non-comment descendants of ``node``.

    The filter is never called for ``node`` itself. Child order is source
    order, so results are deterministic for a given tree. The filter sees
    every node before any of its descendants.
    """
    # Explicit stack: minified bundles nest deeper than the recursion limit.
    root: _Frame[T] = _Frame(node, path, None, node.children)
    stack = [root]
    while stack:
        frame = stack[-1]
        if frame.next_index >= len(frame.children):
            stack.pop()
            if stack:
                parent = stack[-1].results
                if frame.data is not None:
                    parent.append(TreePath(frame.path, frame.data, frame.results or None))
                else:
                    parent.extend(frame.results)
            continue

        index = frame.next_index
        frame.next_index += 1
        child = frame.children[index]
        if not child.is_named or child.type in COMMENT_TYPES:
            continue
        child_path = _child_path(
            frame.path, frame.node.field_name_for_child(index), index, frame.seen_fields
        )
        signal = node_filter(child_path, child)
        if signal.proceed:
            stack.append(_Frame(child, child_path, signal.data, child.children))
        elif signal.data is not None:
            frame.results.append(TreePath(child_path, signal.data, None))
    return root.results
