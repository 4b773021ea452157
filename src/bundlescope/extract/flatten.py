"""Signature flattener: nested function tree to a flat, indexed list."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterator
from dataclasses import replace

from bundlescope.config.constants import ANONYMOUS_FN_NAME, FN_NAMES_DELIMITER
from bundlescope.extract.models import ExtractorVersion, FunctionSignature, TreePath
from bundlescope.extract.tokens import RETURN_ANONYMOUS_FUNCTION

_DUPLICATE_SUFFIX_RE = re.compile(r"#\d+$")


def fn_names_concat(prefix: str, name: str) -> str:
    return f"{prefix}{FN_NAMES_DELIMITER}{name}" if prefix else name


def fn_names_split(name: str) -> list[str]:
    return name.split(FN_NAMES_DELIMITER)


def local_fn_name(name: str) -> str:
    """Last path segment of a hierarchical name, sibling suffix removed."""
    return _DUPLICATE_SUFFIX_RE.sub("", fn_names_split(name)[-1])


def is_anonymous(name: str) -> bool:
    return local_fn_name(name) == ANONYMOUS_FN_NAME


def _unique_names(siblings: list[TreePath[FunctionSignature]]) -> list[str]:
    totals = Counter(item.data.name for item in siblings)
    seen: Counter[str] = Counter()
    names = []
    for item in siblings:
        name = item.data.name
        seen[name] += 1
        if totals[name] > 1 and seen[name] > 1:
            name = f"{name}#{seen[name]}"
        names.append(name)
    return names


def _collect(
    forest: list[TreePath[FunctionSignature]], prefix: str
) -> Iterator[FunctionSignature]:
    stack = [(prefix, zip(forest, _unique_names(forest)))]
    while stack:
        parent_name, siblings = stack[-1]
        entry = next(siblings, None)
        if entry is None:
            stack.pop()
            continue
        item, name = entry
        full_name = fn_names_concat(parent_name, name)
        yield replace(item.data, name=full_name)
        if item.children:
            stack.append((full_name, zip(item.children, _unique_names(item.children))))


def _is_trivial(fn: FunctionSignature) -> bool:
    tokens = fn.fn_statement_tokens
    return not tokens or (len(tokens) == 1 and tokens[0] == RETURN_ANONYMOUS_FUNCTION)


def flatten(
    forest: list[TreePath[FunctionSignature]],
    version: ExtractorVersion = ExtractorVersion.V1,
) -> list[FunctionSignature]:
    """Flatten the locator's output into the function signature.

    Names become ``:>>:``-joined ancestor paths; same-named siblings get a
    ``#2``, ``#3``... suffix in source order. The list is sorted by name and
    indexed ``0..n-1``.
    """
    functions = sorted(_collect(forest, ""), key=lambda fn: fn.name)
    if version.drops_trivial_functions:
        functions = [fn for fn in functions if not _is_trivial(fn)]
    return [replace(fn, index=index) for index, fn in enumerate(functions)]
