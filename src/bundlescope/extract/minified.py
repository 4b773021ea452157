"""Heuristics telling minified sources and signatures apart from readable ones."""

from __future__ import annotations

from collections.abc import Sequence

from bundlescope.extract.flatten import is_anonymous, local_fn_name
from bundlescope.extract.models import FunctionSignature, Signature

LONG_LINE_LENGTH = 130
LONG_FN_NAME_LENGTH = 4
MOST_CONTENT_IN_LONG_LINES = 0.9
LOTS_OF_SHORT_AND_ANONYMOUS_FUNCTIONS = 0.9


def _line_lengths(source: str) -> list[int]:
    return [len(line) for line in source.split("\n")]


def average_line_length(source: str) -> int:
    lengths = _line_lengths(source)
    return sum(lengths) // len(lengths)


def content_in_long_lines_ratio(source: str) -> float:
    """Share of characters sitting on lines longer than ``LONG_LINE_LENGTH``."""
    lengths = _line_lengths(source)
    total = sum(lengths)
    if total == 0:
        return 0.0
    return sum(length for length in lengths if length > LONG_LINE_LENGTH) / total


def is_src_minified(source: str) -> bool:
    return (
        average_line_length(source) > LONG_LINE_LENGTH
        or content_in_long_lines_ratio(source) > MOST_CONTENT_IN_LONG_LINES
    )


def short_or_anonymous_fn_ratio(signature: Signature | Sequence[FunctionSignature]) -> float:
    functions = signature.function_signature if isinstance(signature, Signature) else signature
    if not functions:
        return 0.0
    short_or_anonymous = sum(
        1
        for fn in functions
        if is_anonymous(fn.name) or len(local_fn_name(fn.name)) < LONG_FN_NAME_LENGTH
    )
    return short_or_anonymous / len(functions)


def is_sig_minified(signature: Signature | Sequence[FunctionSignature]) -> bool:
    return short_or_anonymous_fn_ratio(signature) > LOTS_OF_SHORT_AND_ANONYMOUS_FUNCTIONS
