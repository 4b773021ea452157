"""Structural signature extraction."""

from bundlescope.extract.flatten import flatten, fn_names_concat, fn_names_split, local_fn_name
from bundlescope.extract.models import (
    ExtractOptions,
    ExtractorVersion,
    FunctionSignature,
    ModuleSignature,
    Signature,
    TreePath,
    WalkSignal,
)
from bundlescope.extract.parser import JavaScriptParser, ParseResult
from bundlescope.extract.signature import (
    extract_react_native_structure,
    extract_signature,
    extract_structure,
)
from bundlescope.extract.walker import walk

__all__ = [
    "ExtractOptions",
    "ExtractorVersion",
    "FunctionSignature",
    "JavaScriptParser",
    "ModuleSignature",
    "ParseResult",
    "Signature",
    "TreePath",
    "WalkSignal",
    "extract_react_native_structure",
    "extract_signature",
    "extract_structure",
    "flatten",
    "fn_names_concat",
    "fn_names_split",
    "local_fn_name",
    "walk",
]
