"""Signature assembler: one parsed unit in, one two-part signature out."""

from __future__ import annotations

import structlog

from bundlescope.core.errors import ExtractionError
from bundlescope.extract.bundles import module_factory_filter
from bundlescope.extract.flatten import flatten
from bundlescope.extract.functions import FunctionLocator
from bundlescope.extract.literals import collapse_literals, literal_filter
from bundlescope.extract.models import ExtractOptions, ModuleSignature, Signature
from bundlescope.extract.nodes import Node
from bundlescope.extract.parser import JavaScriptParser
from bundlescope.extract.walker import walk

log = structlog.get_logger(__name__)


def extract_signature(root: Node, options: ExtractOptions | None = None) -> Signature:
    """Extract the function and literal signatures below ``root``.

    ``root`` itself is not fingerprinted, only its descendants; pass the
    program node for a whole file or a factory node for one module.
    """
    if not hasattr(root, "named_children"):
        raise ExtractionError.unsupported_input(type(root).__name__)
    options = options or ExtractOptions()

    function_signature = flatten(walk(root, FunctionLocator(options)), options.version)
    literal_signature = collapse_literals(walk(root, literal_filter))

    log.debug(
        "signature.extracted",
        functions=len(function_signature),
        literals=len(literal_signature),
        version=options.version.value,
    )
    return Signature(function_signature=function_signature, literal_signature=literal_signature)


def extract_structure(
    content: str | bytes,
    options: ExtractOptions | None = None,
    parser: JavaScriptParser | None = None,
) -> Signature:
    """Parse ``content`` and extract its signature.

    Raises:
        ParseError: If the source has syntax errors and the parser is strict.
    """
    result = (parser or JavaScriptParser()).parse(content)
    return extract_signature(result.root_node, options)


def extract_react_native_structure(
    content: str | bytes,
    options: ExtractOptions | None = None,
    parser: JavaScriptParser | None = None,
) -> list[ModuleSignature]:
    """Parse a React Native bundle and extract one signature per module."""
    result = (parser or JavaScriptParser()).parse(content)
    modules = [
        ModuleSignature(module_id=item.data.module_id, signature=extract_signature(item.data.factory, options))
        for item in walk(result.root_node, module_factory_filter)
    ]
    log.debug("signature.react_native_modules", modules=len(modules))
    return modules
