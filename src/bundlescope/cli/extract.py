"""bundlescope extract command - fingerprint a JavaScript file."""

from pathlib import Path

import click
import structlog

from bundlescope.cli.utils import echo_json
from bundlescope.core.errors import BundleScopeError
from bundlescope.core.logging import clear_unit_id, set_unit_id
from bundlescope.extract.minified import is_sig_minified, is_src_minified
from bundlescope.extract.models import ExtractOptions, ExtractorVersion
from bundlescope.extract.parser import JavaScriptParser
from bundlescope.extract.signature import extract_react_native_structure, extract_structure

log = structlog.get_logger(__name__)


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--extractor-version",
    type=click.Choice([version.value for version in ExtractorVersion]),
    default=None,
    help="Tokenizer mode (default: from config)",
)
@click.option("--react-native", is_flag=True, help="Treat SOURCE as a React Native bundle")
@click.option("--lenient", is_flag=True, help="Extract even when the source has syntax errors")
@click.pass_context
def extract_command(
    ctx: click.Context,
    source: Path,
    extractor_version: str | None,
    react_native: bool,
    lenient: bool,
) -> None:
    """Print the structural signature of SOURCE as JSON."""
    config = ctx.obj["config"]
    version = ExtractorVersion(extractor_version or config.extraction.extractor_version)
    options = ExtractOptions(version=version)
    parser = JavaScriptParser(strict=config.extraction.strict_parse and not lenient)

    content = source.read_bytes()
    set_unit_id(source.name)
    try:
        if react_native:
            modules = extract_react_native_structure(content, options, parser)
            echo_json([module.to_dict() for module in modules])
            return
        signature = extract_structure(content, options, parser)
    except BundleScopeError as e:
        log.error("extract.failed", source=str(source), error=e.error_name)
        raise click.ClickException(str(e)) from e
    finally:
        clear_unit_id()

    minified_source = is_src_minified(content.decode("utf-8", errors="replace"))
    minified_names = is_sig_minified(signature)
    if minified_source or minified_names:
        log.info(
            "extract.minified",
            source=str(source),
            by_layout=minified_source,
            by_function_names=minified_names,
        )
    echo_json(signature.to_dict())
