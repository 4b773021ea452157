"""bundlescope CLI."""

from pathlib import Path

import click

from bundlescope.cli.extract import extract_command
from bundlescope.cli.match import bundle_command, candidates_command, match_command
from bundlescope.config.loader import load_config
from bundlescope.core.errors import ConfigError
from bundlescope.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="bundlescope")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: .bundlescope/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config_path: Path | None) -> None:
    """bundlescope - identify JavaScript libraries inside app bundles."""
    try:
        config = load_config(config_path=config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        config.logging.level = "DEBUG"
    elif quiet:
        config.logging.level = "ERROR"
    configure_logging(config=config.logging)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(extract_command, name="extract")
cli.add_command(candidates_command, name="candidates")
cli.add_command(match_command, name="match")
cli.add_command(bundle_command, name="bundle")


if __name__ == "__main__":
    cli()
