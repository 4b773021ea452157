"""bundlescope candidates / match / bundle commands."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from bundlescope.cli.utils import echo_json, group_by_name, load_corpus, load_signature
from bundlescope.core.errors import MatchingError
from bundlescope.match.bundle import match_bundle
from bundlescope.match.candidates import LiteralIndex, rank_candidates
from bundlescope.match.methods import SIMILARITY_METHODS
from bundlescope.match.models import LibraryMatch
from bundlescope.match.ranking import rank_libraries

_signature_arg = click.argument(
    "signature", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_corpus_arg = click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
_method_opt = click.option(
    "--method",
    type=click.Choice(sorted(SIMILARITY_METHODS)),
    default=None,
    help="Similarity method (default: from config)",
)


def _make_ranking_table(matches: list[LibraryMatch]) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Library")
    table.add_column("Version")
    table.add_column("Similarity", justify="right")
    table.add_column("Matched", justify="right", style="dim")
    for position, match in enumerate(matches, start=1):
        similarity = match.similarity
        table.add_row(
            str(position),
            match.name,
            match.version,
            f"{similarity.val:.3f}",
            f"{similarity.num}/{similarity.den}",
        )
    return table


@click.command()
@_signature_arg
@_corpus_arg
@click.option("--limit", type=int, default=None, help="Max candidates to print")
def candidates_command(signature: Path, corpus: Path, limit: int | None) -> None:
    """List libraries in CORPUS sharing literals with SIGNATURE."""
    unknown = load_signature(signature)
    index = LiteralIndex.from_corpus(load_corpus(corpus))
    ranked = rank_candidates(unknown.literal_signature, index, limit=limit)
    echo_json([candidate.to_dict() for candidate in ranked])


@click.command()
@_signature_arg
@_corpus_arg
@_method_opt
@click.option("--limit", type=int, default=None, help="Max libraries to print (default: from config)")
@click.option("--all-libraries", is_flag=True, help="Skip the literal candidate filter")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def match_command(
    ctx: click.Context,
    signature: Path,
    corpus: Path,
    method: str | None,
    limit: int | None,
    all_libraries: bool,
    as_json: bool,
) -> None:
    """Rank the libraries in CORPUS by similarity to SIGNATURE."""
    config = ctx.obj["config"].matching
    unknown = load_signature(signature)
    libraries = load_corpus(corpus)

    candidates = None
    if config.use_candidates and not all_libraries:
        candidates = LiteralIndex.from_corpus(libraries).candidates(unknown.literal_signature)

    try:
        matches = rank_libraries(
            unknown,
            libraries,
            method=method or config.method,
            limit=limit or config.limit,
            candidates=candidates,
        )
    except MatchingError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        echo_json([match.to_dict() for match in matches])
        return
    Console().print(_make_ranking_table(matches))


@click.command()
@_signature_arg
@_corpus_arg
@_method_opt
@click.pass_context
def bundle_command(ctx: click.Context, signature: Path, corpus: Path, method: str | None) -> None:
    """Identify every CORPUS library inside the bundle SIGNATURE."""
    config = ctx.obj["config"].matching
    unknown = load_signature(signature)
    libraries = load_corpus(corpus)
    ranked = rank_candidates(unknown.literal_signature, LiteralIndex.from_corpus(libraries))
    try:
        result = match_bundle(
            unknown,
            group_by_name(libraries),
            ranked,
            method=method or config.method,
            top_versions=config.top_versions,
        )
    except MatchingError as e:
        raise click.ClickException(str(e)) from e
    echo_json(result.to_dict())
