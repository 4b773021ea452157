"""Shared helpers for CLI commands: JSON input files and output."""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Any

import click

from bundlescope.extract.models import Signature
from bundlescope.match.models import LibrarySignature


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}") from e


def load_signature(path: Path) -> Signature:
    """Read a signature file written by ``bundlescope extract``."""
    data = read_json(path)
    if not isinstance(data, dict) or "functionSignature" not in data:
        raise click.ClickException(f"{path} does not contain a signature")
    return Signature.from_dict(data)


def load_corpus(path: Path) -> list[LibrarySignature]:
    """Read a corpus file: a JSON list of ``{name, version, file?, signature}``."""
    data = read_json(path)
    if not isinstance(data, list):
        raise click.ClickException(f"{path} must contain a JSON list of library signatures")
    try:
        return [LibrarySignature.from_dict(entry) for entry in data]
    except (KeyError, TypeError) as e:
        raise click.ClickException(f"{path} has a malformed corpus entry: {e}") from e


def group_by_name(corpus: list[LibrarySignature]) -> dict[str, list[LibrarySignature]]:
    grouped: dict[str, list[LibrarySignature]] = defaultdict(list)
    for lib in corpus:
        grouped[lib.name].append(lib)
    return dict(grouped)


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
