"""Corpus ranking: score every candidate library against one unknown signature."""

from __future__ import annotations

import heapq
from collections.abc import Collection, Iterable

import structlog

from bundlescope.config.constants import RANK_LIMIT_DEFAULT
from bundlescope.extract.models import Signature
from bundlescope.match.methods import DEFAULT_METHOD, get_similarity_method
from bundlescope.match.models import LibraryMatch, LibrarySignature

log = structlog.get_logger(__name__)


def ranking_key(match: LibraryMatch) -> tuple[float, str, str]:
    return -match.similarity.val, match.name, match.version


def rank_libraries(
    unknown: Signature,
    corpus: Iterable[LibrarySignature],
    method: str = DEFAULT_METHOD,
    limit: int = RANK_LIMIT_DEFAULT,
    candidates: Collection[str] | None = None,
) -> list[LibraryMatch]:
    """Rank corpus entries by similarity to ``unknown``.

    Args:
        unknown: Signature of the unit being identified.
        corpus: Library signatures to compare against.
        method: Name of a registered similarity method.
        limit: Maximum number of results.
        candidates: Library names to restrict the comparison to. ``None``
            compares against the whole corpus.

    Returns:
        Matches sorted by descending similarity, then library name, then
        version, at most ``limit`` long.

    Raises:
        MatchingError: If ``method`` is not registered.
    """
    similarity = get_similarity_method(method)
    matches: list[LibraryMatch] = []
    skipped = 0
    for lib in corpus:
        if candidates is not None and lib.name not in candidates:
            skipped += 1
            continue
        result = similarity(unknown, lib.signature)
        matches.append(
            LibraryMatch(
                name=lib.name,
                version=lib.version,
                file=lib.file,
                similarity=result.similarity,
                mapping=result.mapping,
            )
        )

    top = heapq.nsmallest(limit, matches, key=ranking_key)
    log.debug(
        "ranking.done",
        method=method,
        compared=len(matches),
        skipped=skipped,
        top=top[0].similarity.val if top else None,
    )
    return top
