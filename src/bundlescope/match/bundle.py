"""Two-pass matching of a whole bundle against its candidate libraries.

A bundle concatenates many libraries, so once a library is identified its
functions are taken out of the unknown set before the next candidate is
tried:

1. candidates are visited best-first; a candidate whose best version
   matches exactly claims the functions it mapped
2. the candidates left over are visited again against what remains, and
   any positive best version claims its functions as a secondary match
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import structlog

from bundlescope.config.constants import TOP_VERSIONS_DEFAULT
from bundlescope.extract.models import FunctionSignature, Signature
from bundlescope.match.methods import DEFAULT_METHOD, SimilarityMethod, get_similarity_method
from bundlescope.match.models import (
    BundleMatch,
    CandidateLib,
    CandidateMatches,
    LibraryMatch,
    LibrarySignature,
)
from bundlescope.match.ranking import ranking_key

log = structlog.get_logger(__name__)


def _match_versions(
    similarity: SimilarityMethod,
    unknown: Signature,
    remaining: list[FunctionSignature],
    versions: Sequence[LibrarySignature],
    top_versions: int,
    stop_on_exact: bool,
) -> list[LibraryMatch]:
    partial = Signature(function_signature=remaining, literal_signature=unknown.literal_signature)
    matches: list[LibraryMatch] = []
    for lib in sorted(versions, key=lambda lib: lib.version):
        result = similarity(partial, lib.signature)
        if result.similarity.val <= 0:
            continue
        mapping = None
        if result.mapping is not None:
            # Positions in ``remaining`` back to indices in the full signature.
            mapping = {remaining[position].index: match for position, match in result.mapping.items()}
        matches.append(
            LibraryMatch(
                name=lib.name,
                version=lib.version,
                file=lib.file,
                similarity=result.similarity,
                mapping=mapping,
            )
        )
        if stop_on_exact and result.similarity.val == 1:
            break
    matches.sort(key=ranking_key)
    return matches[:top_versions]


def _unclaimed(remaining: list[FunctionSignature], top: LibraryMatch) -> list[FunctionSignature]:
    if not top.mapping:
        return remaining
    return [fn for fn in remaining if fn.index not in top.mapping]


def match_bundle(
    unknown: Signature,
    corpus: Mapping[str, Sequence[LibrarySignature]],
    candidates: Sequence[CandidateLib],
    method: str = DEFAULT_METHOD,
    top_versions: int = TOP_VERSIONS_DEFAULT,
) -> BundleMatch:
    """Identify the libraries inside a bundle.

    Args:
        unknown: Signature of the whole bundle.
        corpus: Library versions keyed by library name.
        candidates: Short-listed libraries, e.g. from ``rank_candidates``.
        method: Name of a similarity method producing a function mapping.
        top_versions: Versions kept per candidate.

    Raises:
        MatchingError: If ``method`` is not registered.
    """
    similarity = get_similarity_method(method)
    ordered = sorted(candidates, key=lambda candidate: (-candidate.confidence.val, candidate.name))
    remaining = list(unknown.function_signature)

    rank: list[CandidateMatches] = []
    later: list[tuple[int, CandidateLib]] = []
    for position, candidate in enumerate(ordered, start=1):
        matches = _match_versions(
            similarity, unknown, remaining, corpus.get(candidate.name, ()), top_versions, True
        )
        if matches and matches[0].similarity.val == 1:
            rank.append(CandidateMatches(candidate=candidate, position=position, matches=matches))
            remaining = _unclaimed(remaining, matches[0])
        else:
            later.append((position, candidate))

    log.debug(
        "bundle.first_pass",
        matched=len(rank),
        deferred=len(later),
        functions_left=len(remaining),
    )

    secondary: list[CandidateMatches] = []
    for position, candidate in later:
        matches = _match_versions(
            similarity, unknown, remaining, corpus.get(candidate.name, ()), top_versions, False
        )
        if matches:
            secondary.append(CandidateMatches(candidate=candidate, position=position, matches=matches))
            remaining = _unclaimed(remaining, matches[0])

    log.debug(
        "bundle.second_pass",
        matched=len(secondary),
        functions_left=len(remaining),
    )
    return BundleMatch(rank=rank, secondary=secondary, remaining=[fn.index for fn in remaining])
