"""Candidate filter: shortlist libraries sharing literals with an unknown unit.

Literals survive minification untouched, so a library that shares none of
an unknown unit's literals is very unlikely to be inside it. The filter
is sound for recall: any library with at least one shared literal is kept.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping

import structlog

from bundlescope.extract.models import LiteralValue, Signature
from bundlescope.match.confidence import Confidence, coverage
from bundlescope.match.models import CandidateLib, LibrarySignature

log = structlog.get_logger(__name__)

LiteralKey = tuple[bool, LiteralValue]


def _key(value: LiteralValue) -> LiteralKey:
    # Keeps the string "1" and the number 1 apart.
    return isinstance(value, str), value


class LiteralIndex:
    """Inverted index from literal value to the libraries containing it."""

    def __init__(self) -> None:
        self._postings: dict[LiteralKey, set[str]] = defaultdict(set)
        self._literals: dict[str, set[LiteralKey]] = defaultdict(set)

    @classmethod
    def from_corpus(cls, corpus: Iterable[LibrarySignature]) -> LiteralIndex:
        index = cls()
        for lib in corpus:
            index.add(lib.name, lib.signature.literal_signature)
        return index

    def add(self, library: str, literals: Iterable[LiteralValue]) -> None:
        """Index a library's literals; versions of one library accumulate."""
        keys = self._literals[library]
        for value in literals:
            key = _key(value)
            keys.add(key)
            self._postings[key].add(library)

    @property
    def libraries(self) -> set[str]:
        return set(self._literals)

    def literals_of(self, library: str) -> set[LiteralKey]:
        return set(self._literals.get(library, ()))

    def candidates(self, literals: Iterable[LiteralValue]) -> set[str]:
        """Libraries sharing at least one literal.

        An empty literal signature gives no evidence either way, so every
        indexed library is returned.
        """
        keys = {_key(value) for value in literals}
        if not keys:
            return self.libraries
        found: set[str] = set()
        for key in keys:
            found.update(self._postings.get(key, ()))
        return found

    def __len__(self) -> int:
        return len(self._literals)


def candidates_for_files(
    signatures: Mapping[str, Signature], index: LiteralIndex
) -> dict[str, list[str]]:
    """Candidate libraries per unknown file, sorted by name."""
    result: dict[str, list[str]] = {}
    for file_id, signature in signatures.items():
        found = index.candidates(signature.literal_signature)
        log.debug("candidates.file", file=file_id, candidates=len(found))
        result[file_id] = sorted(found)
    return result


def rank_candidates(
    literals: Iterable[LiteralValue],
    index: LiteralIndex,
    limit: int | None = None,
) -> list[CandidateLib]:
    """Order candidates by how much of the unknown literal set they explain.

    A library containing every unknown literal scores 1. Ties are broken by
    library name.
    """
    values = list(literals)
    keys = {_key(value) for value in values}
    ranked = [
        CandidateLib(
            name=name,
            confidence=coverage(keys, index.literals_of(name)) if keys else Confidence.empty(),
        )
        for name in index.candidates(values)
    ]
    ranked.sort(key=lambda candidate: (-candidate.confidence.val, candidate.name))
    return ranked[:limit] if limit is not None else ranked
