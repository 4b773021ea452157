"""Candidate filtering and similarity matching."""

from bundlescope.match.bundle import match_bundle
from bundlescope.match.candidates import LiteralIndex, candidates_for_files, rank_candidates
from bundlescope.match.confidence import Confidence, coverage, jaccard
from bundlescope.match.methods import (
    DEFAULT_METHOD,
    SIMILARITY_METHODS,
    get_similarity_method,
)
from bundlescope.match.models import (
    BundleMatch,
    CandidateLib,
    CandidateMatches,
    LibraryMatch,
    LibrarySignature,
    MatchedFunction,
    SimilarityResult,
)
from bundlescope.match.ranking import rank_libraries

__all__ = [
    "BundleMatch",
    "CandidateLib",
    "CandidateMatches",
    "Confidence",
    "DEFAULT_METHOD",
    "LibraryMatch",
    "LibrarySignature",
    "LiteralIndex",
    "MatchedFunction",
    "SIMILARITY_METHODS",
    "SimilarityResult",
    "candidates_for_files",
    "coverage",
    "get_similarity_method",
    "jaccard",
    "match_bundle",
    "rank_candidates",
    "rank_libraries",
]
