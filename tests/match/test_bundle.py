"""Tests for two-pass bundle matching."""

from __future__ import annotations

from bundlescope.match.bundle import match_bundle
from bundlescope.match.confidence import Confidence
from bundlescope.match.models import CandidateLib


def _candidate(name: str, val: float) -> CandidateLib:
    return CandidateLib(name=name, confidence=Confidence(val=val, num=0, den=1))


class TestMatchBundle:
    """match_bundle() passes."""

    def test_given_exact_version_when_matched_then_ranked_and_claims_functions(
        self, make_library, make_signature
    ) -> None:
        """An exact version match goes to rank and removes its functions."""
        # Given
        unknown = make_signature([["A", "B"], ["C", "D"]])
        corpus = {
            "libx": [
                make_library("libx", "1.0", functions=[["A", "B"]]),
                make_library("libx", "2.0", functions=[["A", "B"], ["C", "D"]]),
            ],
            "liby": [make_library("liby", "1.0", functions=[["C", "D"]])],
        }
        candidates = [_candidate("liby", 0.5), _candidate("libx", 1.0)]

        # When
        result = match_bundle(unknown, corpus, candidates)

        # Then
        assert [(entry.candidate.name, entry.position) for entry in result.rank] == [("libx", 1)]
        assert [m.version for m in result.rank[0].matches] == ["2.0", "1.0"]
        assert result.secondary == []
        assert result.remaining == []

    def test_given_partial_matches_when_matched_then_secondary_in_turn(
        self, make_library, make_signature
    ) -> None:
        """Leftover candidates claim what remains in the second pass."""
        # Given
        unknown = make_signature([["A", "B"], ["C", "D"]])
        corpus = {
            "libx": [make_library("libx", "1.0", functions=[["A", "B"]])],
            "liby": [make_library("liby", "1.0", functions=[["C", "D"]])],
        }
        candidates = [_candidate("libx", 0.8), _candidate("liby", 0.6)]

        # When
        result = match_bundle(unknown, corpus, candidates)

        # Then
        assert result.rank == []
        assert [entry.candidate.name for entry in result.secondary] == ["libx", "liby"]
        liby_match = result.secondary[1].matches[0]
        assert liby_match.similarity.val == 1
        assert list(liby_match.mapping) == [1]
        assert liby_match.mapping[1].index == 0
        assert result.remaining == []

    def test_given_unclaimed_function_when_matched_then_remaining(
        self, make_library, make_signature
    ) -> None:
        """Functions no library claims are reported by index."""
        unknown = make_signature([["A", "B"], ["Z"]])
        corpus = {"libx": [make_library("libx", "1.0", functions=[["A", "B"]])]}

        result = match_bundle(unknown, corpus, [_candidate("libx", 1.0)])

        assert result.secondary[0].matches[0].similarity == Confidence(val=2 / 3, num=2, den=3)
        assert result.remaining == [1]

    def test_given_candidate_missing_from_corpus_when_matched_then_skipped(
        self, make_signature
    ) -> None:
        """Candidates without versions produce nothing."""
        result = match_bundle(make_signature([["A"]]), {}, [_candidate("ghost", 1.0)])

        assert result.rank == []
        assert result.secondary == []
        assert result.remaining == [0]

    def test_given_many_versions_when_matched_then_capped(self, make_library, make_signature) -> None:
        """Only the best top_versions versions are kept."""
        unknown = make_signature([["A", "B", "C"]])
        corpus = {
            "libx": [
                make_library("libx", "1.0", functions=[["A"]]),
                make_library("libx", "1.1", functions=[["A", "B"]]),
                make_library("libx", "1.2", functions=[["A", "C"]]),
            ]
        }

        result = match_bundle(unknown, corpus, [_candidate("libx", 1.0)], top_versions=2)

        assert [m.version for m in result.secondary[0].matches] == ["1.1", "1.2"]

    def test_given_result_when_serialized_then_candidate_fields_merged(
        self, make_library, make_signature
    ) -> None:
        """Serialized entries carry the candidate, its position and the matches."""
        unknown = make_signature([["A"]])
        corpus = {"libx": [make_library("libx", "1.0", functions=[["A"]])]}

        data = match_bundle(unknown, corpus, [_candidate("libx", 1.0)]).to_dict()

        assert data["rank"][0]["name"] == "libx"
        assert data["rank"][0]["top"] == 1
        assert data["rank"][0]["matches"][0]["version"] == "1.0"
        assert data["secondary"] == []
        assert data["remaining"] == []
