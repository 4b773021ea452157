"""Tests for similarity strategies."""

from __future__ import annotations

import pytest

from bundlescope.config.constants import ANONYMOUS_FN_NAME
from bundlescope.core.errors import ErrorCode, MatchingError
from bundlescope.match.confidence import Confidence
from bundlescope.match.methods import (
    SIMILARITY_METHODS,
    best_matches,
    exclusive_matches,
    fn_names,
    fn_names_coverage,
    fn_names_st_tokens,
    fn_st_tokens,
    fn_st_tokens_exact,
    fn_st_tokens_exclusive,
    fn_st_types,
    get_similarity_method,
    lit_values,
)
from bundlescope.match.models import MatchedFunction


class TestFnStTokens:
    """Best-match token similarity."""

    def test_given_subset_tokens_when_compared_then_two_thirds(self, make_signature) -> None:
        """{X,Y} against {X,Y,Z} scores 2/3."""
        # Given
        unknown = make_signature([["X", "Y"]])
        lib = make_signature([["X", "Y", "Z"]])

        # When
        result = fn_st_tokens(unknown, lib)

        # Then
        assert result.similarity == Confidence(val=2 / 3, num=2, den=3)
        assert result.mapping == {0: MatchedFunction(index=0, prob=Confidence(2 / 3, 2, 3))}

    def test_given_unmatched_function_when_compared_then_counts_against(self, make_signature) -> None:
        """Unmatched unknown functions add their size to the denominator."""
        unknown = make_signature([["X", "Y"], ["Q"]])
        lib = make_signature([["X", "Y"]])

        result = fn_st_tokens(unknown, lib)

        assert result.similarity == Confidence(val=2 / 3, num=2, den=3)
        assert 1 not in result.mapping

    def test_given_tie_when_compared_then_lower_library_index(self, make_signature) -> None:
        """Equal scores go to the lower library index."""
        unknown = make_signature([["X"]])
        lib = make_signature([["X", "Z"], ["X", "W"]])

        result = fn_st_tokens(unknown, lib)

        assert result.mapping[0].index == 0

    def test_given_identical_signatures_when_compared_then_one(self, make_signature) -> None:
        """A signature matches itself exactly."""
        sig = make_signature([["A", "B"], ["C"]])

        assert fn_st_tokens(sig, sig).similarity.val == 1

    def test_given_empty_signatures_when_compared_then_zero(self, make_signature) -> None:
        """Nothing against nothing is 0."""
        assert fn_st_tokens(make_signature(), make_signature()).similarity == Confidence.empty()

    def test_given_literal_only_change_when_compared_then_unaffected(self, make_signature) -> None:
        """Literals do not take part in token similarity."""
        unknown = make_signature([["A"]], literals=["x"])
        lib = make_signature([["A"]], literals=["y"])

        assert fn_st_tokens(unknown, lib).similarity.val == 1


class TestVariants:
    """Exclusive, exact and statement-type variants."""

    def test_given_duplicate_unknowns_when_exclusive_then_one_claims(self, make_signature) -> None:
        """A library function is matched at most once."""
        # Given
        unknown = make_signature([["X", "Y"], ["X", "Y"]])
        lib = make_signature([["X", "Y"]])

        # When
        shared = fn_st_tokens(unknown, lib)
        exclusive = fn_st_tokens_exclusive(unknown, lib)

        # Then
        assert shared.similarity.val == 1
        assert exclusive.similarity == Confidence(val=0.5, num=2, den=4)
        assert list(exclusive.mapping) == [0]

    def test_given_partial_match_when_exact_then_ignored(self, make_signature) -> None:
        """Only perfect function matches count."""
        unknown = make_signature([["X", "Y"], ["A"]])
        lib = make_signature([["X", "Y"], ["A", "B"]])

        result = fn_st_tokens_exact(unknown, lib)

        assert result.similarity == Confidence(val=2 / 3, num=2, den=3)
        assert list(result.mapping) == [0]

    def test_given_same_types_different_tokens_when_types_then_match(self, make_signature) -> None:
        """Statement types ignore what the statements contain."""
        unknown = make_signature([["Statement:If[a]"]])
        lib = make_signature([["Statement:If[b]"]])

        assert fn_st_types(unknown, lib).similarity.val == 1
        assert fn_st_tokens(unknown, lib).similarity.val == 0


class TestMatchers:
    """best_matches() and exclusive_matches() directly."""

    def test_given_disjoint_sets_when_matched_then_no_entry(self) -> None:
        """Functions sharing nothing are left unmatched."""
        assert best_matches([frozenset({"a"})], [frozenset({"b"})]) == {}
        assert exclusive_matches([frozenset({"a"})], [frozenset({"b"})]) == {}

    def test_given_competing_pairs_when_exclusive_then_strongest_first(self) -> None:
        """The strongest pair is claimed before weaker ones."""
        unknown = [frozenset({"a", "b"}), frozenset({"a", "b", "c"})]
        lib = [frozenset({"a", "b", "c"})]

        mapping = exclusive_matches(unknown, lib)

        assert list(mapping) == [1]
        assert mapping[1].prob.val == 1


class TestSetOverlapMethods:
    """Literal and name based methods."""

    def test_given_literals_when_lit_values_then_jaccard(self, make_signature) -> None:
        """Literal similarity is Jaccard over the literal sets."""
        result = lit_values(make_signature(literals=["a", "b"]), make_signature(literals=["b", "c"]))

        assert result.similarity == Confidence(val=1 / 3, num=1, den=3)
        assert result.mapping is None

    def test_given_empty_literals_when_lit_values_then_zero(self, make_signature) -> None:
        """Empty literal sets give 0."""
        assert lit_values(make_signature(), make_signature()).similarity == Confidence.empty()

    def test_given_names_when_fn_names_then_jaccard(self, make_signature) -> None:
        """Name similarity is Jaccard over the name sets."""
        unknown = make_signature([[], []], names=["render", "update"])
        lib = make_signature([[], []], names=["render", "mount"])

        assert fn_names(unknown, lib).similarity == Confidence(val=1 / 3, num=1, den=3)
        assert fn_names_coverage(unknown, lib).similarity == Confidence(val=0.5, num=1, den=2)


class TestFnNamesStTokens:
    """Names for named functions, tokens for anonymous ones."""

    def test_given_matching_names_and_tokens_when_compared_then_one(self, make_signature) -> None:
        """Named by name, anonymous by tokens."""
        # Given
        unknown = make_signature([["A"], ["B", "C"]], names=["render", ANONYMOUS_FN_NAME])
        lib = make_signature([["Z"], ["B", "C"]], names=["render", ANONYMOUS_FN_NAME])

        # When
        result = fn_names_st_tokens(unknown, lib)

        # Then
        assert result.similarity.val == 1
        assert result.mapping[0].index == 0
        assert result.mapping[1].index == 1

    def test_given_unmatched_anonymous_when_compared_then_penalized(self, make_signature) -> None:
        """An anonymous function without a token match lowers the score."""
        unknown = make_signature([["A"], ["Q"]], names=["render", ANONYMOUS_FN_NAME])
        lib = make_signature([["A"], ["B"]], names=["render", ANONYMOUS_FN_NAME])

        result = fn_names_st_tokens(unknown, lib)

        assert result.similarity == Confidence(val=1 / 3, num=1, den=3)
        assert 1 not in result.mapping


class TestRegistry:
    """Method lookup and input validation."""

    def test_given_known_name_when_looked_up_then_function(self) -> None:
        """Registered names resolve."""
        assert get_similarity_method("fn_st_tokens") is fn_st_tokens

    def test_given_unknown_name_when_looked_up_then_raises(self) -> None:
        """Unknown names raise MatchingError."""
        with pytest.raises(MatchingError) as exc_info:
            get_similarity_method("nope")

        assert exc_info.value.code == ErrorCode.MATCH_UNKNOWN_METHOD
        assert "fn_st_tokens" in exc_info.value.details["available"]

    @pytest.mark.parametrize("method", sorted(SIMILARITY_METHODS))
    def test_given_non_signature_when_compared_then_raises(self, method: str, make_signature) -> None:
        """Every method rejects inputs that are not signatures."""
        with pytest.raises(MatchingError) as exc_info:
            SIMILARITY_METHODS[method]({"functionSignature": []}, make_signature())

        assert exc_info.value.code == ErrorCode.MATCH_INVALID_SIGNATURE

    @pytest.mark.parametrize("method", sorted(SIMILARITY_METHODS))
    def test_given_self_comparison_when_scored_then_one(self, method: str, make_signature) -> None:
        """Every method scores a signature against itself as 1."""
        sig = make_signature([["A", "B"], ["C"]], literals=["lit", 42], names=["alpha", "beta"])

        result = SIMILARITY_METHODS[method](sig, sig)

        assert result.similarity.val == 1
