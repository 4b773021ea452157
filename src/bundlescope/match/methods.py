"""Similarity strategies comparing an unknown signature to a library signature.

Two families:

- set overlap (``lit_values``, ``fn_names``, ``fn_names_coverage``): one
  Jaccard-style value over whole-signature value sets
- per-function (``fn_st_tokens`` and variants, ``fn_st_types``,
  ``fn_names_st_tokens``): every unknown function is paired with its best
  library function, and the pairs are aggregated as
  ``sum(num) / sum(den)`` over the unknown functions

Every strategy has the signature ``(unknown, lib) -> SimilarityResult``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Sequence

from bundlescope.core.errors import MatchingError
from bundlescope.extract.flatten import is_anonymous
from bundlescope.extract.models import FunctionSignature, Signature
from bundlescope.match.confidence import Confidence, coverage, jaccard
from bundlescope.match.models import MatchedFunction, MatchMap, SimilarityResult

SimilarityMethod = Callable[[Signature, Signature], SimilarityResult]
FeatureGetter = Callable[[FunctionSignature], Sequence[str]]

DEFAULT_METHOD = "fn_st_tokens"


def _validated(signature: Signature) -> Signature:
    if not isinstance(signature, Signature):
        raise MatchingError.invalid_signature(
            f"expected Signature, got {type(signature).__name__}"
        )
    return signature


def _functions(signature: Signature) -> list[FunctionSignature]:
    return _validated(signature).function_signature


def _tokens(fn: FunctionSignature) -> Sequence[str]:
    return fn.fn_statement_tokens


def _types(fn: FunctionSignature) -> Sequence[str]:
    return fn.fn_statement_types


def _feature_sets(functions: Sequence[FunctionSignature], feature: FeatureGetter) -> list[frozenset[str]]:
    return [frozenset(feature(fn)) for fn in functions]


def _scored_pairs(
    unknown_sets: list[frozenset[str]], lib_sets: list[frozenset[str]]
) -> dict[int, list[tuple[int, Confidence]]]:
    """Positive pairwise scores, per unknown function, in library index order.

    An inverted index from feature to library functions keeps the work
    proportional to the pairs that actually share something.
    """
    postings: dict[str, list[int]] = defaultdict(list)
    for lib_index, features in enumerate(lib_sets):
        for feature in features:
            postings[feature].append(lib_index)

    scored: dict[int, list[tuple[int, Confidence]]] = {}
    for unknown_index, features in enumerate(unknown_sets):
        sharing: set[int] = set()
        for feature in features:
            sharing.update(postings.get(feature, ()))
        scored[unknown_index] = [
            (lib_index, jaccard(features, lib_sets[lib_index])) for lib_index in sorted(sharing)
        ]
    return scored


def best_matches(unknown_sets: list[frozenset[str]], lib_sets: list[frozenset[str]]) -> MatchMap:
    """Best library function per unknown function; ties go to the lower index."""
    mapping: MatchMap = {}
    for unknown_index, pairs in _scored_pairs(unknown_sets, lib_sets).items():
        best: MatchedFunction | None = None
        for lib_index, prob in pairs:
            if best is None or prob.val > best.prob.val:
                best = MatchedFunction(index=lib_index, prob=prob)
        if best is not None:
            mapping[unknown_index] = best
    return mapping


def exclusive_matches(unknown_sets: list[frozenset[str]], lib_sets: list[frozenset[str]]) -> MatchMap:
    """One-to-one pairing, strongest pairs claimed first."""
    candidates = [
        (prob, unknown_index, lib_index)
        for unknown_index, pairs in _scored_pairs(unknown_sets, lib_sets).items()
        for lib_index, prob in pairs
    ]
    candidates.sort(key=lambda item: (-item[0].val, item[1], item[2]))

    mapping: MatchMap = {}
    claimed: set[int] = set()
    for prob, unknown_index, lib_index in candidates:
        if unknown_index in mapping or lib_index in claimed:
            continue
        mapping[unknown_index] = MatchedFunction(index=lib_index, prob=prob)
        claimed.add(lib_index)
    return mapping


def aggregate(unknown_sets: list[frozenset[str]], mapping: MatchMap) -> Confidence:
    """Sum the matched parts; an unmatched function counts as ``0 / |features|``."""
    parts = []
    for unknown_index, features in enumerate(unknown_sets):
        match = mapping.get(unknown_index)
        parts.append((match.prob.num, match.prob.den) if match else (0, len(features)))
    return Confidence.aggregate(parts)


def _per_function(
    unknown: Signature,
    lib: Signature,
    feature: FeatureGetter,
    matcher: Callable[[list[frozenset[str]], list[frozenset[str]]], MatchMap],
    exact_only: bool = False,
) -> SimilarityResult:
    unknown_sets = _feature_sets(_functions(unknown), feature)
    lib_sets = _feature_sets(_functions(lib), feature)
    mapping = matcher(unknown_sets, lib_sets)
    if exact_only:
        mapping = {index: match for index, match in mapping.items() if match.prob.val == 1}
    return SimilarityResult(similarity=aggregate(unknown_sets, mapping), mapping=mapping)


def fn_st_tokens(unknown: Signature, lib: Signature) -> SimilarityResult:
    return _per_function(unknown, lib, _tokens, best_matches)


def fn_st_tokens_exclusive(unknown: Signature, lib: Signature) -> SimilarityResult:
    return _per_function(unknown, lib, _tokens, exclusive_matches)


def fn_st_tokens_exact(unknown: Signature, lib: Signature) -> SimilarityResult:
    return _per_function(unknown, lib, _tokens, best_matches, exact_only=True)


def fn_st_types(unknown: Signature, lib: Signature) -> SimilarityResult:
    return _per_function(unknown, lib, _types, exclusive_matches)


def lit_values(unknown: Signature, lib: Signature) -> SimilarityResult:
    return SimilarityResult(
        similarity=jaccard(_validated(unknown).literal_signature, _validated(lib).literal_signature)
    )


def fn_names(unknown: Signature, lib: Signature) -> SimilarityResult:
    unknown_names = [fn.name for fn in _functions(unknown)]
    lib_names = [fn.name for fn in _functions(lib)]
    return SimilarityResult(similarity=jaccard(unknown_names, lib_names))


def fn_names_coverage(unknown: Signature, lib: Signature) -> SimilarityResult:
    unknown_names = [fn.name for fn in _functions(unknown)]
    lib_names = [fn.name for fn in _functions(lib)]
    return SimilarityResult(similarity=coverage(unknown_names, lib_names))


def fn_names_st_tokens(unknown: Signature, lib: Signature) -> SimilarityResult:
    """Named functions compare by name, anonymous ones by their tokens."""
    unknown_fns = _functions(unknown)
    lib_fns = _functions(lib)

    unknown_anon = [i for i, fn in enumerate(unknown_fns) if is_anonymous(fn.name)]
    lib_anon = [i for i, fn in enumerate(lib_fns) if is_anonymous(fn.name)]
    anon_mapping = exclusive_matches(
        _feature_sets([unknown_fns[i] for i in unknown_anon], _tokens),
        _feature_sets([lib_fns[i] for i in lib_anon], _tokens),
    )

    lib_named = {fn.name: i for i, fn in enumerate(lib_fns) if not is_anonymous(fn.name)}
    mapping: MatchMap = {}
    unknown_keys: set[object] = set()
    for position, unknown_index in enumerate(unknown_anon):
        match = anon_mapping.get(position)
        if match is None:
            unknown_keys.add(("unmatched", unknown_index))
            continue
        lib_index = lib_anon[match.index]
        unknown_keys.add(("anonymous", lib_index))
        mapping[unknown_index] = MatchedFunction(index=lib_index, prob=match.prob)
    for unknown_index, fn in enumerate(unknown_fns):
        if is_anonymous(fn.name):
            continue
        unknown_keys.add(fn.name)
        if fn.name in lib_named:
            mapping[unknown_index] = MatchedFunction(index=lib_named[fn.name], prob=Confidence.of(1, 1))

    lib_keys: set[object] = set(lib_named)
    lib_keys.update(("anonymous", lib_index) for lib_index in lib_anon)
    return SimilarityResult(similarity=jaccard(unknown_keys, lib_keys), mapping=mapping)


SIMILARITY_METHODS: dict[str, SimilarityMethod] = {
    "fn_st_tokens": fn_st_tokens,
    "fn_st_tokens_exclusive": fn_st_tokens_exclusive,
    "fn_st_tokens_exact": fn_st_tokens_exact,
    "fn_st_types": fn_st_types,
    "fn_names": fn_names,
    "fn_names_coverage": fn_names_coverage,
    "fn_names_st_tokens": fn_names_st_tokens,
    "lit_values": lit_values,
}


def get_similarity_method(name: str) -> SimilarityMethod:
    try:
        return SIMILARITY_METHODS[name]
    except KeyError:
        raise MatchingError.unknown_method(name, sorted(SIMILARITY_METHODS)) from None
