"""Configuration constants.

Values here are NOT user-configurable. They are fingerprint format
constants and hard caps that configurable defaults must stay below.

For configurable values, see models.py (ExtractionConfig, MatchingConfig).
"""

# =============================================================================
# Ranking Maximums
# =============================================================================

RANK_LIMIT_DEFAULT = 100
"""Default number of ranked libraries returned for one unknown signature."""

RANK_LIMIT_MAX = 10_000
"""Maximum ranked libraries for one unknown signature."""

TOP_VERSIONS_DEFAULT = 5
"""Versions of one library kept per candidate during bundle matching."""

# =============================================================================
# Fingerprint Format
# =============================================================================
# Changing any of these invalidates previously extracted signatures.

FN_NAMES_DELIMITER = ":>>:"
"""Separator between ancestor and local names in hierarchical function names."""

ANONYMOUS_FN_NAME = "[anonymous]"
"""Local name of functions with no inferable name."""

TEMPLATE_CHUNK_SEPARATOR = "..."
"""Joins the static chunks of a template literal in the literal signature."""

EXEMPT_NUMBERS = frozenset({-1, 0, 1, 2, 3, 4, 5})
"""Numeric literals too common to discriminate between libraries."""

MAX_TOKEN_DEPTH = 100
"""Nesting depth past which the tokenizer emits a raw ``t_`` token for a subtree.

Left-leaning chains (``a + b + c``, ``a.b.c``, ``a, b, c``, else-if) are
tokenized iteratively and count as one level.
"""
