"""Signature builders for matching tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from bundlescope.extract.models import FunctionSignature, Signature
from bundlescope.match.models import LibrarySignature

SignatureFactory = Callable[..., Signature]
LibraryFactory = Callable[..., LibrarySignature]


def _make_signature(
    functions: Sequence[Sequence[str]] = (),
    literals: Sequence[str | int | float] = (),
    names: Sequence[str] | None = None,
) -> Signature:
    names = names or [f"fn{i}" for i in range(len(functions))]
    return Signature(
        function_signature=[
            FunctionSignature(
                name=name,
                index=i,
                fn_statement_tokens=sorted(tokens),
                fn_statement_types=sorted({token.split("[")[0] for token in tokens}),
            )
            for i, (name, tokens) in enumerate(zip(names, functions))
        ],
        literal_signature=list(literals),
    )


@pytest.fixture
def make_signature() -> SignatureFactory:
    """Build a signature whose i-th function has ``functions[i]`` as tokens."""
    return _make_signature


@pytest.fixture
def make_library() -> LibraryFactory:
    """Build a corpus entry; keyword arguments go to the signature builder."""

    def _make(name: str, version: str, **kwargs) -> LibrarySignature:
        return LibrarySignature(name=name, version=version, signature=_make_signature(**kwargs))

    return _make
