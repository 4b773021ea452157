"""Data models for structural signature extraction.

Everything here is a plain value: no tree-sitter objects survive past
extraction, so signatures can be serialized, cached and compared freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

LiteralValue = Union[str, int, float]


class ExtractorVersion(str, Enum):
    """Tokenizer modes.

    Signatures extracted with different versions are not comparable.
    """

    V1 = "v1"  # everything
    V2 = "v2"  # no parameters, no uninitialized declarators
    V3 = "v3"  # no parameters, drop empty and trivial wrapper functions

    @property
    def skips_parameters(self) -> bool:
        return self is not ExtractorVersion.V1

    @property
    def skips_uninitialized_declarators(self) -> bool:
        return self is ExtractorVersion.V2

    @property
    def drops_trivial_functions(self) -> bool:
        return self is ExtractorVersion.V3


@dataclass(frozen=True, slots=True)
class ExtractOptions:
    """Options for one extraction call."""

    version: ExtractorVersion = ExtractorVersion.V1


@dataclass(frozen=True, slots=True)
class WalkSignal(Generic[T]):
    """What a node filter tells the walker about one node.

    ``data`` is emitted at the node's location when not None; ``proceed``
    says whether the walker descends into the node's children.
    """

    data: T | None = None
    proceed: bool = True

    @classmethod
    def cont(cls, data: T | None = None) -> WalkSignal[T]:
        return cls(data=data, proceed=True)

    @classmethod
    def stop(cls, data: T | None = None) -> WalkSignal[T]:
        return cls(data=data, proceed=False)


@dataclass(slots=True)
class TreePath(Generic[T]):
    """Data emitted by a node filter at one location of the tree."""

    location_path: str
    data: T
    children: list[TreePath[T]] | None = None


@dataclass(frozen=True, slots=True)
class FunctionSignature:
    """Structural fingerprint of one function.

    ``name`` is the local inferred name until flattening replaces it with
    the hierarchical one; ``index`` is -1 until flattening assigns it.
    """

    name: str
    fn_statement_types: list[str] = field(default_factory=list)
    fn_statement_tokens: list[str] = field(default_factory=list)
    index: int = -1
    type: str = "fn"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "index": self.index,
            "fnStatementTypes": list(self.fn_statement_types),
            "fnStatementTokens": list(self.fn_statement_tokens),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FunctionSignature:
        return cls(
            name=data["name"],
            index=data.get("index", -1),
            fn_statement_types=list(data.get("fnStatementTypes", [])),
            fn_statement_tokens=list(data.get("fnStatementTokens", [])),
            type=data.get("type", "fn"),
        )


@dataclass(frozen=True, slots=True)
class Signature:
    """Two-part fingerprint of one parsed unit."""

    function_signature: list[FunctionSignature] = field(default_factory=list)
    literal_signature: list[LiteralValue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "functionSignature": [fn.to_dict() for fn in self.function_signature],
            "literalSignature": list(self.literal_signature),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Signature:
        return cls(
            function_signature=[
                FunctionSignature.from_dict(fn) for fn in data.get("functionSignature", [])
            ],
            literal_signature=list(data.get("literalSignature", [])),
        )


@dataclass(frozen=True, slots=True)
class ModuleSignature:
    """Signature of one module factory inside a React Native bundle."""

    module_id: str | int | float
    signature: Signature

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.module_id, **self.signature.to_dict()}
