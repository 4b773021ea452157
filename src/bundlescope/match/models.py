"""Data models for candidate selection and similarity matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bundlescope.extract.models import Signature
from bundlescope.match.confidence import Confidence


@dataclass(frozen=True, slots=True)
class MatchedFunction:
    """Best library function for one unknown function."""

    index: int
    prob: Confidence


MatchMap = dict[int, MatchedFunction]


def match_map_to_list(mapping: MatchMap) -> list[dict[str, Any]]:
    """Serialize a match map, strongest matches first."""
    ordered = sorted(mapping.items(), key=lambda item: (-item[1].prob.val, item[0]))
    return [
        {"index": unknown_index, "matchedIndex": match.index, "prob": match.prob.to_dict()}
        for unknown_index, match in ordered
    ]


@dataclass(frozen=True, slots=True)
class SimilarityResult:
    similarity: Confidence
    mapping: MatchMap | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"similarity": self.similarity.to_dict()}
        if self.mapping is not None:
            result["mapping"] = match_map_to_list(self.mapping)
        return result


@dataclass(frozen=True, slots=True)
class LibrarySignature:
    """A signature in the reference corpus."""

    name: str
    version: str
    signature: Signature
    file: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LibrarySignature:
        return cls(
            name=data["name"],
            version=str(data["version"]),
            file=data.get("file"),
            signature=Signature.from_dict(data["signature"]),
        )


@dataclass(frozen=True, slots=True)
class LibraryMatch:
    """One ranked corpus entry."""

    name: str
    version: str
    similarity: Confidence
    mapping: MatchMap | None = None
    file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "similarity": self.similarity.to_dict(),
        }
        if self.file is not None:
            result["file"] = self.file
        if self.mapping is not None:
            result["mapping"] = match_map_to_list(self.mapping)
        return result


@dataclass(frozen=True, slots=True)
class CandidateLib:
    """A library short-listed by literal overlap."""

    name: str
    confidence: Confidence

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "confidence": self.confidence.to_dict()}


@dataclass(frozen=True, slots=True)
class CandidateMatches:
    """Versions of one candidate library matched against a bundle."""

    candidate: CandidateLib
    position: int  # 1-based position in the candidate ranking
    matches: list[LibraryMatch]

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.candidate.to_dict(),
            "top": self.position,
            "matches": [match.to_dict() for match in self.matches],
        }


@dataclass(frozen=True, slots=True)
class BundleMatch:
    """Libraries found in one bundle by the two-pass matcher.

    ``rank`` holds candidates with an exact version match, ``secondary``
    the partial matches of the candidates left over, ``remaining`` the
    indices of the unknown functions no library claimed.
    """

    rank: list[CandidateMatches] = field(default_factory=list)
    secondary: list[CandidateMatches] = field(default_factory=list)
    remaining: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": [entry.to_dict() for entry in self.rank],
            "secondary": [entry.to_dict() for entry in self.secondary],
            "remaining": list(self.remaining),
        }
