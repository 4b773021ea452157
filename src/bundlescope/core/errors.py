"""bundlescope error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Extraction
- 4xxx: Matching
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Extraction (3xxx)
    EXTRACT_SYNTAX_ERROR = 3001
    EXTRACT_MALFORMED_NODE = 3002
    EXTRACT_UNSUPPORTED_INPUT = 3003

    # Matching (4xxx)
    MATCH_UNKNOWN_METHOD = 4001
    MATCH_INVALID_SIGNATURE = 4002


@dataclass(frozen=True, slots=True)
class BundleScopeError(Exception):
    """Base error with structured context for JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(BundleScopeError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ParseError(BundleScopeError):
    """Source text could not be turned into a usable syntax tree."""

    @classmethod
    def syntax_errors(cls, error_count: int, first_error: tuple[int, int] | None) -> "ParseError":
        where = f" (first at line {first_error[0] + 1}, column {first_error[1]})" if first_error else ""
        return cls(
            code=ErrorCode.EXTRACT_SYNTAX_ERROR,
            message=f"Source has {error_count} syntax error(s){where}",
            details={
                "error_count": error_count,
                "first_error": list(first_error) if first_error else None,
            },
        )


class ExtractionError(BundleScopeError):
    """Syntax tree shapes the extractor cannot make sense of."""

    @classmethod
    def malformed_node(cls, kind: str, missing_field: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACT_MALFORMED_NODE,
            message=f"'{kind}' node is missing required field '{missing_field}'",
            details={"kind": kind, "field": missing_field},
        )

    @classmethod
    def unsupported_input(cls, received: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACT_UNSUPPORTED_INPUT,
            message=f"Expected a tree-sitter JavaScript node, got {received}",
            details={"received": received},
        )


class MatchingError(BundleScopeError):
    """Similarity and candidate selection errors."""

    @classmethod
    def unknown_method(cls, method: str, available: list[str]) -> "MatchingError":
        return cls(
            code=ErrorCode.MATCH_UNKNOWN_METHOD,
            message=f"Unknown similarity method: {method}",
            details={"method": method, "available": available},
        )

    @classmethod
    def invalid_signature(cls, reason: str) -> "MatchingError":
        return cls(
            code=ErrorCode.MATCH_INVALID_SIGNATURE,
            message=f"Invalid signature: {reason}",
            details={"reason": reason},
        )
