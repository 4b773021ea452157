"""Core module exports."""

from bundlescope.core.errors import (
    BundleScopeError,
    ConfigError,
    ErrorCode,
    ExtractionError,
    MatchingError,
    ParseError,
)
from bundlescope.core.logging import (
    clear_unit_id,
    configure_logging,
    get_unit_id,
    set_unit_id,
)

__all__ = [
    # Errors
    "BundleScopeError",
    "ConfigError",
    "ErrorCode",
    "ExtractionError",
    "MatchingError",
    "ParseError",
    # Logging
    "clear_unit_id",
    "configure_logging",
    "get_unit_id",
    "set_unit_id",
]
