"""Config module exports."""

from bundlescope.config.loader import BundleScopeSettings, load_config
from bundlescope.config.models import (
    BundleScopeConfig,
    ExtractionConfig,
    LoggingConfig,
    MatchingConfig,
)

__all__ = [
    "load_config",
    "BundleScopeConfig",
    "BundleScopeSettings",
    "ExtractionConfig",
    "LoggingConfig",
    "MatchingConfig",
]
