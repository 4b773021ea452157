"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (BUNDLESCOPE__SECTION__KEY)
3. Repo YAML (.bundlescope/config.yaml)
4. Global YAML (~/.config/bundlescope/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    BUNDLESCOPE__<SECTION>__<KEY>=<VALUE>

Examples:
    BUNDLESCOPE__LOGGING__LEVEL=DEBUG
    BUNDLESCOPE__EXTRACTION__EXTRACTOR_VERSION=v2
    BUNDLESCOPE__MATCHING__METHOD=lit_values
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from bundlescope.config.constants import (
    RANK_LIMIT_DEFAULT,
    RANK_LIMIT_MAX,
    TOP_VERSIONS_DEFAULT,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ExtractorVersionName = Literal["v1", "v2", "v3"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        BUNDLESCOPE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every ambiguous function name.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Signature extraction configuration.

    Env vars:
        BUNDLESCOPE__EXTRACTION__EXTRACTOR_VERSION: v1, v2 or v3
        BUNDLESCOPE__EXTRACTION__STRICT_PARSE: Reject sources with syntax errors
    """

    extractor_version: ExtractorVersionName = Field(
        default="v1",
        description="Tokenizer mode. Signatures extracted with different versions "
        "are not comparable.",
    )
    strict_parse: bool = Field(
        default=True,
        description="Reject sources the parser could only recover partially. "
        "RISK: Disabling lets error-recovery nodes leak into signatures.",
    )


class MatchingConfig(BaseModel):
    """Similarity matching configuration.

    Env vars:
        BUNDLESCOPE__MATCHING__METHOD: Similarity method name
        BUNDLESCOPE__MATCHING__LIMIT: Max ranked libraries per unknown signature
        BUNDLESCOPE__MATCHING__TOP_VERSIONS: Versions kept per candidate in bundle matching
        BUNDLESCOPE__MATCHING__USE_CANDIDATES: Narrow the corpus by shared literals first
    """

    method: str = Field(
        default="fn_st_tokens",
        description="Similarity method used for ranking.",
    )
    limit: int = Field(
        default=RANK_LIMIT_DEFAULT,
        description="Max ranked libraries returned per unknown signature.",
    )
    top_versions: int = Field(
        default=TOP_VERSIONS_DEFAULT,
        description="Versions of one library kept per candidate during bundle matching.",
    )
    use_candidates: bool = Field(
        default=True,
        description="Only compare libraries sharing a literal with the unknown signature.",
    )

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if not (1 <= v <= RANK_LIMIT_MAX):
            raise ValueError(f"limit must be 1-{RANK_LIMIT_MAX}, got {v}")
        return v

    @field_validator("top_versions")
    @classmethod
    def validate_top_versions(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"top_versions must be positive, got {v}")
        return v


class BundleScopeConfig(BaseModel):
    """Root configuration for bundlescope.

    All settings can be configured via:
    1. Environment variables: BUNDLESCOPE__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
