"""Fixtures for CLI tests: isolated config and files on disk."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every command from an empty directory with no global config."""
    monkeypatch.chdir(tmp_path)
    for key in [k for k in os.environ if k.startswith("BUNDLESCOPE__")]:
        monkeypatch.delenv(key)
    with patch("bundlescope.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield
    # Handlers point at CliRunner's captured streams; drop them.
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def write_file(tmp_path: Path):
    """Write text or JSON-serializable data to a file under tmp_path."""

    def _write(name: str, content) -> Path:
        path = tmp_path / name
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return path

    return _write
