"""Fixtures isolating config tests from the host environment."""

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory."""
    repo = tmp_path / "repo"
    repo.mkdir()
    yield repo


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Remove BUNDLESCOPE__* env vars for clean tests."""
    orig = {k: v for k, v in os.environ.items() if k.startswith("BUNDLESCOPE__")}
    for k in orig:
        del os.environ[k]
    yield
    current_keys = [k for k in os.environ if k.startswith("BUNDLESCOPE__")]
    for k in current_keys:
        del os.environ[k]
    os.environ.update(orig)


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the global config at a file that does not exist."""
    path = tmp_path / "global" / "config.yaml"
    with patch("bundlescope.config.loader.GLOBAL_CONFIG_PATH", path):
        yield path
