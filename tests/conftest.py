"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a shared JavaScript parser.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of bundlescope modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("bundlescope"):
        del sys.modules[module_name]

from bundlescope.extract.parser import JavaScriptParser  # noqa: E402


@pytest.fixture(scope="session")
def js_parser() -> JavaScriptParser:
    """Strict parser shared across tests."""
    return JavaScriptParser(strict=True)


@pytest.fixture
def parse_js(js_parser: JavaScriptParser):
    """Parse a source string and return the root node."""

    def _parse(source: str):
        return js_parser.parse(source.encode("utf-8")).root_node

    return _parse
