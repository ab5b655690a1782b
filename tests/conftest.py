"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

for module_name in list(sys.modules.keys()):
    if module_name.startswith("lutels"):
        del sys.modules[module_name]


def _range(sl: int, sc: int, el: int, ec: int) -> dict[str, Any]:
    return {
        "start": {"line": sl, "character": sc},
        "end": {"line": el, "character": ec},
    }


@pytest.fixture
def make_range() -> Callable[..., dict[str, Any]]:
    """Build a linter-JSON range dict."""
    return _range


@pytest.fixture
def make_violation() -> Callable[..., dict[str, Any]]:
    """Build a linter-JSON violation record; keyword args override fields."""

    def factory(**overrides: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "range": _range(0, 10, 0, 11),
            "severity": 1,
            "code": "divide_by_zero",
            "source": "lute lint",
            "message": "division by zero",
        }
        record.update(overrides)
        return record

    return factory


@pytest.fixture
def fake_process() -> Callable[..., MagicMock]:
    """Stand-in for asyncio.subprocess.Process with canned output."""

    def factory(stdout: str = "[]", stderr: str = "", returncode: int = 0) -> MagicMock:
        proc = MagicMock()
        proc.returncode = returncode
        proc.communicate = AsyncMock(return_value=(stdout.encode(), stderr.encode()))
        return proc

    return factory
