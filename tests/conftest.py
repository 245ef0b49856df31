"""
Root test configuration and fixtures for fieldcheck.

Note: sys.path manipulation is handled here to ensure imports work correctly
without installing the package.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fieldcheck.request import Request  # noqa: E402
from fieldcheck.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from FIELDCHECK_* variables and the settings cache."""
    for name in ("FIELDCHECK_DEFAULT_LOCATIONS", "FIELDCHECK_STRICT_RULES", "FIELDCHECK_ERROR_STATUS_CODE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for requests: make_request(body={...}, query={...})."""

    def _make(**locations: Any) -> Request:
        return Request(**locations)

    return _make
