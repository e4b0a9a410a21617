"""
================================================================================
Unit Test Configuration
================================================================================

Fixtures for browser-free tests: short wait budgets (through the same
environment overrides the configuration layer reads) and surfaces built on
the in-memory DOM.

================================================================================
"""

from typing import Callable

import pytest

from juku_suites.ui_testing.framework.surface import UISurface
from juku_suites.ui_testing.framework.wait_helpers import WAIT_SCENARIOS
from juku_suites.unit.fake_dom import FakeElement, FakePage, el
from juku_tools.common import ConfigLoader

BASE_URL = "https://example.com"


@pytest.fixture(autouse=True)
def short_waits(monkeypatch):
    """Shrink every wait scenario so timeouts surface quickly."""
    ConfigLoader.reset()
    for scenario in WAIT_SCENARIOS:
        prefix = f"UI_WAITS_{scenario.upper()}"
        monkeypatch.setenv(f"{prefix}_TIMEOUT", "0.5")
        monkeypatch.setenv(f"{prefix}_INTERVAL", "0.02")
        monkeypatch.setenv(f"{prefix}_MAX_INTERVAL", "0.05")
    yield
    ConfigLoader.reset()


@pytest.fixture
def make_surface() -> Callable[..., UISurface]:
    """
    Factory building a surface over a fake document.

    Usage:
        surface = make_surface(tabs.wrap, url="https://example.com/juku/7/")
    """
    def _make(*children: FakeElement, url: str = f"{BASE_URL}/") -> UISurface:
        page = FakePage(el("body", "", "", *children), url=url)
        return UISurface(page, base_url=BASE_URL)

    return _make
