"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the project markers, tags tests by directory and keeps tests that
hit the real site out of default runs.

================================================================================
"""

import os

import pytest


LIVE_ENV_FLAG = "JUKU_LIVE_TESTS"


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "live: Runs against the real site (set JUKU_LIVE_TESTS=1)"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser tests (Playwright)"
    )
    config.addinivalue_line(
        "markers", "unit: Browser-free framework tests"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "tabs: Tab and accordion state control"
    )
    config.addinivalue_line(
        "markers", "stations: Station line accordion and station lookup"
    )
    config.addinivalue_line(
        "markers", "filters: Review filter modal"
    )
    config.addinivalue_line(
        "markers", "cards: Card harvesting and field extraction"
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag tests by directory and skip live tests unless enabled.
    """
    run_live = os.getenv(LIVE_ENV_FLAG, "").lower() in ("1", "true", "yes")
    skip_live = pytest.mark.skip(reason=f"live site tests disabled (set {LIVE_ENV_FLAG}=1)")

    for item in items:
        path = str(item.fspath)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)
        if "live" in item.keywords and not run_live:
            item.add_marker(skip_live)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Juku Site UI Automation",
        "=" * 60,
        "",
    ]
