"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for browser tests, providing fixtures for
browser management, surfaces over local HTML fixtures or the live site, and
failure capture.

Key Features:
- Browser and page lifecycle management
- Local fixture pages rendered with page.set_content()
- Screenshot, URL and typed-condition capture on failure

================================================================================
"""

from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable

import pytest
from loguru import logger

from juku_suites.ui_testing.framework.browser_manager import BrowserManager
from juku_suites.ui_testing.framework.exceptions import UISyncError
from juku_suites.ui_testing.framework.page_base import BasePage
from juku_suites.ui_testing.framework.surface import UISurface
from juku_tools.report_tools import attach_condition

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager() -> AsyncGenerator[BrowserManager, None]:
    """
    Browser manager with a launched browser.

    Skips the test when no browser can be launched (e.g. browsers not
    installed with `playwright install chromium`).
    """
    manager = BrowserManager()
    try:
        await manager.start()
    except Exception as e:
        pytest.skip(f"Browser not available: {e}")
    yield manager
    await manager.close()


@pytest.fixture
async def surface(request, browser_manager: BrowserManager) -> AsyncGenerator[UISurface, None]:
    """
    Surface over a fresh page in an isolated context.

    On failure, a screenshot and the current URL are attached to the report.
    """
    surface = await browser_manager.new_surface()
    yield surface

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            await BasePage(surface).capture_failure(request.node.name)
        except Exception as e:
            logger.warning(f"Failed to capture failure details: {e}")


@pytest.fixture
def load_fixture(surface: UISurface) -> Callable[[str], Awaitable[UISurface]]:
    """
    Render a local HTML fixture into the surface.

    Usage:
        surface = await load_fixture("juku_page.html")
    """
    async def _load(name: str) -> UISurface:
        html = (FIXTURES_DIR / name).read_text(encoding="utf-8")
        await surface.page.set_content(html)
        return surface

    return _load


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Keep each phase's report on the item and attach typed UI condition context.

    The surface fixture reads `rep_call` during teardown to decide whether to
    capture a screenshot.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

    if report.when == "call" and report.failed and call.excinfo is not None:
        error = call.excinfo.value
        if isinstance(error, (UISyncError, AssertionError)) and hasattr(error, "context"):
            attach_condition(error)
