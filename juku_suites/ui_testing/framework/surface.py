"""
================================================================================
UI Surface
================================================================================

Explicit handle on one rendered page. Controllers and page objects receive a
UISurface instead of reaching for an ambient browser, so several surfaces
(for example two tabs of the same context) can coexist in one test.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from typing import Optional

from loguru import logger
from playwright.async_api import Locator, Page

from juku_tools.common import ConfigLoader

from .wait_helpers import WaitConfig, get_wait_config


class UISurface:
    """
    One rendered document plus the settings needed to drive it.

    Usage:
        surface = UISurface(page)
        await surface.goto("/juku/123/")
        triggers = surface.locator(".js-tab__item")
    """

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        config: Optional[ConfigLoader] = None,
    ):
        """
        Args:
            page: Playwright Page object
            base_url: Site root; falls back to ui.base_url / UI_BASE_URL
            config: Configuration loader (process-wide instance by default)
        """
        self.page = page
        self.config = config or ConfigLoader()
        if not base_url:
            base_url = self.config.get(
                "ui.base_url", os.getenv("UI_BASE_URL", "http://localhost:3000")
            )
        self.base_url = base_url.rstrip("/")

    def locator(self, selector: str) -> Locator:
        """Page-level locator; re-resolved on every use."""
        return self.page.locator(selector)

    def url_for(self, path: str) -> str:
        """Resolve a site path against the base URL; absolute URLs pass through."""
        if path.startswith(("http://", "https://")):
            return path
        clean_path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{clean_path}"

    async def goto(self, path: str, wait_until: str = "domcontentloaded") -> None:
        """Navigate to a site path."""
        url = self.url_for(path)
        await self.page.goto(url, wait_until=wait_until)
        logger.debug(f"Navigated to: {url}")

    @property
    def current_url(self) -> str:
        """URL of the document currently rendered."""
        return self.page.url

    async def wait_for_load_state(self, state: str = "domcontentloaded",
                                  timeout: Optional[float] = None) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in seconds (Playwright default when None)
        """
        if timeout is None:
            await self.page.wait_for_load_state(state)
        else:
            await self.page.wait_for_load_state(state, timeout=timeout * 1000)

    def wait_config(self, scenario: str) -> WaitConfig:
        """Bounded-wait settings for a named scenario."""
        return get_wait_config(scenario, self.config)


__all__ = ["UISurface"]
