"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser per manager, isolated contexts per page
    - Launch and context settings from config/config.yaml (ui.*)
    - UISurface construction for controllers and page objects

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from juku_tools.common import ConfigLoader

from .surface import UISurface


class BrowserManager:
    """
    Manages browser instances and contexts for UI testing.

    Usage:
        async with BrowserManager() as manager:
            surface = await manager.new_surface()
            await surface.goto("/juku/123/")
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": ["--ignore-certificate-errors"],
    }

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1280, "height": 900},
        "ignore_https_errors": True,
        "locale": "ja-JP",
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        config: Optional[ConfigLoader] = None,
    ):
        """
        Args:
            headless: Run browser headless (ui.headless when None)
            browser_type: 'chromium', 'firefox' or 'webkit' (ui.browser when None)
            config: Configuration loader (process-wide instance by default)
        """
        self.config = config or ConfigLoader()
        self.headless = headless if headless is not None else self.config.get("ui.headless", True)
        self.browser_type = browser_type or self.config.get("ui.browser", "chromium")
        self.action_timeout = self.config.get("ui.action_timeout", 10000)

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {**self.DEFAULT_LAUNCH_OPTIONS, "headless": self.headless}
        try:
            self._browser = await browser_launcher.launch(**launch_options)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.debug(f"Browser started: {self.browser_type} (headless={self.headless})")

    async def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def _context_options(self, **options: Any) -> Dict[str, Any]:
        viewport = {
            "width": int(self.config.get("ui.viewport.width", 1280)),
            "height": int(self.config.get("ui.viewport.height", 900)),
        }
        return {**self.DEFAULT_CONTEXT_OPTIONS, "viewport": viewport, **options}

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new isolated browser context.

        Args:
            **options: Additional context options

        Returns:
            New BrowserContext
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = await self._browser.new_context(**self._context_options(**options))
        context.set_default_timeout(self.action_timeout)
        self._contexts.append(context)
        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """Create new page in new or existing context."""
        if context is None:
            context = await self.new_context(**context_options)
        return await context.new_page()

    async def new_surface(self, base_url: str = "", **context_options: Any) -> UISurface:
        """New page wrapped as a UISurface."""
        page = await self.new_page(**context_options)
        return UISurface(page, base_url=base_url, config=self.config)

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
]
