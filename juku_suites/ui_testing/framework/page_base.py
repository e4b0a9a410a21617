"""
================================================================================
Base Page Object
================================================================================

Foundation class for the site's page objects.

Provides:
    - Navigation against the surface's base URL
    - Smart location of page landmarks
    - Detail-view URL checks through entity routes
    - Screenshot and failure capture for Allure

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger

from .routes import EntityRoute
from .smart_locator import SmartLocator
from .surface import UISurface


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class JukuPage(BasePage):
            URL_PATH = "/juku/{juku_id}/"

        page = JukuPage(surface)
        await page.navigate(juku_id="123")
    """

    # Override in subclasses; placeholders are filled by navigate()
    URL_PATH: str = "/"

    def __init__(self, surface: UISurface):
        """
        Args:
            surface: Rendered page handle shared with the page's controllers
        """
        self.surface = surface
        self.page = surface.page
        self.smart = SmartLocator(self.page)

    @property
    def current_url(self) -> str:
        return self.surface.current_url

    def path_for(self, **params: Any) -> str:
        """URL_PATH with its placeholders filled."""
        return self.URL_PATH.format(**params)

    async def navigate(self, wait_for: str = "domcontentloaded", **params: Any) -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
            **params: Values for URL_PATH placeholders
        """
        path = self.path_for(**params)
        with allure.step(f"Navigate to {path}"):
            await self.surface.goto(path, wait_until=wait_for)

    async def wait_for_page_load(self, state: str = "domcontentloaded",
                                 timeout: Optional[float] = None) -> None:
        """
        Wait for the page to reach a load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in seconds
        """
        await self.surface.wait_for_load_state(state, timeout=timeout)

    def smart_locator(
        self,
        primary: str,
        fallbacks: Optional[List[str]] = None,
        name: str = "custom_element",
    ) -> SmartLocator:
        """
        Build a SmartLocator in *element mode* with primary + fallback selectors.

        Args:
            primary: Primary selector
            fallbacks: Fallback selectors to try when primary fails
            name: Human-readable element name for logging/Allure

        Returns:
            SmartLocator instance configured for a single element
        """
        locators: Dict[str, str] = {"primary": primary}
        for i, fb in enumerate(fallbacks or [], start=1):
            locators[f"fallback_{i}"] = fb
        return SmartLocator(self.page, element_name=name, locators=locators, parent=self.smart)

    # =========================================================================
    # Routes
    # =========================================================================

    def is_at(self, route: EntityRoute, entity_id: Optional[str] = None) -> bool:
        """
        Whether the current URL is a detail view of the route.

        Args:
            route: Entity route the URL should match
            entity_id: When given, the identifier the URL must carry
        """
        found = route.extract_id(self.current_url)
        if not route.url_pattern().search(self.current_url):
            return False
        return entity_id is None or found == str(entity_id)

    async def wait_for_route(self, route: EntityRoute, timeout: int = 10000) -> str:
        """
        Wait until the URL matches a detail route.

        Returns:
            Identifier carried by the URL
        """
        with allure.step(f"Wait for {route.kind} detail URL"):
            await self.page.wait_for_url(route.url_pattern(), timeout=timeout)
        entity_id = route.extract_id(self.current_url)
        logger.debug(f"At {route.kind} detail: {entity_id}")
        return entity_id

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            with open(filepath, "rb") as f:
                allure.attach(
                    f.read(),
                    name=name,
                    attachment_type=allure.attachment_type.PNG
                )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Locator health report
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", attach_to_allure=True)

            allure.attach(
                self.current_url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT
            )
            allure.attach(
                self.get_locator_health_report(),
                name="Locator Health",
                attachment_type=allure.attachment_type.TEXT
            )

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


# Page objects use the PageBase name
PageBase = BasePage


__all__ = [
    "BasePage",
    "PageBase",
    "SCREENSHOT_DIR",
]
