"""
================================================================================
Smart Locator
================================================================================

Element location with fallback selectors for page-level landmarks (headings,
counters, buttons) whose markup differs between site templates:
    - Multiple selectors per element, tried in order
    - Fallback use is logged and collected in a health report
    - Landmarks shared by several pages are registered in LOCATORS

Repeated cards and stateful widgets do not go through here: they are read by
the card reader and driven by the state controllers.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from playwright.async_api import Locator, Page


class ElementNotFoundError(Exception):
    """Raised when all locator strategies fail to find element."""
    pass


@dataclass
class LocatorHealth:
    """
    Tracks which strategy resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_name: Name of fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Element locator with fallback strategies.

    Usage:
        >>> smart = SmartLocator(page)
        >>> count_text = await smart.get_text("review_count")

        >>> heading = SmartLocator(page, "juku_name", {"primary": "h1.bjc-juku-name",
        ...                                             "fallback_1": "h1"})
        >>> await heading.locate()
    """

    # Format: element_name -> {strategy_name: selector}
    LOCATORS: Dict[str, Dict[str, str]] = {
        "juku_name": {
            "primary": ".bjc-juku-header-name",
            "fallback_1": "h1",
        },
        "review_count": {
            "primary": ".bjc-review-search_result--number",
            "fallback_1": "[data-testid='review-count']",
        },
        "load_more_button": {
            "primary": "button.bjc-button-more",
            "fallback_1": "button:has-text('もっと見る')",
        },
        "filter_button": {
            "primary": "button.bjc-review-filter-button",
            "fallback_1": "button:has-text('絞り込み')",
        },
        "search_result_count": {
            "primary": ".bjc-search-result-count",
            "fallback_1": ".bjc-search-results-header--count",
        },
        "station_page_heading": {
            "primary": ".bjc-search-form--heading",
            "fallback_1": "h1",
        },
    }

    def __init__(
        self,
        page: Page,
        element_name: Optional[str] = None,
        locators: Optional[Dict[str, str]] = None,
        parent: Optional["SmartLocator"] = None,
    ):
        """
        Initialize SmartLocator with Playwright page.

        Two usage styles:
        1) **Library mode**: `SmartLocator(page)` then `await smart.click("filter_button")`
           using the class-level `LOCATORS` map.
        2) **Element mode**: `SmartLocator(page, element_name="X", locators={...})`
           then `await element.locate()`.

        Args:
            page: Playwright Page object
            element_name: Optional human-readable element name (element mode)
            locators: Optional locator map (element mode)
            parent: Locator whose health report this one feeds
        """
        self.page = page
        self._element_name = element_name
        self._element_locators = locators
        if parent is not None:
            self._health_records = parent._health_records
            self._fallback_used = parent._fallback_used
        else:
            self._health_records: List[LocatorHealth] = []
            self._fallback_used: Dict[str, LocatorHealth] = {}

    def _resolve_map(
        self,
        target: Optional[Union[str, Dict[str, str]]],
        element_name: Optional[str],
    ):
        if isinstance(target, dict):
            return target, element_name or self._element_name or "custom_element"
        if isinstance(target, str):
            return self.LOCATORS.get(target, {}), target
        return self._element_locators or {}, element_name or self._element_name or "custom_element"

    def _record(self, display_name: str, locators: Dict[str, str],
                strategy_name: str, selector: str) -> None:
        health = LocatorHealth(
            element_name=display_name,
            primary_selector=locators.get("primary", selector),
            used_fallback=(strategy_name != "primary"),
            fallback_name=strategy_name if strategy_name != "primary" else None,
            fallback_selector=selector if strategy_name != "primary" else None,
        )
        self._health_records.append(health)

        if strategy_name != "primary":
            logger.warning(
                f"Element '{display_name}' used fallback: {strategy_name} -> {selector}"
            )
            self._fallback_used[display_name] = health
        else:
            logger.debug(f"Element '{display_name}' found: {selector}")

    async def locate(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> Locator:
        """
        Locate a visible element, trying each strategy in order.

        Args:
            target: Element key in `LOCATORS`, a locator map, or None for the
                instance's own map (element mode)
            timeout: Timeout in milliseconds for each attempt
            element_name: Optional human-readable name for logging

        Returns:
            Locator of the first match of the winning strategy

        Raises:
            ElementNotFoundError: When all strategies fail
        """
        locators, display_name = self._resolve_map(target, element_name)
        if not locators:
            raise ElementNotFoundError(f"No locators defined for element: {display_name}")

        errors = []
        for strategy_name, selector in locators.items():
            try:
                locator = self.page.locator(selector).first
                await locator.wait_for(state="visible", timeout=timeout)
                self._record(display_name, locators, strategy_name, selector)
                return locator
            except Exception as e:
                errors.append(f"{strategy_name}: {selector} -> {str(e)[:50]}")
                continue

        error_msg = (
            f"All locators failed for '{display_name}':\n" +
            "\n".join(f"  - {err}" for err in errors)
        )
        logger.error(error_msg)
        raise ElementNotFoundError(error_msg)

    async def find_present(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        element_name: Optional[str] = None,
    ) -> Optional[Locator]:
        """
        First strategy with a match in the DOM right now, without waiting.

        Returns:
            Locator, or None when no strategy matches
        """
        locators, display_name = self._resolve_map(target, element_name)
        for strategy_name, selector in locators.items():
            locator = self.page.locator(selector)
            if await locator.count() > 0:
                self._record(display_name, locators, strategy_name, selector)
                return locator.first
        return None

    async def click(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        timeout: int = 5000,
        element_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """Click element using smart location."""
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        await locator.click(**kwargs)

    async def get_text(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        timeout: int = 5000,
        element_name: Optional[str] = None,
    ) -> str:
        """Text content of element ("" when it has none)."""
        locator = await self.locate(target, timeout=timeout, element_name=element_name)
        return await locator.text_content() or ""

    async def is_visible(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        timeout: int = 2000,
        element_name: Optional[str] = None,
    ) -> bool:
        """
        Check if element is visible.

        Returns:
            True if element is visible, False otherwise
        """
        try:
            locator = await self.locate(target, timeout=timeout, element_name=element_name)
            return await locator.is_visible()
        except ElementNotFoundError:
            return False

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that needed a fallback (maintenance candidates).
        """
        if not self._fallback_used:
            return "All elements used primary locators. No maintenance needed."

        report_lines = [
            "Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: {health.fallback_name} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "ElementNotFoundError",
    "LocatorHealth",
]
