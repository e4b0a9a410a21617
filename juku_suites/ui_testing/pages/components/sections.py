"""
================================================================================
Tabbed Card Section
================================================================================

A page section made of a tab widget whose content regions list cards: the
juku page's course, experience, interview and price blocks. Reads are always
scoped to the active tab's content, obtained from the tab controller.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Generic, List, Optional, TypeVar

import allure
from loguru import logger
from playwright.async_api import Locator

from juku_suites.ui_testing.framework.card_reader import CardReader
from juku_suites.ui_testing.framework.routes import EntityRoute
from juku_suites.ui_testing.framework.surface import UISurface
from juku_suites.ui_testing.framework.tab_controller import TabController

R = TypeVar("R")

SECTION_WRAP = ".bjc-juku-inner-tab-wrap"


class TabbedCardSection(Generic[R]):
    """
    Tab controller plus card reader over one section.

    Usage:
        courses = TabbedCardSection(surface, ".bjc-posts-course", course_reader, COURSE)
        await courses.activate("中学生")
        records = await courses.cards()
    """

    def __init__(
        self,
        surface: UISurface,
        marker_selector: str,
        reader: CardReader,
        route: Optional[EntityRoute] = None,
        name: str = "section",
    ):
        """
        Args:
            surface: Rendered page handle
            marker_selector: Selector only this section's tab wrap contains
            reader: Card reader for one content region
            route: Detail route of the section's cards (None when cards do not link)
            name: Section name for logs and reports
        """
        self.surface = surface
        self.container = surface.locator(f"{SECTION_WRAP}:has({marker_selector})").first
        self.reader = reader
        self.route = route
        self.name = name
        self.tabs = TabController(surface, self.container, name=name)

    @property
    def view_all_link(self) -> Locator:
        return self.container.locator(".bjc-juku-link")

    async def is_visible(self) -> bool:
        if await self.container.count() == 0:
            return False
        return await self.container.is_visible()

    async def tab_labels(self) -> List[str]:
        return await self.tabs.list_labels()

    async def active_tab(self) -> Optional[str]:
        return await self.tabs.active_label()

    async def activate(self, label: str) -> str:
        return await self.tabs.activate(label)

    async def cards(self) -> List[R]:
        """Records of the active tab's cards."""
        return await self.reader.read_all(await self.tabs.active_content())

    async def card_count(self) -> int:
        return await self.reader.count(await self.tabs.active_content())

    async def read_tab(self, label: str) -> List[R]:
        """Activate a tab and read its cards."""
        full_label = await self.tabs.activate(label)
        return await self.reader.read_all(await self.tabs.content_for(full_label))

    async def harvest(self) -> Dict[str, List[R]]:
        """Records of every tab, keyed by tab label, in tab order."""
        with allure.step(f"Harvest all {self.name} tabs"):
            result: Dict[str, List[R]] = {}
            for label in await self.tabs.list_labels():
                result[label] = await self.read_tab(label)
            logger.info(
                f"[{self.name}] harvested "
                f"{sum(len(records) for records in result.values())} record(s) "
                f"from {len(result)} tab(s)"
            )
            return result

    async def click_card(self, index: int = 0) -> None:
        """Click the card at a position in the active tab."""
        content = await self.tabs.active_content()
        with allure.step(f"Open {self.name} card #{index}"):
            await self.reader.cards(content).nth(index).click()

    async def click_card_by_id(self, entity_id: str) -> None:
        """Click the active tab's card linking to an entity."""
        if self.route is None:
            raise ValueError(f"Section '{self.name}' has no detail route")
        content = await self.tabs.active_content()
        selector = f"{self.reader.card_selector}{self.route.href_selector(entity_id)}"
        with allure.step(f"Open {self.route.kind} {entity_id}"):
            await content.locator(selector).first.click()


__all__ = ["TabbedCardSection", "SECTION_WRAP"]
