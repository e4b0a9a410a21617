"""
================================================================================
Search Results Page Object
================================================================================

Page Object for juku search results (by area or station). Each result article
is one institution with its evaluation and a list of school (classroom) cards.
Opening a school is verified against the classroom detail route.

================================================================================
"""

from typing import List, Optional

import allure
from loguru import logger
from playwright.async_api import Locator

from juku_suites.ui_testing.framework import routes
from juku_suites.ui_testing.framework.field_extractor import normalize_space
from juku_suites.ui_testing.framework.page_base import PageBase
from juku_suites.ui_testing.framework.smart_locator import SmartLocator
from juku_suites.ui_testing.framework.surface import UISurface
from juku_suites.ui_testing.pages.components.cards import (
    InstitutionRecord,
    SchoolRecord,
    institution_reader,
    school_reader,
)


class SearchResultsPage(PageBase):
    """
    Page Object for search results.

    Usage:
        results = SearchResultsPage(surface)
        schools = await results.get_schools("個別教室のトライ")
        classroom_id = await results.open_school(schools[0].name)
    """

    def __init__(self, surface: UISurface):
        super().__init__(surface)
        self.results = surface.locator("main")

    # ============================================================
    # Page Elements (Smart Locators)
    # ============================================================

    @property
    def header_title(self) -> SmartLocator:
        """Result header ("札幌駅の塾・学習塾" ...)."""
        return self.smart_locator(
            primary=".bjc-search-header-title",
            fallbacks=[".bjc-search-header h1", "h1"],
            name="Search Header Title",
        )

    # ============================================================
    # Reads
    # ============================================================

    async def get_header_title(self) -> str:
        return normalize_space(await self.header_title.get_text())

    async def get_institutions(self) -> List[InstitutionRecord]:
        return await institution_reader.read_all(self.results)

    async def _article(self, institution: Optional[str]) -> Locator:
        articles = institution_reader.cards(self.results)
        if institution is None:
            return articles.first
        for index, record in enumerate(await self.get_institutions()):
            if institution in record.name:
                return articles.nth(index)
        raise LookupError(f"No search result for institution '{institution}'")

    async def get_schools(self, institution: Optional[str] = None) -> List[SchoolRecord]:
        """School cards of one institution (every institution when None)."""
        if institution is None:
            return await school_reader.read_all(self.results)
        return await school_reader.read_all(await self._article(institution))

    # ============================================================
    # Navigation
    # ============================================================

    async def open_institution(self, institution: str) -> str:
        """Open an institution's juku page; returns its juku id."""
        article = await self._article(institution)
        with allure.step(f"Open juku page of {institution}"):
            await article.locator(".bjc-search-result-article--header-title a").first.click()
            return await self.wait_for_route(routes.JUKU)

    async def open_school(self, school_name: str) -> str:
        """
        Open a school card's classroom page and check it is the card's classroom.

        Returns:
            Classroom id from the resulting URL
        """
        schools = await self.get_schools()
        index = next((i for i, s in enumerate(schools) if school_name in s.name), None)
        if index is None:
            raise LookupError(f"No school card named '{school_name}'")
        expected = schools[index]

        with allure.step(f"Open classroom {expected.name}"):
            card = school_reader.cards(self.results).nth(index)
            await card.locator(
                ".bjc-search-result-article--school_list-card-header-heading a"
            ).first.click()
            classroom_id = await self.wait_for_route(routes.CLASSROOM)

        if expected.classroom_id and classroom_id != expected.classroom_id:
            raise AssertionError(
                f"Opened classroom {classroom_id}, card links to {expected.classroom_id}"
            )
        logger.info(f"Opened classroom {classroom_id} ({expected.name})")
        return classroom_id


__all__ = ["SearchResultsPage"]
