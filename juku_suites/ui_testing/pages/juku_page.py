"""
================================================================================
Juku Page Object
================================================================================

Page Object for a juku (cram school brand) page, `/juku/{juku_id}/`.

Sections (each a tab widget over cards):
- courses: course cards per grade tab
- experiences: exam-experience cards per grade tab
- interviews: passed-student interview cards per grade tab
- prices: one price block per course tab

================================================================================
"""

import allure
from playwright.async_api import Locator

from juku_suites.ui_testing.framework import routes
from juku_suites.ui_testing.framework.field_extractor import normalize_space
from juku_suites.ui_testing.framework.page_base import PageBase
from juku_suites.ui_testing.framework.smart_locator import SmartLocator
from juku_suites.ui_testing.framework.surface import UISurface
from juku_suites.ui_testing.pages.components.cards import (
    course_reader,
    experience_reader,
    interview_reader,
    price_reader,
)
from juku_suites.ui_testing.pages.components.sections import TabbedCardSection


class JukuPage(PageBase):
    """
    Page Object for the juku page.

    Usage:
        juku = JukuPage(surface)
        await juku.navigate(juku_id="123")
        courses = await juku.courses.read_tab("中学生")
    """

    URL_PATH = "/juku/{juku_id}/"

    def __init__(self, surface: UISurface):
        super().__init__(surface)
        self.courses = TabbedCardSection(
            surface, ".bjc-posts-course", course_reader, routes.COURSE, name="course"
        )
        self.experiences = TabbedCardSection(
            surface, ".bjc-posts-experience", experience_reader, routes.EXPERIENCE,
            name="experience",
        )
        self.interviews = TabbedCardSection(
            surface, ".bjc-posts-interview", interview_reader, routes.INTERVIEW,
            name="interview",
        )
        self.prices = TabbedCardSection(
            surface, ".bjc-juku-price", price_reader, name="price"
        )

    # ============================================================
    # Page Elements (Smart Locators)
    # ============================================================

    @property
    def juku_name(self) -> SmartLocator:
        """Juku name heading."""
        return self.smart_locator(
            primary=".bjc-juku-header-title",
            fallbacks=[".bjc-juku-header-name", "h1"],
            name="Juku Name",
        )

    @property
    def review_link(self) -> Locator:
        return self.page.locator("a[href*='/review/']").first

    # ============================================================
    # Actions
    # ============================================================

    async def open(self, juku_id: str) -> None:
        with allure.step(f"Open juku page {juku_id}"):
            await self.navigate(juku_id=juku_id)

    async def get_juku_name(self) -> str:
        return normalize_space(await self.juku_name.get_text())

    def juku_id(self) -> str:
        """Juku identifier carried by the current URL."""
        return routes.JUKU.extract_id(self.current_url)

    async def open_course(self, course_id: str) -> str:
        """Open a course card of the active course tab and wait for its detail URL."""
        await self.courses.click_card_by_id(course_id)
        return await self.wait_for_route(routes.COURSE)

    async def open_experience(self, experience_id: str) -> str:
        """Open an experience card of the active tab and wait for its detail URL."""
        await self.experiences.click_card_by_id(experience_id)
        return await self.wait_for_route(routes.EXPERIENCE)

    async def open_interview(self, interview_id: str) -> str:
        """Open an interview card of the active tab and wait for its detail URL."""
        await self.interviews.click_card_by_id(interview_id)
        return await self.wait_for_route(routes.INTERVIEW)


__all__ = ["JukuPage"]
