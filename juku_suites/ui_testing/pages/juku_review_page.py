"""
================================================================================
Juku Review Page Object
================================================================================

Page Object for a juku's review list, `/juku/{juku_id}/review/`.

Key Features:
- Review cards read through the card reader
- Multi-axis filter modal through the filter aggregator
- Category narrowing and "load more" pagination

================================================================================
"""

from typing import List, Optional
from urllib.parse import parse_qs, urlparse

import allure
from loguru import logger
from playwright.async_api import Locator

from juku_suites.ui_testing.framework.exceptions import LoadMoreTimeout
from juku_suites.ui_testing.framework.field_extractor import LEADING_NUMBER, extract
from juku_suites.ui_testing.framework.filter_aggregator import FilterAggregator, FilterSelection
from juku_suites.ui_testing.framework.page_base import PageBase
from juku_suites.ui_testing.framework.smart_locator import SmartLocator
from juku_suites.ui_testing.framework.surface import UISurface
from juku_suites.ui_testing.framework.tab_controller import TabController
from juku_suites.ui_testing.framework.wait_helpers import poll_until
from juku_suites.ui_testing.pages.components.cards import ReviewCardRecord, review_reader


# Category query value -> link label
CATEGORY_LABELS = {
    "teacher": "講師・授業の質",
    "curriculum": "指導方針・カリキュラム",
    "support": "塾のサポート体制",
    "access": "アクセス・周りの環境",
    "home": "家庭でのサポート",
}


class JukuReviewPage(PageBase):
    """
    Page Object for the juku review list.

    Usage:
        reviews = JukuReviewPage(surface)
        await reviews.open("123")
        await reviews.filters.apply(FilterSelection(ratings={5}))
        cards = await reviews.get_review_cards()
    """

    URL_PATH = "/juku/{juku_id}/review/"

    def __init__(self, surface: UISurface):
        super().__init__(surface)
        self.filters = FilterAggregator(surface)
        # Review views ("カテゴリから探す" / "回答者から探す" / "合格体験記") are links
        # styled as tabs; only their active state is read
        self.views = TabController(
            surface, "ul.bjc-review-nav-page", trigger_selector="li", name="review view"
        )

    # ============================================================
    # Page Elements (Smart Locators)
    # ============================================================

    @property
    def review_count_label(self) -> SmartLocator:
        """Total review count next to the list."""
        return self.smart_locator(
            primary=".bjc-review-search_result--number",
            fallbacks=["[data-testid='review-count']"],
            name="Review Count",
        )

    @property
    def load_more_button(self) -> Locator:
        return self.page.get_by_role("button", name="もっと見る", exact=True).first

    @property
    def review_list(self) -> Locator:
        return self.surface.locator("body")

    @property
    def category_nav(self) -> Locator:
        return self.page.locator("div.bjc-review-nav-narrow_down")

    # ============================================================
    # Actions
    # ============================================================

    def path_for(self, juku_id: str, category: Optional[str] = None) -> str:
        path = self.URL_PATH.format(juku_id=juku_id)
        return f"{path}?category={category}" if category else path

    async def open(self, juku_id: str, category: Optional[str] = None) -> None:
        with allure.step(f"Open review page of juku {juku_id}"):
            await self.navigate(juku_id=juku_id, category=category)

    async def get_review_count(self) -> int:
        """Total count shown above the list (0 when not rendered)."""
        element = await self.review_count_label.find_present()
        if element is None:
            return 0
        return extract(await element.text_content(), LEADING_NUMBER)

    async def has_reviews(self) -> bool:
        return await self.get_review_count() > 0

    async def get_review_cards(self) -> List[ReviewCardRecord]:
        return await review_reader.read_all(self.review_list)

    async def get_review_card(self, index: int) -> ReviewCardRecord:
        return await review_reader.read_one(self.review_list, index)

    async def rendered_card_count(self) -> int:
        return await review_reader.count(self.review_list)

    async def load_more(self) -> bool:
        """
        Press "もっと見る" once and wait for additional cards.

        Returns:
            True when more cards arrived, False when the button is not shown

        Raises:
            LoadMoreTimeout: The click added no cards within the bound
        """
        if await self.load_more_button.count() == 0 or not await self.load_more_button.is_visible():
            return False

        before = await self.rendered_card_count()
        with allure.step(f"Load more reviews (currently {before})"):
            await self.load_more_button.click()

            async def check_more():
                count = await self.rendered_card_count()
                return count > before, count

            config = self.surface.wait_config("default")
            result = await poll_until(check_more, config, "Wait for more reviews")
            if not result.ok:
                logger.error(f"No additional reviews after load more (still {result.observed})")
                raise LoadMoreTimeout(before, result.observed, config.timeout, result.last_error)
            return True

    async def load_all(self, max_pages: int = 50) -> int:
        """
        Press "もっと見る" until it disappears; returns the final card count.

        Raises:
            LoadMoreTimeout: A click added no cards within the bound
        """
        for _ in range(max_pages):
            if not await self.load_more():
                break
        return await self.rendered_card_count()

    async def filter_by_category(self, category: str) -> None:
        """Narrow the list to one review category ('teacher', 'curriculum', ...)."""
        label = CATEGORY_LABELS[category]
        with allure.step(f"Filter reviews by category: {label}"):
            await self.category_nav.get_by_role("link", name=label, exact=True).first.click()
            await self.wait_for_page_load("domcontentloaded")

    def current_category(self) -> Optional[str]:
        """`category` query value of the current URL."""
        values = parse_qs(urlparse(self.current_url).query).get("category")
        return values[0] if values else None

    async def current_view(self) -> Optional[str]:
        """Label of the active review view tab."""
        return await self.views.active_label()

    async def apply_filters(self, selection: Optional[FilterSelection] = None,
                            **axes) -> FilterSelection:
        """Apply filter axes through the modal and return what was submitted."""
        return await self.filters.apply(selection, **axes)

    async def get_active_filters(self) -> FilterSelection:
        return await self.filters.read_current()


__all__ = ["JukuReviewPage", "CATEGORY_LABELS"]
