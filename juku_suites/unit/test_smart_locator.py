import allure
import pytest

from juku_suites.ui_testing.framework.smart_locator import ElementNotFoundError, SmartLocator
from juku_suites.unit.fake_dom import FakePage, el


@pytest.fixture
def page():
    return FakePage(el("body", "", "",
                       el("h1", "", "個別教室のトライ"),
                       el("button", "bjc-review-filter-button", "絞り込み"),
                       el("p", "bjc-search-result-count", "", visible=False)))


@allure.epic("UI Framework")
@allure.feature("Smart Locator")
class TestSmartLocator:

    @allure.title("Primary selector is used when present")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_primary(self, page):
        smart = SmartLocator(page)

        await smart.click("filter_button")

        assert page.body.find("button").clicks == 1
        assert "No maintenance needed" in smart.get_health_report()

    @allure.title("Fallbacks are tried in order and reported")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_fallback_is_reported(self, page):
        heading = SmartLocator(page, "Juku Name", {"primary": ".bjc-juku-header-title",
                                                   "fallback_1": "h1"})

        assert await heading.get_text() == "個別教室のトライ"
        report = heading.get_health_report()
        assert "[Juku Name]" in report
        assert "fallback_1 -> h1" in report

    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_all_strategies_fail(self, page):
        missing = SmartLocator(page, "Missing", {"primary": ".nope", "fallback_1": ".nada"})

        with pytest.raises(ElementNotFoundError):
            await missing.locate(timeout=100)
        assert not await missing.is_visible(timeout=100)
        assert await missing.find_present() is None

    @allure.title("find_present does not require visibility")
    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_find_present_hidden(self, page):
        smart = SmartLocator(page)

        assert await smart.find_present("search_result_count") is not None
        assert not await smart.is_visible("search_result_count", timeout=100)

    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_child_feeds_parent_report(self, page):
        parent = SmartLocator(page)
        child = SmartLocator(page, "Heading", {"primary": ".title", "fallback_1": "h1"},
                             parent=parent)

        await child.locate()

        assert "[Heading]" in parent.get_health_report()
