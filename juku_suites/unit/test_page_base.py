import allure
import pytest

from juku_suites.ui_testing.framework import page_base, routes
from juku_suites.ui_testing.framework.page_base import BasePage
from juku_suites.unit.fake_dom import el


class ClassroomPage(BasePage):
    URL_PATH = "/juku/{juku_id}/class/{classroom_id}/"


@pytest.fixture
def attachments(monkeypatch):
    captured = []

    def fake_attach(body, name=None, attachment_type=None, extension=None):
        captured.append(name)

    monkeypatch.setattr(allure, "attach", fake_attach)
    return captured


@allure.epic("UI Framework")
@allure.feature("Base Page")
class TestBasePage:

    @allure.title("navigate fills URL_PATH and resolves against the base URL")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_navigate(self, make_surface):
        surface = make_surface(el("h1", "", "トライ札幌駅前校"))
        page = ClassroomPage(surface)

        await page.navigate(juku_id="21", classroom_id="301")

        assert page.current_url == "https://example.com/juku/21/class/301/"
        assert page.is_at(routes.CLASSROOM, "301")
        assert not page.is_at(routes.CLASSROOM, "302")
        assert not page.is_at(routes.INTERVIEW)

    @allure.title("wait_for_route returns the identifier in the URL")
    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_wait_for_route(self, make_surface):
        surface = make_surface(url="https://example.com/juku/21/class/301/")

        assert await BasePage(surface).wait_for_route(routes.CLASSROOM) == "301"

    @allure.title("Failure capture attaches screenshot, URL and locator health")
    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_capture_failure(self, make_surface, attachments, monkeypatch, tmp_path):
        monkeypatch.setattr(page_base, "SCREENSHOT_DIR", tmp_path)
        surface = make_surface(el("h1", "", "個別教室のトライ"))
        page = BasePage(surface)
        await page.smart_locator(".bjc-juku-header-title", ["h1"], name="Juku Name").locate()

        await page.capture_failure("test_harvest")

        assert len(list(tmp_path.glob("failure_test_harvest_*.png"))) == 1
        assert attachments[1:] == ["Current URL", "Locator Health"]
        assert "[Juku Name]" in page.get_locator_health_report()
