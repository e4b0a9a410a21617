import allure
import pytest

from juku_suites.ui_testing.framework import routes
from juku_suites.ui_testing.framework.routes import EntityRoute


@allure.epic("UI Framework")
@allure.feature("Entity Routes")
class TestEntityRoutes:

    @allure.title("Path, id extraction and URL pattern share one template")
    @pytest.mark.P0
    def test_course_route(self):
        path = routes.COURSE.path_for("42", juku_id="7")

        assert path == "/juku/7/course/42/"
        assert routes.COURSE.extract_id(f"https://example.com{path}") == "42"
        assert routes.COURSE.url_pattern().search(f"https://example.com{path}?tab=1")

    @allure.title("Foreign hrefs yield an empty id")
    @pytest.mark.P1
    def test_extract_id_of_other_kind(self):
        assert routes.EXPERIENCE.extract_id("/passed-interview/15/") == ""
        assert routes.INTERVIEW.extract_id("/passed-interview/15/") == "15"
        assert routes.INTERVIEW.extract_id(None) == ""

    @allure.title("Sub-routes do not satisfy the parent route's URL pattern")
    @pytest.mark.P1
    def test_url_pattern_is_anchored(self):
        assert routes.JUKU.url_pattern().search("https://example.com/juku/7/")
        assert not routes.JUKU.url_pattern().search("https://example.com/juku/7/review/")
        assert routes.CLASS_REQUEST.url_pattern().search("https://example.com/class/3/request/")
        assert not routes.CLASSROOM.url_pattern().search("https://example.com/class/3/request/")

    @allure.title("href selectors anchor on the literal part of the template")
    @pytest.mark.P2
    def test_href_selector(self):
        assert routes.COURSE.href_selector("42") == '[href*="/course/42/"]'
        assert routes.EXPERIENCE.href_selector(9) == '[href*="/shingaku/experience/9/"]'

    @pytest.mark.P2
    def test_template_requires_id(self):
        with pytest.raises(ValueError):
            EntityRoute("broken", "/juku/{juku_id}/")
