import allure
import pytest

from juku_suites.ui_testing.framework.exceptions import (
    InactiveScopeError,
    TabActivationTimeout,
    TriggerNotFound,
)
from juku_suites.ui_testing.framework.tab_controller import (
    AttributeActiveRule,
    TabController,
    match_label,
)
from juku_suites.unit.fake_dom import el
from juku_suites.unit.fake_site import FakeTabs, course_card

GRADES = ["小学生", "中学生", "高校生"]


def grade_tabs(**kwargs):
    contents = [[course_card(str(i + 1), f"{grade}コース", "")] for i, grade in enumerate(GRADES)]
    return FakeTabs(GRADES, contents, **kwargs)


@allure.epic("UI Framework")
@allure.feature("Tab Controller")
class TestTabQueries:

    @pytest.mark.P1
    @pytest.mark.tabs
    @pytest.mark.asyncio
    async def test_labels_and_active_state(self, make_surface):
        tabs = grade_tabs(active=1)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        assert await controller.list_labels() == GRADES
        assert await controller.active_label() == "中学生"
        assert await controller.is_active("中学生")
        assert not await controller.is_active("高校生")

    @allure.title("No active trigger reads as None")
    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_no_active_trigger(self, make_surface):
        tabs = grade_tabs(active=None)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        assert await controller.active_label() is None
        with pytest.raises(InactiveScopeError):
            await controller.active_content()

    @allure.title("Labels match exactly first, then by containment")
    @pytest.mark.P1
    def test_match_label_tiers(self):
        labels = ["高校生コース", "高校生", "中学生"]
        assert match_label(labels, "高校生") == 1
        assert match_label(labels, "中学") == 2
        assert match_label(labels, "  中学生 ") == 2
        assert match_label(labels, "大学生") is None
        assert match_label(labels, "") is None


@allure.epic("UI Framework")
@allure.feature("Tab Controller")
class TestTabActivation:

    @allure.title("Activation waits for client script to switch the tab")
    @pytest.mark.P0
    @pytest.mark.tabs
    @pytest.mark.asyncio
    async def test_delayed_activation(self, make_surface):
        tabs = grade_tabs(delay=0.1)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        label = await controller.activate("高校生")

        assert label == "高校生"
        assert await controller.active_label() == "高校生"
        assert tabs.clicks == 1

    @allure.title("Activating the active tab does not click")
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_idempotent_activation(self, make_surface):
        tabs = grade_tabs(active=0)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        assert await controller.activate("小学生") == "小学生"
        assert tabs.clicks == 0

    @allure.title("Containing labels resolve to the full trigger label")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_partial_label(self, make_surface):
        tabs = FakeTabs(["個別指導コース", "集団授業コース"], active=0, delay=0.01)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        assert await controller.activate("集団") == "集団授業コース"

    @allure.title("Unknown labels raise TriggerNotFound listing what exists")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_unknown_label(self, make_surface):
        tabs = grade_tabs()
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        with pytest.raises(TriggerNotFound) as exc_info:
            await controller.activate("大学生")

        assert exc_info.value.available == GRADES
        assert tabs.clicks == 0

    @allure.title("An unresponsive widget raises TabActivationTimeout with the observed tab")
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_activation_timeout(self, make_surface):
        tabs = grade_tabs(active=0, responsive=False)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        with pytest.raises(TabActivationTimeout) as exc_info:
            await controller.activate("中学生", timeout=0.2)

        error = exc_info.value
        assert error.requested == "中学生"
        assert error.observed == "小学生"
        assert error.timeout == 0.2
        assert "小学生" in str(error)

    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_activate_index(self, make_surface):
        tabs = grade_tabs(delay=0.01)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        assert await controller.activate_index(2) == "高校生"
        with pytest.raises(TriggerNotFound):
            await controller.activate_index(5)


@allure.epic("UI Framework")
@allure.feature("Tab Controller")
class TestTabScopes:

    @allure.title("Content is scoped to the active tab")
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_content_for_active_tab(self, make_surface):
        tabs = grade_tabs(delay=0.01)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        await controller.activate("中学生")
        content = await controller.content_for("中学生")

        assert await content.locator(".bjc-post-course-title").first.text_content() == "中学生コース"
        assert await content.locator(".bjc-post-course").count() == 1

    @allure.title("Reading an inactive tab's content is a precondition violation")
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_inactive_content_raises(self, make_surface):
        tabs = grade_tabs(active=0)
        controller = TabController(make_surface(tabs.wrap), ".bjc-juku-inner-tab-wrap")

        with pytest.raises(InactiveScopeError) as exc_info:
            await controller.content_for("高校生")

        assert exc_info.value.requested == "高校生"
        assert exc_info.value.active == "小学生"
        assert isinstance(exc_info.value, AssertionError)

    @allure.title("aria-selected tabs are driven through an attribute rule")
    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_attribute_active_rule(self, make_surface):
        triggers = [
            el("button", "", "概要", role="tab", aria_selected="true"),
            el("button", "", "料金", role="tab", aria_selected="false"),
        ]

        def select(target):
            for trigger in triggers:
                trigger.attrs["aria-selected"] = "true" if trigger is target else "false"

        for trigger in triggers:
            trigger.on_click = select
        panels = [el("div", "", "概要本文", role="tabpanel"), el("div", "", "料金表", role="tabpanel")]
        surface = make_surface(el("div", "tablist", "", *triggers, *panels))
        controller = TabController(
            surface, ".tablist", trigger_selector="[role=tab]",
            content_selector="[role=tabpanel]", active_rule=AttributeActiveRule(),
        )

        await controller.activate("料金")

        assert await controller.active_label() == "料金"
        assert await (await controller.active_content()).text_content() == "料金表"
