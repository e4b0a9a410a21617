import allure
import pytest

from juku_suites.ui_testing.framework.exceptions import FilterApplyTimeout, FilterModalTimeout
from juku_suites.ui_testing.framework.filter_aggregator import (
    DateSort,
    EvaluationSort,
    FilterAggregator,
    FilterSelection,
    Purpose,
    RespondentType,
)
from juku_suites.unit.fake_site import FakeFilterModal


def build(make_surface, **kwargs):
    modal = FakeFilterModal(**kwargs)
    surface = make_surface(modal.opener, modal.results, modal.modal)
    return modal, surface, FilterAggregator(surface)


@allure.epic("UI Framework")
@allure.feature("Filter Aggregator")
class TestFilterSelection:

    @allure.title("Plain values are coerced to enums and frozensets")
    @pytest.mark.P1
    @pytest.mark.filters
    def test_coercion(self):
        selection = FilterSelection(
            date_sort="old",
            respondent_types="parent",
            purposes=["highSchool", Purpose.UNIVERSITY],
            ratings=[5, 4, 5],
        )

        assert selection.date_sort is DateSort.OLD
        assert selection.respondent_types == frozenset({RespondentType.PARENT})
        assert selection.purposes == frozenset({Purpose.HIGH_SCHOOL, Purpose.UNIVERSITY})
        assert selection.ratings == frozenset({4, 5})
        assert selection.evaluation_sort is None

    @allure.title("Ratings outside 1..5 are rejected")
    @pytest.mark.P0
    def test_invalid_rating(self):
        with pytest.raises(ValueError):
            FilterSelection(ratings={0, 3})
        with pytest.raises(ValueError):
            FilterSelection(ratings=[6])

    @pytest.mark.P2
    def test_single_rating(self):
        assert FilterSelection(ratings=5).ratings == frozenset({5})
        assert FilterSelection(ratings="4").ratings == frozenset({4})
        with pytest.raises(ValueError):
            FilterSelection(ratings=7)

    @pytest.mark.P2
    def test_unknown_enum_value(self):
        with pytest.raises(ValueError):
            FilterSelection(purposes=["college"])

    @pytest.mark.P1
    def test_merge_keeps_unset_axes(self):
        base = FilterSelection(date_sort="new", respondent_types={"student"}, ratings={5})
        merged = FilterSelection(ratings={1, 2}).merged_over(base)

        assert merged == FilterSelection(date_sort="new", respondent_types={"student"},
                                         ratings={1, 2})

    @pytest.mark.P3
    def test_str_lists_set_axes_only(self):
        assert str(FilterSelection(ratings={5, 4}, date_sort="new")) == (
            "FilterSelection(date_sort=new, ratings=[4, 5])"
        )


@allure.epic("UI Framework")
@allure.feature("Filter Aggregator")
class TestFilterModal:

    @allure.title("Every axis set by apply() is read back by read_current()")
    @pytest.mark.P0
    @pytest.mark.filters
    @pytest.mark.asyncio
    async def test_apply_read_round_trip(self, make_surface):
        modal, surface, filters = build(make_surface)
        selection = FilterSelection(
            date_sort=DateSort.OLD,
            evaluation_sort=EvaluationSort.LOW,
            respondent_types={RespondentType.PARENT},
            purposes={Purpose.HIGH_SCHOOL, Purpose.UNIVERSITY},
            ratings={4, 5},
            keyword="英語",
        )

        submitted = await filters.apply(selection)
        current = await filters.read_current()

        assert submitted == selection
        assert current == selection
        assert modal.submissions == 1
        assert "domcontentloaded" in surface.page.load_states
        assert not await filters.is_open()

    @allure.title("Axes not named by apply() keep their values")
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_partial_apply_preserves_other_axes(self, make_surface):
        modal, _, filters = build(
            make_surface, initially_checked=("新しい順", "高い順", "保護者", "大学受験", "星5")
        )
        before = await filters.read_current()

        await filters.apply(ratings={3})
        after = await filters.read_current()

        assert after == FilterSelection(ratings={3}).merged_over(before)
        assert after.respondent_types == frozenset({RespondentType.PARENT})
        assert after.purposes == frozenset({Purpose.UNIVERSITY})
        assert after.date_sort is DateSort.NEW
        assert "星5" not in modal.checked_labels()

    @allure.title("A set axis is replaced, unchecking options not listed")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_set_axis_replaced(self, make_surface):
        modal, _, filters = build(make_surface, initially_checked=("保護者", "生徒"))

        await filters.apply(respondent_types=[RespondentType.STUDENT])

        assert (await filters.read_current()).respondent_types == frozenset(
            {RespondentType.STUDENT}
        )
        assert "保護者" not in modal.checked_labels()

    @allure.title("Sort axes with nothing checked read as None")
    @pytest.mark.P2
    @pytest.mark.asyncio
    async def test_cleared_form(self, make_surface):
        _, _, filters = build(make_surface)

        await filters.clear()
        current = await filters.read_current()

        assert current.date_sort is None
        assert current.evaluation_sort is None
        assert current.ratings == frozenset()
        assert await filters.is_open()

    @allure.title("A submission that never settles raises FilterApplyTimeout")
    @pytest.mark.P0
    @pytest.mark.asyncio
    async def test_apply_timeout(self, make_surface):
        modal, _, filters = build(make_surface, submit_settles=False)

        with pytest.raises(FilterApplyTimeout) as exc_info:
            await filters.apply(ratings={5})

        assert exc_info.value.observed == "modal open"
        assert exc_info.value.selection == FilterSelection(ratings={5})
        assert modal.submissions == 1

    @allure.title("A modal that does not open raises FilterModalTimeout")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_modal_timeout(self, make_surface):
        _, _, filters = build(make_surface, delay=5.0)

        with pytest.raises(FilterModalTimeout):
            await filters.open()

    @allure.title("A modal that does not close raises FilterModalTimeout")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_close_timeout(self, make_surface):
        _, _, filters = build(make_surface, closable=False)
        await filters.open()

        with pytest.raises(FilterModalTimeout) as exc_info:
            await filters.close()

        assert exc_info.value.action == "close"
        assert exc_info.value.observed_open is True
        assert await filters.is_open()

    @allure.title("Reading a closed modal fails when it cannot be closed again")
    @pytest.mark.P1
    @pytest.mark.asyncio
    async def test_read_current_close_timeout(self, make_surface):
        _, _, filters = build(make_surface, closable=False)

        with pytest.raises(FilterModalTimeout) as exc_info:
            await filters.read_current()

        assert exc_info.value.context()["action"] == "close"
