"""
================================================================================
Filter Aggregator
================================================================================

Controller over the review filter modal. Several independent axes (two sort
orders, respondent and purpose sets, a star-rating set, a keyword) are set in
one pass and submitted together; `read_current()` recovers the same shape from
the live controls.

`apply()` is a merge at axis granularity:
    - an axis left as None in the FilterSelection is not touched
    - a set axis that is given replaces that axis: listed options end up
      checked, the others unchecked

so that read_current() after apply(S) equals S on every axis S sets.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Union

import allure
from loguru import logger
from playwright.async_api import Locator

from .exceptions import FilterApplyTimeout, FilterModalTimeout
from .field_extractor import has_class_token
from .surface import UISurface
from .wait_helpers import poll_until


class DateSort(str, Enum):
    NEW = "new"
    OLD = "old"


class EvaluationSort(str, Enum):
    HIGH = "high"
    LOW = "low"


class RespondentType(str, Enum):
    PARENT = "parent"
    STUDENT = "student"


class Purpose(str, Enum):
    UNIVERSITY = "university"
    HIGH_SCHOOL = "highSchool"
    MIDDLE_SCHOOL = "middleSchool"
    ELEMENTARY = "elementary"
    TEST = "test"
    INTEGRATED = "integrated"
    ENGLISH = "english"


# Accessible names of the modal's controls
DATE_SORT_LABELS: Dict[DateSort, str] = {
    DateSort.NEW: "新しい順",
    DateSort.OLD: "古い順",
}
EVALUATION_SORT_LABELS: Dict[EvaluationSort, str] = {
    EvaluationSort.HIGH: "高い順",
    EvaluationSort.LOW: "低い順",
}
RESPONDENT_LABELS: Dict[RespondentType, str] = {
    RespondentType.PARENT: "保護者",
    RespondentType.STUDENT: "生徒",
}
PURPOSE_LABELS: Dict[Purpose, str] = {
    Purpose.UNIVERSITY: "大学受験",
    Purpose.HIGH_SCHOOL: "高校受験",
    Purpose.MIDDLE_SCHOOL: "中学受験",
    Purpose.ELEMENTARY: "小学校受験",
    Purpose.TEST: "テスト対策",
    Purpose.INTEGRATED: "中高一貫校",
    Purpose.ENGLISH: "子供英語",
}
RATING_LABELS: Dict[int, str] = {rating: f"星{rating}" for rating in range(1, 6)}

KEYWORD_PLACEHOLDER = "キーワードを入力"
SUBMIT_LABEL = "検索する"
CLEAR_LABEL = "クリア"
CLOSE_LABEL = "close"
OPEN_LABEL = "絞り込み"


def _enum_set(values: Optional[Iterable], enum_type) -> Optional[FrozenSet]:
    if values is None:
        return None
    if isinstance(values, (str, enum_type)):
        values = [values]
    return frozenset(enum_type(value) for value in values)


@dataclass(frozen=True)
class FilterSelection:
    """
    One value per filter axis; None means "leave this axis as it is".

    Caller-built selections (to submit) and selections recovered from the
    form (to verify) share this type and compare structurally.
    """
    date_sort: Optional[DateSort] = None
    evaluation_sort: Optional[EvaluationSort] = None
    respondent_types: Optional[FrozenSet[RespondentType]] = None
    purposes: Optional[FrozenSet[Purpose]] = None
    ratings: Optional[FrozenSet[int]] = None
    keyword: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept plain strings, lists and sets; store enums and frozensets
        if self.date_sort is not None:
            object.__setattr__(self, "date_sort", DateSort(self.date_sort))
        if self.evaluation_sort is not None:
            object.__setattr__(self, "evaluation_sort", EvaluationSort(self.evaluation_sort))
        object.__setattr__(
            self, "respondent_types", _enum_set(self.respondent_types, RespondentType)
        )
        object.__setattr__(self, "purposes", _enum_set(self.purposes, Purpose))
        if self.ratings is not None:
            values = self.ratings
            if isinstance(values, (int, str)):
                values = [values]
            ratings = frozenset(int(rating) for rating in values)
            invalid = sorted(r for r in ratings if r not in RATING_LABELS)
            if invalid:
                raise ValueError(f"Ratings must be within 1..5, got {invalid}")
            object.__setattr__(self, "ratings", ratings)

    def set_axes(self) -> Dict[str, object]:
        """Axes this selection sets (non-None)."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def merged_over(self, base: "FilterSelection") -> "FilterSelection":
        """The selection expected after applying self on top of base."""
        values = {f.name: getattr(base, f.name) for f in fields(base)}
        values.update(self.set_axes())
        return FilterSelection(**values)

    def __str__(self) -> str:
        parts = []
        for name, value in self.set_axes().items():
            if isinstance(value, frozenset):
                value = sorted(v.value if isinstance(v, Enum) else v for v in value)
            elif isinstance(value, Enum):
                value = value.value
            parts.append(f"{name}={value}")
        return f"FilterSelection({', '.join(parts)})"


class FilterAggregator:
    """
    Controller over the filter modal of a result list.

    Usage:
        filters = FilterAggregator(surface)
        await filters.apply(FilterSelection(date_sort="new", ratings={4, 5}))
        assert (await filters.read_current()).ratings == {4, 5}
    """

    def __init__(
        self,
        surface: UISurface,
        modal_selector: str = "#modal-1",
        open_button_name: str = OPEN_LABEL,
        results_selector: Optional[str] = ".bjc-juku-inner",
        open_class: str = "is-open",
    ):
        """
        Args:
            surface: Rendered page handle
            modal_selector: Selector of the modal dialog
            open_button_name: Accessible name of the button opening the modal
            results_selector: Container of the result list; the submission is
                settled once it is visible again (None to skip that check)
            open_class: Class token the open modal carries
        """
        self.surface = surface
        self.modal = surface.locator(modal_selector)
        self.open_button_name = open_button_name
        self.results_selector = results_selector
        self.open_class = open_class

    # =========================================================================
    # Controls
    # =========================================================================

    @property
    def open_button(self) -> Locator:
        return self.surface.page.get_by_role(
            "button", name=self.open_button_name, exact=True
        ).first

    def radio(self, label: str) -> Locator:
        return self.modal.get_by_role("radio", name=label, exact=True)

    def checkbox(self, label: str) -> Locator:
        return self.modal.get_by_role("checkbox", name=label, exact=True)

    def button(self, label: str) -> Locator:
        return self.modal.get_by_role("button", name=label, exact=True)

    @property
    def keyword_input(self) -> Locator:
        return self.modal.get_by_placeholder(KEYWORD_PLACEHOLDER)

    async def _is_checked(self, control: Locator) -> bool:
        # A missing control reads as unchecked instead of waiting for it
        if await control.count() == 0:
            return False
        return await control.first.is_checked()

    async def _set_checked(self, control: Locator, checked: bool) -> None:
        if await self._is_checked(control) == checked:
            return
        if checked:
            await control.first.check()
        else:
            await control.first.uncheck()

    # =========================================================================
    # Modal state
    # =========================================================================

    async def is_open(self) -> bool:
        """Whether the modal is visible and carries the open class."""
        if await self.modal.count() == 0:
            return False
        modal = self.modal.first
        if not await modal.is_visible():
            return False
        return has_class_token(await modal.get_attribute("class"), self.open_class)

    async def open(self) -> None:
        """
        Open the modal and block until it is open.

        Raises:
            FilterModalTimeout: The modal did not open in time
        """
        if await self.is_open():
            return
        with allure.step("Open filter modal"):
            config = self.surface.wait_config("modal_open")
            await self.open_button.click()

            async def check_open():
                state = await self.is_open()
                return state, state

            result = await poll_until(check_open, config, "Wait for filter modal to open")
            if not result.ok:
                logger.error(f"Filter modal not open after {config.timeout}s")
                raise FilterModalTimeout(
                    config.timeout, result.last_error, action="open", observed_open=False
                )
            logger.debug("Filter modal open")

    async def close(self) -> None:
        """
        Close the modal and block until it is closed.

        Raises:
            FilterModalTimeout: The modal is still open after the bound
        """
        if not await self.is_open():
            return
        with allure.step("Close filter modal"):
            await self.button(CLOSE_LABEL).first.click()

            async def check_closed():
                state = await self.is_open()
                return not state, state

            config = self.surface.wait_config("modal_open")
            result = await poll_until(check_closed, config, "Wait for filter modal to close")
            if not result.ok:
                logger.error(f"Filter modal still open after {config.timeout}s")
                raise FilterModalTimeout(
                    config.timeout, result.last_error, action="close", observed_open=True
                )
            logger.debug("Filter modal closed")

    async def clear(self) -> None:
        """Press the form's clear button (opens the modal first)."""
        await self.open()
        with allure.step("Clear filter form"):
            await self.button(CLEAR_LABEL).first.click()

    # =========================================================================
    # Apply / read
    # =========================================================================

    async def _set_axis(self, labels: Dict, wanted: FrozenSet) -> None:
        for option, label in labels.items():
            await self._set_checked(self.checkbox(label), option in wanted)

    async def _settled(self):
        if await self.is_open():
            return False, "modal open"
        if self.results_selector is None:
            return True, "modal closed"
        results = self.surface.locator(self.results_selector)
        if await results.count() == 0:
            return False, "result list not rendered"
        visible = await results.first.is_visible()
        return visible, "result list visible" if visible else "result list hidden"

    async def apply(self, selection: Union[FilterSelection, None] = None, **axes) -> FilterSelection:
        """
        Set every axis the selection names, submit, and wait for the reload.

        Args:
            selection: Axes to set; keyword arguments build one when omitted

        Returns:
            The submitted selection

        Raises:
            FilterModalTimeout: The modal did not open
            FilterApplyTimeout: The result list did not settle after submission
        """
        if selection is None:
            selection = FilterSelection(**axes)

        with allure.step(f"Apply filters: {selection}"):
            await self.open()

            if selection.date_sort is not None:
                await self.radio(DATE_SORT_LABELS[selection.date_sort]).first.check()
            if selection.evaluation_sort is not None:
                await self.radio(EVALUATION_SORT_LABELS[selection.evaluation_sort]).first.check()
            if selection.respondent_types is not None:
                await self._set_axis(RESPONDENT_LABELS, selection.respondent_types)
            if selection.purposes is not None:
                await self._set_axis(PURPOSE_LABELS, selection.purposes)
            if selection.ratings is not None:
                await self._set_axis(RATING_LABELS, selection.ratings)
            if selection.keyword is not None:
                await self.keyword_input.first.fill(selection.keyword)

            config = self.surface.wait_config("filter_apply")
            await self.button(SUBMIT_LABEL).first.click()

            result = await poll_until(self._settled, config, "Wait for filtered results")
            if not result.ok:
                logger.error(f"Filter submission not settled: {result.observed}")
                raise FilterApplyTimeout(
                    selection, result.observed, config.timeout, result.last_error
                )

            await self.surface.wait_for_load_state("domcontentloaded")
            logger.info(f"Applied {selection}")
            return selection

    async def _checked_option(self, labels: Dict):
        for option, label in labels.items():
            if await self._is_checked(self.radio(label)):
                return option
        return None

    async def _checked_set(self, labels: Dict) -> FrozenSet:
        return frozenset(
            [option for option, label in labels.items()
             if await self._is_checked(self.checkbox(label))]
        )

    async def read_current(self) -> FilterSelection:
        """
        Selection reconstructed from the live form controls.

        The controls are only exposed while the modal is open, so a closed
        modal is opened for the read and closed again afterwards. A sort axis
        with no radio checked reads as None.
        """
        was_open = await self.is_open()
        if not was_open:
            await self.open()
        current = await self._read_controls()
        if not was_open:
            await self.close()
        logger.debug(f"Current filters: {current}")
        return current

    async def _read_controls(self) -> FilterSelection:
        keyword = ""
        if await self.keyword_input.count() > 0:
            keyword = await self.keyword_input.first.input_value()

        return FilterSelection(
            date_sort=await self._checked_option(DATE_SORT_LABELS),
            evaluation_sort=await self._checked_option(EVALUATION_SORT_LABELS),
            respondent_types=await self._checked_set(RESPONDENT_LABELS),
            purposes=await self._checked_set(PURPOSE_LABELS),
            ratings=await self._checked_set(RATING_LABELS),
            keyword=keyword,
        )


__all__ = [
    "DateSort",
    "EvaluationSort",
    "RespondentType",
    "Purpose",
    "FilterSelection",
    "FilterAggregator",
    "DATE_SORT_LABELS",
    "EVALUATION_SORT_LABELS",
    "RESPONDENT_LABELS",
    "PURPOSE_LABELS",
    "RATING_LABELS",
]
