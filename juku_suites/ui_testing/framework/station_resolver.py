"""
================================================================================
Station Line Resolver
================================================================================

Drives the station-selection page: railway lines are accordion groups whose
targets list station links. A group must be visibly expanded before its
stations are resolved; expansion is verified by polling, not assumed after
the click.

Station lookup is two-tier over expanded groups only:
    1. exact: the label equals the rendered text, or the rendered text with
       its result-count annotation removed ('札幌（1721件）' -> '札幌')
    2. contains: the rendered text contains the label

Exact matches always win over containing matches. Within the winning tier
the first candidate in group order, then DOM order, is used and the
ambiguity is logged; `strict=True` raises AmbiguousStationMatch instead.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Locator

from .exceptions import (
    AccordionExpansionTimeout,
    AmbiguousStationMatch,
    CollapsedGroupError,
    StationNotFound,
    TriggerNotFound,
)
from .field_extractor import (
    STATION_COUNT,
    extract,
    has_class_token,
    normalize_space,
    strip_count_annotation,
)
from .surface import UISurface
from .tab_controller import match_label
from .wait_helpers import poll_until

EXACT = "exact"
CONTAINS = "contains"


@dataclass(frozen=True)
class StationDescriptor:
    """
    One station link as rendered.

    Attributes:
        name: Bare station name ('札幌')
        text: Full rendered text ('札幌（1721件）')
        href: Link target
        result_count: Annotated result count (0 when not annotated)
        group: Label of the line group listing the station
    """
    name: str
    text: str
    href: str
    result_count: int
    group: str


@dataclass(frozen=True)
class AccordionGroup:
    """A line group; children are only listed while the group is expanded."""
    group_label: str
    is_expanded: bool
    children: Tuple[StationDescriptor, ...] = ()


@dataclass(frozen=True)
class StationMatch:
    """Resolved station plus how it was matched."""
    station: StationDescriptor
    tier: str
    locator: Locator = field(compare=False, repr=False)
    candidates: Tuple[StationDescriptor, ...] = ()

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1


class StationLineResolver:
    """
    Resolver over the line accordion of a station-selection page.

    Usage:
        resolver = StationLineResolver(surface)
        await resolver.expand("ＪＲ函館本線(函館～長万部)")
        match = await resolver.click_station("札幌")
    """

    def __init__(
        self,
        surface: UISurface,
        root: Optional[Union[str, Locator]] = None,
        trigger_selector: str = ".bjc-search-form--station-list-accordion-trigger",
        target_selector: str = ".bjc-search-form--station-list-accordion-target",
        station_selector: str = ".bjc-form--checkbox--wrap a.search-form",
        open_class: str = "is-open",
    ):
        """
        Args:
            surface: Rendered page handle
            root: Selector or locator containing the accordion (whole page when None)
            trigger_selector: Selector of one group trigger
            target_selector: Selector of one group target; targets pair with
                triggers by position
            station_selector: Selector of one station link inside a target
            open_class: Class token an expanded target carries
        """
        self.surface = surface
        if root is None:
            root = "body"
        self.root = surface.locator(root) if isinstance(root, str) else root
        self.trigger_selector = trigger_selector
        self.target_selector = target_selector
        self.station_selector = station_selector
        self.open_class = open_class

    @property
    def triggers(self) -> Locator:
        return self.root.locator(self.trigger_selector)

    @property
    def targets(self) -> Locator:
        return self.root.locator(self.target_selector)

    # =========================================================================
    # Groups
    # =========================================================================

    async def group_labels(self) -> List[str]:
        """Line labels in DOM order."""
        triggers = self.triggers
        return [
            normalize_space(await triggers.nth(i).text_content())
            for i in range(await triggers.count())
        ]

    async def _group_index(self, line: str) -> Tuple[int, str]:
        labels = await self.group_labels()
        index = match_label(labels, line)
        if index is None:
            raise TriggerNotFound(line, labels)
        return index, labels[index]

    async def _target_expanded(self, index: int) -> bool:
        targets = self.targets
        if index >= await targets.count():
            return False
        target = targets.nth(index)
        if not await target.is_visible():
            return False
        return has_class_token(await target.get_attribute("class"), self.open_class)

    async def is_expanded(self, line: str) -> bool:
        """Whether the line's target is visibly open."""
        index, _ = await self._group_index(line)
        return await self._target_expanded(index)

    async def expanded_groups(self) -> List[str]:
        """Labels of every visibly open group, in DOM order."""
        labels = await self.group_labels()
        return [label for i, label in enumerate(labels) if await self._target_expanded(i)]

    async def groups(self) -> List[AccordionGroup]:
        """Every group with its expansion state and, when expanded, its stations."""
        result = []
        for i, label in enumerate(await self.group_labels()):
            expanded = await self._target_expanded(i)
            children = ()
            if expanded:
                children = tuple(desc for desc, _ in await self._stations_at(i, label))
            result.append(AccordionGroup(label, expanded, children))
        return result

    async def _toggle(self, line: str, want_expanded: bool, timeout: Optional[float]) -> str:
        index, label = await self._group_index(line)
        if await self._target_expanded(index) == want_expanded:
            logger.debug(f"Line '{label}' already {'expanded' if want_expanded else 'collapsed'}")
            return label

        config = self.surface.wait_config("accordion_expansion")
        if timeout is not None:
            config = replace(config, timeout=timeout)

        await self.triggers.nth(index).click()

        async def check_state():
            expanded = await self._target_expanded(index)
            return expanded == want_expanded, expanded

        action = "expand" if want_expanded else "collapse"
        result = await poll_until(check_state, config, f"Wait for line '{label}' to {action}")
        if not result.ok:
            observed = await self.expanded_groups()
            logger.error(f"Line '{label}' did not {action} (expanded: {observed})")
            raise AccordionExpansionTimeout(label, observed, config.timeout, result.last_error)

        logger.info(f"Line '{label}' {action}ed")
        return label

    async def expand(self, line: str, timeout: Optional[float] = None) -> str:
        """
        Open a line group and block until its target is visibly open.

        Already-expanded groups succeed without clicking.

        Returns:
            The full label of the expanded group

        Raises:
            TriggerNotFound: No line carries the label
            AccordionExpansionTimeout: The target did not open in time
        """
        with allure.step(f"Expand line: {line}"):
            return await self._toggle(line, True, timeout)

    async def collapse(self, line: str, timeout: Optional[float] = None) -> str:
        """Close a line group and block until its target is no longer open."""
        with allure.step(f"Collapse line: {line}"):
            return await self._toggle(line, False, timeout)

    # =========================================================================
    # Stations
    # =========================================================================

    async def _stations_at(self, index: int, group: str) -> List[Tuple[StationDescriptor, Locator]]:
        links = self.targets.nth(index).locator(self.station_selector)
        entries = []
        for i in range(await links.count()):
            link = links.nth(i)
            text = normalize_space(await link.text_content())
            descriptor = StationDescriptor(
                name=strip_count_annotation(text),
                text=text,
                href=await link.get_attribute("href") or "",
                result_count=extract(text, STATION_COUNT),
                group=group,
            )
            entries.append((descriptor, link))
        return entries

    async def stations_in(self, line: str) -> List[StationDescriptor]:
        """
        Stations listed under a line.

        Raises:
            CollapsedGroupError: The line is not expanded
        """
        index, label = await self._group_index(line)
        if not await self._target_expanded(index):
            raise CollapsedGroupError(label)
        return [desc for desc, _ in await self._stations_at(index, label)]

    async def _searchable(
        self, scope: Optional[Union[str, Iterable[str]]]
    ) -> List[Tuple[int, str]]:
        if scope is None:
            labels = await self.group_labels()
            return [(i, label) for i, label in enumerate(labels)
                    if await self._target_expanded(i)]

        lines = [scope] if isinstance(scope, str) else list(scope)
        searchable = []
        for line in lines:
            index, label = await self._group_index(line)
            if not await self._target_expanded(index):
                raise CollapsedGroupError(label)
            searchable.append((index, label))
        return searchable

    async def match_stations(
        self,
        label: str,
        scope: Optional[Union[str, Iterable[str]]] = None,
    ) -> Tuple[Optional[str], List[Tuple[StationDescriptor, Locator]]]:
        """
        Candidates of the winning match tier.

        Args:
            label: Station label to look up
            scope: Line label(s) to search; every expanded line when None

        Returns:
            (tier, candidates) with tier EXACT or CONTAINS; (None, []) when
            nothing matches

        Raises:
            CollapsedGroupError: A scoped line is not expanded
        """
        wanted = normalize_space(label)
        entries = []
        for index, group in await self._searchable(scope):
            entries.extend(await self._stations_at(index, group))

        exact = [(d, loc) for d, loc in entries if wanted in (d.text, d.name)]
        if exact:
            return EXACT, exact
        contains = [(d, loc) for d, loc in entries if wanted and wanted in d.text]
        if contains:
            return CONTAINS, contains
        return None, []

    async def resolve_station(
        self,
        label: str,
        scope: Optional[Union[str, Iterable[str]]] = None,
        strict: bool = False,
    ) -> StationMatch:
        """
        Resolve a label to one station link.

        Raises:
            StationNotFound: No station matched in the searched groups
            AmbiguousStationMatch: strict and more than one candidate won
            CollapsedGroupError: A scoped line is not expanded
        """
        tier, candidates = await self.match_stations(label, scope)
        if not candidates:
            searched = [group for _, group in await self._searchable(scope)]
            raise StationNotFound(label, searched)

        descriptors = tuple(desc for desc, _ in candidates)
        if len(candidates) > 1:
            texts = [f"{d.group}/{d.text}" for d in descriptors]
            if strict:
                raise AmbiguousStationMatch(label, texts)
            logger.warning(
                f"Station '{label}' matched {len(candidates)} {tier} candidates "
                f"{texts}; using the first"
            )

        station, locator = candidates[0]
        return StationMatch(station, tier, locator, descriptors)

    async def click_station(
        self,
        label: str,
        scope: Optional[Union[str, Iterable[str]]] = None,
        strict: bool = False,
    ) -> StationMatch:
        """Resolve a station and click its link."""
        with allure.step(f"Select station: {label}"):
            match = await self.resolve_station(label, scope, strict)
            await match.locator.click()
            logger.info(f"Clicked station '{match.station.text}' ({match.tier} match)")
            return match

    async def station_count(
        self,
        label: str,
        scope: Optional[Union[str, Iterable[str]]] = None,
    ) -> int:
        """Result count annotated next to a station."""
        match = await self.resolve_station(label, scope)
        return match.station.result_count


__all__ = [
    "EXACT",
    "CONTAINS",
    "StationDescriptor",
    "AccordionGroup",
    "StationMatch",
    "StationLineResolver",
]
