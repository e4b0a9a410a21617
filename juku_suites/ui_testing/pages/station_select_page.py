"""
================================================================================
Station Select Page Object
================================================================================

Page Object for the station/line search page reached from the top page's
"search by station" entry. Railway lines are accordion groups; picking a
station opens the search results for it.

================================================================================
"""

from typing import Iterable, List, Optional

import allure
from loguru import logger

from juku_suites.ui_testing.framework.page_base import PageBase
from juku_suites.ui_testing.framework.smart_locator import SmartLocator
from juku_suites.ui_testing.framework.station_resolver import (
    StationDescriptor,
    StationLineResolver,
    StationMatch,
)
from juku_suites.ui_testing.framework.surface import UISurface


class StationSelectPage(PageBase):
    """
    Page Object for the station/line search page.

    Usage:
        stations = StationSelectPage(surface)
        await stations.expand_line("JR千歳線")
        match = await stations.select_station("新札幌", line="JR千歳線")
    """

    URL_PATH = "/search/station/{area}/"

    def __init__(self, surface: UISurface):
        super().__init__(surface)
        self.resolver = StationLineResolver(surface)

    # ============================================================
    # Page Elements (Smart Locators)
    # ============================================================

    @property
    def heading(self) -> SmartLocator:
        """Page heading above the line list."""
        return self.smart_locator(
            primary=".bjc-search-form--heading",
            fallbacks=["h1"],
            name="Station Page Heading",
        )

    # ============================================================
    # Actions
    # ============================================================

    async def get_line_names(self) -> List[str]:
        return await self.resolver.group_labels()

    async def expand_line(self, line: str) -> str:
        return await self.resolver.expand(line)

    async def collapse_line(self, line: str) -> str:
        return await self.resolver.collapse(line)

    async def is_line_open(self, line: str) -> bool:
        return await self.resolver.is_expanded(line)

    async def get_stations_in_line(self, line: str) -> List[str]:
        """Bare station names of an expanded line."""
        return [station.name for station in await self.resolver.stations_in(line)]

    async def get_station_count(self, station: str, line: Optional[str] = None) -> int:
        return await self.resolver.station_count(station, scope=line)

    async def select_station(self, station: str, line: Optional[str] = None,
                             strict: bool = False) -> StationMatch:
        """
        Click a station link and wait for the results document.

        Args:
            station: Station label
            line: Line to expand and search; every expanded line when None
            strict: Refuse ambiguous labels instead of taking the first candidate
        """
        if line is not None:
            await self.resolver.expand(line)
        match = await self.resolver.click_station(station, scope=line, strict=strict)
        await self.wait_for_page_load("domcontentloaded")
        return match

    async def busiest_station(self, lines: Iterable[str]) -> Optional[StationDescriptor]:
        """
        Station with the highest result count across lines (expanding each).

        Returns:
            None when none of the lines lists a station with results
        """
        best: Optional[StationDescriptor] = None
        with allure.step("Find station with the most results"):
            for line in lines:
                await self.resolver.expand(line)
                for station in await self.resolver.stations_in(line):
                    if station.result_count > (best.result_count if best else 0):
                        best = station
        if best:
            logger.info(f"Busiest station: {best.group}/{best.name} ({best.result_count})")
        return best


__all__ = ["StationSelectPage"]
