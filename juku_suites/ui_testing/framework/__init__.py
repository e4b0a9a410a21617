"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based synchronisation and extraction layer for the juku site.

Components:
    - surface: explicit handle on one rendered page
    - wait_helpers: bounded polling shared by every controller
    - field_extractor: rendered text -> typed fields
    - card_reader: repeated cards -> records
    - tab_controller: tab widgets with verified activation
    - station_resolver: line accordion and station lookup
    - filter_aggregator: multi-axis filter modal
    - routes: entity detail routes
    - smart_locator / page_base / browser_manager: page-object plumbing

Author: Automation Team
License: MIT
================================================================================
"""

from .exceptions import (
    AccordionExpansionTimeout,
    AmbiguousStationMatch,
    CollapsedGroupError,
    FilterApplyTimeout,
    FilterModalTimeout,
    InactiveScopeError,
    LoadMoreTimeout,
    StationNotFound,
    TabActivationTimeout,
    TriggerNotFound,
    UISyncError,
    WaitTimeoutError,
)
from .wait_helpers import PollResult, WaitConfig, get_wait_config, poll_until
from .surface import UISurface
from .card_reader import CardReader, read_all
from .tab_controller import AttributeActiveRule, ClassActiveRule, TabController, TabDescriptor
from .station_resolver import AccordionGroup, StationDescriptor, StationLineResolver, StationMatch
from .filter_aggregator import (
    DateSort,
    EvaluationSort,
    FilterAggregator,
    FilterSelection,
    Purpose,
    RespondentType,
)
from .smart_locator import SmartLocator, ElementNotFoundError
from .page_base import BasePage
from .browser_manager import BrowserManager

__all__ = [
    "UISyncError",
    "WaitTimeoutError",
    "TabActivationTimeout",
    "AccordionExpansionTimeout",
    "FilterModalTimeout",
    "FilterApplyTimeout",
    "LoadMoreTimeout",
    "TriggerNotFound",
    "StationNotFound",
    "AmbiguousStationMatch",
    "InactiveScopeError",
    "CollapsedGroupError",
    "PollResult",
    "WaitConfig",
    "get_wait_config",
    "poll_until",
    "UISurface",
    "CardReader",
    "read_all",
    "TabController",
    "TabDescriptor",
    "ClassActiveRule",
    "AttributeActiveRule",
    "StationLineResolver",
    "StationDescriptor",
    "AccordionGroup",
    "StationMatch",
    "FilterAggregator",
    "FilterSelection",
    "DateSort",
    "EvaluationSort",
    "RespondentType",
    "Purpose",
    "SmartLocator",
    "ElementNotFoundError",
    "BasePage",
    "BrowserManager",
]
