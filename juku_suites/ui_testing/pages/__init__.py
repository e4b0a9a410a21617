"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the juku site.

Each page class encapsulates:
    - Element locators
    - Tab sections, accordions and filter modals through the framework controllers
    - Card harvesting into typed records

Author: Automation Team
License: MIT
================================================================================
"""

from .juku_page import JukuPage
from .juku_review_page import JukuReviewPage
from .station_select_page import StationSelectPage
from .search_results_page import SearchResultsPage

__all__ = [
    "JukuPage",
    "JukuReviewPage",
    "StationSelectPage",
    "SearchResultsPage",
]
