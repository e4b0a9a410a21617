"""Reusable page components: card field maps and tabbed card sections."""

from .cards import (
    CourseCardRecord,
    ExperienceCardRecord,
    InstitutionRecord,
    InterviewCardRecord,
    PriceRecord,
    ReviewCardRecord,
    SchoolRecord,
    TopExperienceCardRecord,
)
from .sections import TabbedCardSection

__all__ = [
    "CourseCardRecord",
    "ExperienceCardRecord",
    "InstitutionRecord",
    "InterviewCardRecord",
    "PriceRecord",
    "ReviewCardRecord",
    "SchoolRecord",
    "TopExperienceCardRecord",
    "TabbedCardSection",
]
