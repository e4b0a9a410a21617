"""
================================================================================
Card Records and Field Maps
================================================================================

One frozen record type per card kind rendered by the site, plus the field map
the card reader uses to fill it. Identifiers are derived from hrefs through
the entity routes so that extraction and navigation share one template.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from juku_suites.ui_testing.framework import routes
from juku_suites.ui_testing.framework.card_reader import (
    CardReader,
    attr,
    class_token,
    element_count,
    labelled_row,
    text,
)
from juku_suites.ui_testing.framework.field_extractor import (
    AMOUNT,
    DEVIATION,
    EXAM_YEAR,
    INQUIRY_PHRASES,
    LEADING_NUMBER,
    STARTING_DEVIATION,
    SUBJECTS,
    TRAILING_COUNT,
    YEAR,
    contains_any,
)


def _to_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


# =============================================================================
# Juku page: experience tab cards
# =============================================================================

@dataclass(frozen=True)
class ExperienceCardRecord:
    href: str
    title: str
    year: int
    starting_deviation: int
    is_pickup: bool
    icon_src: str
    experience_id: str


EXPERIENCE_CARD = ".bjc-post-experience"

EXPERIENCE_FIELDS = {
    "href": attr("href"),
    "title": text(".bjc-post-experience-title"),
    "year": text(".bjc-post-experience-meta", pattern=EXAM_YEAR),
    "starting_deviation": text(".bjc-post-experience-meta", pattern=STARTING_DEVIATION),
    "is_pickup": class_token("pickup"),
    "icon_src": attr("src", ".bjc-post-experience-icon img"),
    "experience_id": attr("href", transform=routes.EXPERIENCE.extract_id),
}


# =============================================================================
# Top page: experience cards
# =============================================================================

@dataclass(frozen=True)
class TopExperienceCardRecord:
    school_name: str
    year: int
    starting_deviation: int
    href: str
    thumbnail_src: str
    experience_id: str


TOP_EXPERIENCE_CARD = ".bjp-home-experience__content"

TOP_EXPERIENCE_FIELDS = {
    "school_name": text(".title .passed"),
    "year": text(".text", pattern=YEAR),
    "starting_deviation": text(".text", pattern=DEVIATION),
    "href": attr("href"),
    "thumbnail_src": attr("src", ".bjp-home-experience__title-block-thumbnail img"),
    "experience_id": attr("href", transform=routes.EXPERIENCE.extract_id),
}


# =============================================================================
# Interview cards
# =============================================================================

@dataclass(frozen=True)
class InterviewCardRecord:
    href: str
    gender: str
    icon_src: str
    is_pickup: bool
    balloon_text: str
    destination: str
    passed_schools: str
    main_juku: str
    concurrent_juku: str
    interview_id: str


INTERVIEW_CARD = ".bjc-post-interview"

_INTERVIEW_ROW = ".bjc-post-interview-list li"
_INTERVIEW_LABEL = ".bjc-post-interview-list-paragraph.bold"
_INTERVIEW_VALUE = ".bjc-post-interview-list-paragraph:not(.bold)"


def _interview_row(label: str):
    return labelled_row(_INTERVIEW_ROW, label, _INTERVIEW_LABEL, _INTERVIEW_VALUE)


INTERVIEW_FIELDS = {
    "href": attr("href"),
    "gender": text(".bjc-post-interview-icon span"),
    "icon_src": attr("src", ".bjc-post-interview-icon img"),
    "is_pickup": class_token("pickup"),
    "balloon_text": text(".bjc-post-interview-balloon"),
    "destination": _interview_row("進学先"),
    "passed_schools": _interview_row("合格校"),
    "main_juku": _interview_row("メインの塾"),
    "concurrent_juku": _interview_row("併塾"),
    "interview_id": attr("href", transform=routes.INTERVIEW.extract_id),
}


# =============================================================================
# Course cards
# =============================================================================

@dataclass(frozen=True)
class CourseCardRecord:
    href: str
    title: str
    description: str
    subjects: List[str]
    course_id: str
    icon_src: str


COURSE_CARD = ".bjc-post-course"

COURSE_FIELDS = {
    "href": attr("href"),
    "title": text(".bjc-post-course-title"),
    "description": text(".bjc-post-course-paragraph"),
    "subjects": text(".bju-line-clamp-3", pattern=SUBJECTS),
    "course_id": attr("href", transform=routes.COURSE.extract_id),
    "icon_src": attr("src", ".bjc-post-course-icon img"),
}


# =============================================================================
# Price blocks (one per price tab content region)
# =============================================================================

@dataclass(frozen=True)
class PriceRecord:
    course_title: str
    initial_cost: str
    monthly_cost: str
    initial_cost_amount: Optional[int]
    monthly_cost_amount: Optional[int]
    is_inquiry_required: bool


_PRICE_ROW = ".bjc-juku-price-table tr"


def _price_row(label: str, **kwargs):
    return labelled_row(_PRICE_ROW, label, "th", "td", **kwargs)


PRICE_FIELDS = {
    "course_title": text(".bjc-juku-heading-4"),
    "initial_cost": _price_row("初期費用"),
    "monthly_cost": _price_row("月額費用"),
    "initial_cost_amount": _price_row("初期費用", pattern=AMOUNT),
    "monthly_cost_amount": _price_row("月額費用", pattern=AMOUNT),
    "is_inquiry_required": _price_row(
        "月額費用", transform=lambda value: contains_any(value, INQUIRY_PHRASES)
    ),
}


# =============================================================================
# Review cards
# =============================================================================

@dataclass(frozen=True)
class ReviewCardRecord:
    href: str
    heading: str
    title: str
    meta: str
    rating: int
    rating_text: str
    date: str
    content: str


REVIEW_CARD = "a.bjc-review-article"

REVIEW_FIELDS = {
    "href": attr("href"),
    "heading": text(".bjc-review-article--header-heading"),
    "title": text(".bjc-review-article--header-title"),
    "meta": text(".bjc-review-article--meta-txt"),
    "rating": text(".bjc-evaluation-average_number", pattern=LEADING_NUMBER),
    "rating_text": text(".bjc-evaluation-average_number"),
    "date": text(".bjc-evaluation-period"),
    "content": text(".bjc-review-article--content"),
}


# =============================================================================
# Search results: institution articles and their school lists
# =============================================================================

@dataclass(frozen=True)
class InstitutionRecord:
    name: str
    href: str
    juku_id: str
    rating: float
    review_count: int
    stars: int
    tagline: str


INSTITUTION_CARD = ".bjc-search-result-article"

INSTITUTION_FIELDS = {
    "name": text(".bjc-search-result-article--header-title"),
    "href": attr("href", ".bjc-search-result-article--header-title a"),
    "juku_id": attr("href", ".bjc-search-result-article--header-title a",
                    transform=routes.JUKU.extract_id),
    "rating": text(".bjc-juku-header-evaluation-average_number", transform=_to_float),
    "review_count": text(".bjc-juku-header-evaluation-number", pattern=TRAILING_COUNT),
    "stars": element_count(".bjc-juku-header-evaluation .bjc-evaluation-star:not(.inert)"),
    "tagline": text(".bjc-search-result-article--header-tagline"),
}


@dataclass(frozen=True)
class SchoolRecord:
    name: str
    href: str
    nearest_station: str
    classroom_id: str


SCHOOL_CARD = ".bjc-search-result-article--school_list-card"

_SCHOOL_LINK = ".bjc-search-result-article--school_list-card-header-heading a"

SCHOOL_FIELDS = {
    "name": text(_SCHOOL_LINK),
    "href": attr("href", _SCHOOL_LINK),
    "nearest_station": text(".bjc-search-result-article--school_list-address:not(.is-heading)"),
    "classroom_id": attr("href", _SCHOOL_LINK, transform=routes.CLASSROOM.extract_id),
}


# =============================================================================
# Readers
# =============================================================================

experience_reader = CardReader(EXPERIENCE_CARD, EXPERIENCE_FIELDS, ExperienceCardRecord)
top_experience_reader = CardReader(TOP_EXPERIENCE_CARD, TOP_EXPERIENCE_FIELDS,
                                   TopExperienceCardRecord)
interview_reader = CardReader(INTERVIEW_CARD, INTERVIEW_FIELDS, InterviewCardRecord)
course_reader = CardReader(COURSE_CARD, COURSE_FIELDS, CourseCardRecord)
# The price "card" is the content region itself
price_reader = CardReader(None, PRICE_FIELDS, PriceRecord)
review_reader = CardReader(REVIEW_CARD, REVIEW_FIELDS, ReviewCardRecord)
institution_reader = CardReader(INSTITUTION_CARD, INSTITUTION_FIELDS, InstitutionRecord)
school_reader = CardReader(SCHOOL_CARD, SCHOOL_FIELDS, SchoolRecord)


__all__ = [
    "ExperienceCardRecord",
    "TopExperienceCardRecord",
    "InterviewCardRecord",
    "CourseCardRecord",
    "PriceRecord",
    "ReviewCardRecord",
    "InstitutionRecord",
    "SchoolRecord",
    "EXPERIENCE_FIELDS",
    "TOP_EXPERIENCE_FIELDS",
    "INTERVIEW_FIELDS",
    "COURSE_FIELDS",
    "PRICE_FIELDS",
    "REVIEW_FIELDS",
    "INSTITUTION_FIELDS",
    "SCHOOL_FIELDS",
    "experience_reader",
    "top_experience_reader",
    "interview_reader",
    "course_reader",
    "price_reader",
    "review_reader",
    "institution_reader",
    "school_reader",
]
