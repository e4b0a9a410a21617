"""
================================================================================
Field Extractor
================================================================================

Pure functions turning rendered text (or an attribute value) into typed
fields. A pattern that does not match yields the field kind's declared
default; extraction never raises, because cards are allowed to omit fields.

    >>> extract("受験年度：2024年度 / 開始偏差値50", EXAM_YEAR)
    2024
    >>> extract("11,000円（税込）", AMOUNT)
    11000
    >>> extract("要問い合わせ", AMOUNT) is None
    True

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Pattern, Union


class FieldKind(Enum):
    """Declared type of an extracted field and its absence value."""
    INTEGER = "integer"        # absent -> 0
    TEXT = "text"              # absent -> ""
    AMOUNT = "amount"          # absent -> None; thousands separators stripped
    IDENTIFIER = "identifier"  # absent -> ""; digits kept as text
    TEXT_LIST = "text_list"    # absent -> []


_ABSENT = {
    FieldKind.INTEGER: 0,
    FieldKind.TEXT: "",
    FieldKind.AMOUNT: None,
    FieldKind.IDENTIFIER: "",
}


@dataclass(frozen=True)
class PatternSpec:
    """
    A fixed capture pattern plus the type its first group is coerced to.

    Attributes:
        pattern: Compiled regex; group 1 is the value
        kind: Target type (decides coercion and the absence value)
        separator: For TEXT_LIST, the separator the captured text is split on
        drop: For TEXT_LIST, items to discard after splitting
    """
    pattern: Pattern
    kind: FieldKind = FieldKind.TEXT
    separator: str = " / "
    drop: tuple = ()

    @classmethod
    def of(cls, regex: str, kind: FieldKind = FieldKind.TEXT, **kwargs: Any) -> "PatternSpec":
        return cls(re.compile(regex), kind, **kwargs)

    @property
    def absent(self) -> Any:
        """Value returned when the pattern does not match."""
        if self.kind is FieldKind.TEXT_LIST:
            return []
        return _ABSENT[self.kind]


FieldValue = Union[int, str, List[str], None]


def normalize_space(text: Optional[str]) -> str:
    """Collapse runs of whitespace and trim."""
    return " ".join((text or "").split())


def _to_int(raw: str) -> Optional[int]:
    digits = raw.replace(",", "").replace("，", "").strip()
    try:
        return int(digits)
    except ValueError:
        return None


def extract(raw_text: Optional[str], spec: PatternSpec) -> FieldValue:
    """
    Apply one fixed pattern and coerce its first capture group.

    Args:
        raw_text: Free-form rendered text or attribute value (None is treated as "")
        spec: Pattern and declared type

    Returns:
        The coerced value, or the kind's absence value when nothing matches
    """
    match = spec.pattern.search(raw_text or "")
    if not match:
        return spec.absent

    captured = match.group(1) if match.groups() else match.group(0)

    if spec.kind in (FieldKind.INTEGER, FieldKind.AMOUNT):
        value = _to_int(captured)
        return spec.absent if value is None else value
    if spec.kind is FieldKind.TEXT_LIST:
        items = [item.strip() for item in captured.split(spec.separator)]
        return [item for item in items if item and item not in spec.drop]
    return captured.strip()


def has_class_token(class_attr: Optional[str], token: str) -> bool:
    """Whether a class attribute contains a whole class token."""
    return token in (class_attr or "").split()


def contains_any(text: Optional[str], phrases: Iterable[str]) -> bool:
    """Whether any of the phrases occurs in the text."""
    text = text or ""
    return any(phrase in text for phrase in phrases)


# =============================================================================
# Site patterns
# =============================================================================

EXAM_YEAR = PatternSpec.of(r"受験年度：(\d{4})年度", FieldKind.INTEGER)
YEAR = PatternSpec.of(r"(\d{4})年度", FieldKind.INTEGER)
STARTING_DEVIATION = PatternSpec.of(r"開始偏差値(\d+)", FieldKind.INTEGER)
DEVIATION = PatternSpec.of(r"偏差値：(\d+)", FieldKind.INTEGER)
TRAILING_COUNT = PatternSpec.of(r"\((\d+)\)\s*$", FieldKind.INTEGER)
STATION_COUNT = PatternSpec.of(r"（(\d+)件）", FieldKind.INTEGER)
LEADING_NUMBER = PatternSpec.of(r"(\d+)", FieldKind.INTEGER)
AMOUNT = PatternSpec.of(r"(\d[\d,]*)", FieldKind.AMOUNT)
SUBJECTS = PatternSpec.of(r"《科目：([^》]+)》", FieldKind.TEXT_LIST, drop=("他",))

INQUIRY_PHRASES = ("要問い合わせ", "お問い合わせ")

_COUNT_ANNOTATION = re.compile(r"\s*（\d+件）\s*")


def strip_count_annotation(text: Optional[str]) -> str:
    """'札幌（1721件）' -> '札幌'."""
    return _COUNT_ANNOTATION.sub("", text or "").strip()


__all__ = [
    "FieldKind",
    "PatternSpec",
    "FieldValue",
    "extract",
    "normalize_space",
    "has_class_token",
    "contains_any",
    "strip_count_annotation",
    "EXAM_YEAR",
    "YEAR",
    "STARTING_DEVIATION",
    "DEVIATION",
    "TRAILING_COUNT",
    "STATION_COUNT",
    "LEADING_NUMBER",
    "AMOUNT",
    "SUBJECTS",
    "INQUIRY_PHRASES",
]
