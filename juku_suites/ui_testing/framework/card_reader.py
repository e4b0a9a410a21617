"""
================================================================================
Card Reader
================================================================================

Harvests one structured record per repeated UI card (review, course,
interview, experience, price, school...). A field map declares, per record
field, which sub-region of the card to read, what to read from it (text,
attribute, class membership, count, labelled row) and which Field Extractor
pattern or transform turns the raw value into the typed field.

Guarantees:
    - Records come back in DOM order
    - An empty container yields [] (never an error)
    - A missing sub-element is Absence, resolved to the field's default
      immediately; the reader never waits for elements to appear

Callers restricting a read to the active tab's content must obtain that scope
from the tab controller, which asserts the tab is active. The reader itself
performs no synchronisation.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

import allure
from loguru import logger
from playwright.async_api import Locator

from .field_extractor import PatternSpec, extract, has_class_token, normalize_space


R = TypeVar("R")


class Source(Enum):
    """What a field reads from its sub-region."""
    TEXT = "text"
    ATTRIBUTE = "attribute"
    CLASS_TOKEN = "class_token"
    COUNT = "count"
    TEXTS = "texts"
    LABELLED_ROW = "labelled_row"


@dataclass(frozen=True)
class FieldSpec:
    """
    How to produce one record field from a card.

    Build instances with the helpers below (text(), attr(), ...) rather than
    directly.
    """
    source: Source
    selector: Optional[str] = None
    attribute: Optional[str] = None
    token: Optional[str] = None
    label: Optional[str] = None
    label_selector: Optional[str] = None
    value_selector: Optional[str] = None
    pattern: Optional[PatternSpec] = None
    transform: Optional[Callable[[Any], Any]] = None


def text(selector: Optional[str] = None, pattern: Optional[PatternSpec] = None,
         transform: Optional[Callable[[Any], Any]] = None) -> FieldSpec:
    """Whitespace-normalised text of the first match (the card itself when selector is None)."""
    return FieldSpec(Source.TEXT, selector, pattern=pattern, transform=transform)


def attr(name: str, selector: Optional[str] = None, pattern: Optional[PatternSpec] = None,
         transform: Optional[Callable[[Any], Any]] = None) -> FieldSpec:
    """Attribute value of the first match ("" when absent)."""
    return FieldSpec(Source.ATTRIBUTE, selector, attribute=name, pattern=pattern,
                     transform=transform)


def class_token(token: str, selector: Optional[str] = None) -> FieldSpec:
    """Boolean: the element's class attribute contains the token."""
    return FieldSpec(Source.CLASS_TOKEN, selector, token=token)


def element_count(selector: str) -> FieldSpec:
    """Number of elements matching the selector inside the card."""
    return FieldSpec(Source.COUNT, selector)


def texts(selector: str) -> FieldSpec:
    """Non-empty normalised texts of all matches, in DOM order."""
    return FieldSpec(Source.TEXTS, selector)


def labelled_row(row_selector: str, label: str, label_selector: str, value_selector: str,
                 pattern: Optional[PatternSpec] = None,
                 transform: Optional[Callable[[Any], Any]] = None) -> FieldSpec:
    """Value cell of the first row whose label cell contains `label`."""
    return FieldSpec(Source.LABELLED_ROW, row_selector, label=label,
                     label_selector=label_selector, value_selector=value_selector,
                     pattern=pattern, transform=transform)


async def _first_text(scope: Locator, selector: Optional[str]) -> Optional[str]:
    target = scope if selector is None else scope.locator(selector)
    if selector is not None and await target.count() == 0:
        return None
    return await target.first.text_content()


async def _read_raw(card: Locator, spec: FieldSpec) -> Any:
    if spec.source is Source.TEXT:
        raw = await _first_text(card, spec.selector)
        return None if raw is None else normalize_space(raw)

    if spec.source is Source.ATTRIBUTE:
        target = card if spec.selector is None else card.locator(spec.selector)
        if spec.selector is not None and await target.count() == 0:
            return None
        return await target.first.get_attribute(spec.attribute) or ""

    if spec.source is Source.CLASS_TOKEN:
        target = card if spec.selector is None else card.locator(spec.selector)
        if spec.selector is not None and await target.count() == 0:
            return False
        return has_class_token(await target.first.get_attribute("class"), spec.token)

    if spec.source is Source.COUNT:
        return await card.locator(spec.selector).count()

    if spec.source is Source.TEXTS:
        items = card.locator(spec.selector)
        values = []
        for i in range(await items.count()):
            value = normalize_space(await items.nth(i).text_content())
            if value:
                values.append(value)
        return values

    if spec.source is Source.LABELLED_ROW:
        rows = card.locator(spec.selector)
        for i in range(await rows.count()):
            row = rows.nth(i)
            label = normalize_space(await _first_text(row, spec.label_selector))
            if spec.label in label:
                return normalize_space(await _first_text(row, spec.value_selector))
        return None

    raise ValueError(f"Unsupported field source: {spec.source}")


async def read_field(card: Locator, spec: FieldSpec) -> Any:
    """Read and type one field of one card."""
    raw = await _read_raw(card, spec)
    if spec.pattern is not None:
        value = extract(raw, spec.pattern)
    elif spec.source in (Source.TEXT, Source.ATTRIBUTE, Source.LABELLED_ROW):
        value = raw or ""
    else:
        value = raw
    return spec.transform(value) if spec.transform else value


class CardReader(Generic[R]):
    """
    Reads homogeneous cards into records of one type.

    Usage:
        reader = CardReader(".bjc-post-experience", EXPERIENCE_FIELDS, ExperienceCardRecord)
        records = await reader.read_all(section.active_content())
    """

    def __init__(
        self,
        card_selector: Optional[str],
        fields: Mapping[str, FieldSpec],
        record_type: Type[R] = dict,
    ):
        """
        Args:
            card_selector: Selector of one card inside the scope; None when the
                scope locator itself matches the cards
            fields: Record field name -> FieldSpec
            record_type: Callable building a record from keyword arguments
        """
        self.card_selector = card_selector
        self.fields: Dict[str, FieldSpec] = dict(fields)
        self.record_type = record_type

    def cards(self, scope: Locator) -> Locator:
        """Locator of all cards inside the scope."""
        return scope.locator(self.card_selector) if self.card_selector else scope

    async def count(self, scope: Locator) -> int:
        """Number of cards currently rendered in the scope."""
        return await self.cards(scope).count()

    async def read_card(self, card: Locator) -> R:
        """Build one record from one card locator."""
        values = {name: await read_field(card, spec) for name, spec in self.fields.items()}
        return self.record_type(**values)

    async def read_one(self, scope: Locator, index: int = 0) -> R:
        """Record of the card at a DOM position."""
        total = await self.count(scope)
        if not 0 <= index < total:
            raise IndexError(f"Card index {index} out of range ({total} cards)")
        return await self.read_card(self.cards(scope).nth(index))

    async def read_all(self, scope: Locator) -> List[R]:
        """
        Records of every card in the scope, in DOM order.

        Args:
            scope: Container locator (page-level or an active tab's content)

        Returns:
            One fresh record per card; [] for an empty container
        """
        cards = self.cards(scope)
        total = await cards.count()
        with allure.step(f"Read {total} card(s) matching '{self.card_selector or 'scope'}'"):
            records = [await self.read_card(cards.nth(i)) for i in range(total)]
        logger.debug(
            f"Read {len(records)} {getattr(self.record_type, '__name__', 'record')}(s)"
        )
        return records


async def read_all(
    scope: Locator,
    card_selector: Optional[str],
    fields: Mapping[str, FieldSpec],
    record_type: Type[R] = dict,
) -> List[R]:
    """Functional form of CardReader(card_selector, fields, record_type).read_all(scope)."""
    return await CardReader(card_selector, fields, record_type).read_all(scope)


__all__ = [
    "Source",
    "FieldSpec",
    "CardReader",
    "read_all",
    "read_field",
    "text",
    "attr",
    "class_token",
    "element_count",
    "texts",
    "labelled_row",
]
