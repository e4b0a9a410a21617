"""
================================================================================
Entity Routes
================================================================================

One path template per entity kind. Identifier extraction from a card's href,
navigation to the detail view, href selectors and URL assertions are all
derived from the same template, so they cannot drift apart.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Pattern

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class EntityRoute:
    """
    Detail-view route of one entity kind.

    The template holds an `{id}` placeholder for the entity's own identifier
    and may hold other placeholders (e.g. `{juku_id}`) for parent ids.

    Example:
        >>> COURSE.path_for("42", juku_id="7")
        '/juku/7/course/42/'
        >>> COURSE.extract_id("https://site/juku/7/course/42/")
        '42'
    """

    kind: str
    path_template: str
    _id_pattern: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if "{id}" not in self.path_template:
            raise ValueError(f"Route template for '{self.kind}' needs an {{id}} placeholder")
        object.__setattr__(self, "_id_pattern", re.compile(self._build_regex()))

    def _build_regex(self) -> str:
        parts = []
        last = 0
        for match in _PLACEHOLDER.finditer(self.path_template):
            parts.append(re.escape(self.path_template[last:match.start()]))
            parts.append(r"(\d+)" if match.group(1) == "id" else r"\d+")
            last = match.end()
        parts.append(re.escape(self.path_template[last:]))
        return "".join(parts)

    def path_for(self, entity_id: Any, **params: Any) -> str:
        """Detail path for an identifier (plus any parent ids the template needs)."""
        return self.path_template.format(id=entity_id, **params)

    def extract_id(self, href: str) -> str:
        """Identifier embedded in an href; "" when the href is not this kind's route."""
        match = self._id_pattern.search(href or "")
        return match.group(1) if match else ""

    def href_selector(self, entity_id: Any) -> str:
        """CSS attribute selector matching links to one entity."""
        prefix, _, suffix = self.path_template.partition("{id}")
        # Parent placeholders before {id} vary; anchor on the literal tail of the prefix
        literal_prefix = _PLACEHOLDER.split(prefix)[-1]
        return f'[href*="{literal_prefix}{entity_id}{suffix.split("{")[0]}"]'

    def url_pattern(self) -> Pattern:
        """Regex for asserting a full URL points at this route."""
        return re.compile(self._id_pattern.pattern + r"(?:[?#].*)?$")


EXPERIENCE = EntityRoute("experience", "/shingaku/experience/{id}/")
INTERVIEW = EntityRoute("interview", "/passed-interview/{id}/")
COURSE = EntityRoute("course", "/juku/{juku_id}/course/{id}/")
CLASSROOM = EntityRoute("classroom", "/class/{id}/")
JUKU = EntityRoute("juku", "/juku/{id}/")
CLASS_REQUEST = EntityRoute("class_request", "/class/{id}/request/")


__all__ = [
    "EntityRoute",
    "EXPERIENCE",
    "INTERVIEW",
    "COURSE",
    "CLASSROOM",
    "JUKU",
    "CLASS_REQUEST",
]
