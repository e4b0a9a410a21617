"""
================================================================================
In-memory DOM double for controller unit tests
================================================================================

A small element tree plus a Locator/Page look-alike exposing the subset of
the async Playwright API the framework uses. Locators are lazy: every call
re-resolves against the current tree, so state changed by a scheduled
callback (simulating client script) is observed the same way the framework
observes a real page.

Supported selectors: descendant chains of compound selectors built from
tag, `.class`, `#id`, `[attr]`, `[attr="v"]`, `[attr*="v"]`, `[attr^="v"]`,
`[attr$="v"]`, `:not(<compound>)` and `:has(<selector>)`.

Differences from a browser: actions never wait. Acting on a missing element
raises Playwright's TimeoutError right away; acting on several raises a
strict-mode Error, like Playwright.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import re
from typing import Callable, Iterable, Iterator, List, Optional, Pattern, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

_IDENT = re.compile(r"[\w-]+")
_TAG = re.compile(r"[a-zA-Z][\w-]*|\*")
_ATTR = re.compile(r"""\s*([\w-]+)\s*(?:([*^$]?=)\s*["']?([^"']*)["']?)?\s*$""")

_RESERVED = {"visible", "on_click", "checked", "value", "label"}


# =============================================================================
# Elements
# =============================================================================

class FakeElement:
    """One DOM node. `attrs` keeps attribute names as rendered (dashes allowed)."""

    def __init__(
        self,
        tag: str,
        cls: str = "",
        text: str = "",
        children: Iterable["FakeElement"] = (),
        attrs: Optional[dict] = None,
        visible: bool = True,
        on_click: Optional[Callable[["FakeElement"], None]] = None,
        checked: bool = False,
        value: str = "",
        label: Optional[str] = None,
    ):
        self.tag = tag.lower()
        self.attrs = dict(attrs or {})
        if cls:
            self.attrs["class"] = cls
        self.text = text
        self.children: List[FakeElement] = []
        self.parent: Optional[FakeElement] = None
        self.visible = visible
        self.on_click = on_click
        self.checked = checked
        self.value = value
        self.label = label
        self.clicks = 0
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        cls = self.attrs.get("class", "")
        return f"<{self.tag}{' .' + cls if cls else ''} {self.text[:20]!r}>"

    # Tree ---------------------------------------------------------------

    def append(self, child: "FakeElement") -> "FakeElement":
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "FakeElement") -> None:
        self.children.remove(child)
        child.parent = None

    def descendants(self) -> Iterator["FakeElement"]:
        """Descendants in document order (self excluded)."""
        for child in self.children:
            yield child
            yield from child.descendants()

    def ancestors(self) -> Iterator["FakeElement"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def root(self) -> "FakeElement":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def find(self, selector: str) -> "FakeElement":
        """First matching descendant (test helper; raises when absent)."""
        chain = parse_selector(selector)
        for node in self.descendants():
            if matches(node, chain):
                return node
        raise LookupError(f"No element matches {selector!r}")

    def find_all(self, selector: str) -> List["FakeElement"]:
        chain = parse_selector(selector)
        return [node for node in self.descendants() if matches(node, chain)]

    # State --------------------------------------------------------------

    @property
    def classes(self) -> List[str]:
        return self.attrs.get("class", "").split()

    def add_class(self, token: str) -> None:
        if token not in self.classes:
            self.attrs["class"] = " ".join(self.classes + [token])

    def remove_class(self, token: str) -> None:
        self.attrs["class"] = " ".join(c for c in self.classes if c != token)

    def text_content(self) -> str:
        return self.text + "".join(child.text_content() for child in self.children)

    def is_displayed(self) -> bool:
        return self.visible and all(node.visible for node in self.ancestors())


def el(tag: str, cls: str = "", text: str = "", *children: FakeElement, **kwargs) -> FakeElement:
    """
    Terse element builder.

    Keyword arguments other than visible/on_click/checked/value/label become
    attributes, with underscores turned into dashes (aria_label -> aria-label).
    """
    options = {key: kwargs.pop(key) for key in list(kwargs) if key in _RESERVED}
    attrs = {key.replace("_", "-"): value for key, value in kwargs.items()}
    return FakeElement(tag, cls, text, children, attrs=attrs, **options)


# =============================================================================
# Selectors
# =============================================================================

Compound = List[Callable[[FakeElement], bool]]


def _closing(text: str, open_index: int) -> int:
    depth = 0
    for i in range(open_index, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    raise ValueError(f"Unbalanced parentheses in {text!r}")


def _split_top(selector: str) -> List[str]:
    parts, current, depth, quote = [], [], 0, None
    for ch in selector.strip():
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        elif ch.isspace() and depth == 0:
            if current:
                parts.append("".join(current))
                current = []
            continue
        elif ch in ">+~," and depth == 0:
            raise ValueError(f"Unsupported combinator in {selector!r}")
        current.append(ch)
    if current:
        parts.append("".join(current))
    return parts


def _attr_predicate(body: str) -> Callable[[FakeElement], bool]:
    match = _ATTR.match(body)
    if not match:
        raise ValueError(f"Unsupported attribute selector [{body}]")
    name, op, expected = match.groups()

    def check(element: FakeElement) -> bool:
        if name not in element.attrs:
            return False
        actual = str(element.attrs[name])
        if op is None:
            return True
        if op == "=":
            return actual == expected
        if op == "*=":
            return expected in actual
        if op == "^=":
            return actual.startswith(expected)
        return actual.endswith(expected)

    return check


def _parse_compound(text: str) -> Compound:
    predicates: Compound = []
    i = 0
    tag = _TAG.match(text)
    if tag:
        if tag.group(0) != "*":
            predicates.append(lambda e, t=tag.group(0).lower(): e.tag == t)
        i = tag.end()

    while i < len(text):
        if text[i] == ".":
            name = _IDENT.match(text, i + 1)
            predicates.append(lambda e, n=name.group(0): n in e.classes)
            i = name.end()
        elif text[i] == "#":
            name = _IDENT.match(text, i + 1)
            predicates.append(lambda e, n=name.group(0): e.attrs.get("id") == n)
            i = name.end()
        elif text[i] == "[":
            end = text.index("]", i)
            predicates.append(_attr_predicate(text[i + 1:end]))
            i = end + 1
        elif text.startswith(":not(", i):
            end = _closing(text, i + 4)
            inner = _parse_compound(text[i + 5:end])
            predicates.append(lambda e, c=inner: not _match_compound(e, c))
            i = end + 1
        elif text.startswith(":has(", i):
            end = _closing(text, i + 4)
            inner = parse_selector(text[i + 5:end])
            predicates.append(
                lambda e, s=inner: any(matches(d, s) for d in e.descendants())
            )
            i = end + 1
        else:
            raise ValueError(f"Unsupported selector syntax {text[i:]!r}")
    return predicates


def _match_compound(element: FakeElement, compound: Compound) -> bool:
    return all(predicate(element) for predicate in compound)


def parse_selector(selector: str) -> List[Compound]:
    return [_parse_compound(part) for part in _split_top(selector)]


def matches(element: FakeElement, chain: List[Compound]) -> bool:
    """Descendant-combinator match of a parsed selector."""
    if not _match_compound(element, chain[-1]):
        return False
    node = element.parent
    for compound in reversed(chain[:-1]):
        while node is not None and not _match_compound(node, compound):
            node = node.parent
        if node is None:
            return False
        node = node.parent
    return True


# =============================================================================
# Accessibility
# =============================================================================

_INPUT_ROLES = {"radio": "radio", "checkbox": "checkbox", "button": "button", "submit": "button"}


def role_of(element: FakeElement) -> Optional[str]:
    if "role" in element.attrs:
        return element.attrs["role"]
    if element.tag == "input":
        return _INPUT_ROLES.get(element.attrs.get("type", "text"), "textbox")
    if element.tag == "button":
        return "button"
    if element.tag == "a" and "href" in element.attrs:
        return "link"
    if re.fullmatch(r"h[1-6]", element.tag):
        return "heading"
    if element.tag == "li":
        return "listitem"
    return None


def accessible_name(element: FakeElement) -> str:
    name = element.attrs.get("aria-label") or element.label or element.text_content()
    return " ".join(name.split())


def _name_matches(actual: str, wanted: Optional[str], exact: bool) -> bool:
    if wanted is None:
        return True
    if exact:
        return actual == wanted
    return wanted.lower() in actual.lower()


# =============================================================================
# Locator / Page
# =============================================================================

def _dedupe(elements: Iterable[FakeElement]) -> List[FakeElement]:
    seen, result = set(), []
    for element in elements:
        if id(element) not in seen:
            seen.add(id(element))
            result.append(element)
    return result


class FakeLocator:
    """Lazy locator over a FakeElement tree."""

    def __init__(self, resolve: Callable[[], List[FakeElement]], description: str):
        self._resolve = resolve
        self._description = description

    def __repr__(self) -> str:
        return f"FakeLocator({self._description})"

    def elements(self) -> List[FakeElement]:
        return self._resolve()

    def _one(self, action: str) -> FakeElement:
        found = self._resolve()
        if not found:
            raise PlaywrightTimeoutError(f"{action}: no element matches {self._description}")
        if len(found) > 1:
            raise PlaywrightError(
                f"strict mode violation: {self._description} resolved to {len(found)} elements"
            )
        return found[0]

    def _descend(self, predicate: Callable[[FakeElement], bool], description: str) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            return _dedupe(
                node for root in self._resolve() for node in root.descendants() if predicate(node)
            )
        return FakeLocator(resolve, f"{self._description} >> {description}")

    # Chaining -----------------------------------------------------------

    def locator(self, selector: str) -> "FakeLocator":
        chain = parse_selector(selector)
        return self._descend(lambda node: matches(node, chain), selector)

    def nth(self, index: int) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            found = self._resolve()
            if -len(found) <= index < len(found):
                return [found[index]]
            return []
        return FakeLocator(resolve, f"{self._description} >> nth={index}")

    @property
    def first(self) -> "FakeLocator":
        return self.nth(0)

    @property
    def last(self) -> "FakeLocator":
        return self.nth(-1)

    def get_by_role(self, role: str, name: Optional[str] = None, exact: bool = False,
                    **_: object) -> "FakeLocator":
        def predicate(node: FakeElement) -> bool:
            return (
                role_of(node) == role
                and node.is_displayed()
                and _name_matches(accessible_name(node), name, exact)
            )
        return self._descend(predicate, f"role={role}[name={name!r}]")

    def get_by_placeholder(self, text: str, exact: bool = False) -> "FakeLocator":
        def predicate(node: FakeElement) -> bool:
            placeholder = node.attrs.get("placeholder")
            return placeholder is not None and _name_matches(placeholder, text, exact)
        return self._descend(predicate, f"placeholder={text!r}")

    # Queries ------------------------------------------------------------

    async def count(self) -> int:
        return len(self._resolve())

    async def text_content(self, timeout: Optional[float] = None) -> str:
        return self._one("text_content").text_content()

    async def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        value = self._one("get_attribute").attrs.get(name)
        return None if value is None else str(value)

    async def is_visible(self) -> bool:
        found = self._resolve()
        if not found:
            return False
        if len(found) > 1:
            raise PlaywrightError(f"strict mode violation: {self._description}")
        return found[0].is_displayed()

    async def is_checked(self) -> bool:
        return self._one("is_checked").checked

    async def input_value(self) -> str:
        return self._one("input_value").value

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        found = self._resolve()
        if state == "attached" and found:
            return
        if state == "visible" and found and found[0].is_displayed():
            return
        if state in ("hidden", "detached") and not any(e.is_displayed() for e in found):
            return
        raise PlaywrightTimeoutError(f"wait_for({state}): {self._description}")

    # Actions ------------------------------------------------------------

    def _actionable(self, action: str) -> FakeElement:
        element = self._one(action)
        if not element.is_displayed():
            raise PlaywrightTimeoutError(f"{action}: element not visible {self._description}")
        return element

    async def click(self, **_: object) -> None:
        element = self._actionable("click")
        element.clicks += 1
        role = role_of(element)
        if role == "checkbox":
            element.checked = not element.checked
        elif role == "radio" and not element.checked:
            group = element.attrs.get("name")
            for other in element.root().descendants():
                if role_of(other) == "radio" and other.attrs.get("name") == group:
                    other.checked = False
            element.checked = True
        for node in [element, *element.ancestors()]:
            if node.on_click is not None:
                node.on_click(element)

    async def check(self, **_: object) -> None:
        if not self._actionable("check").checked:
            await self.click()

    async def uncheck(self, **_: object) -> None:
        if self._actionable("uncheck").checked:
            await self.click()

    async def fill(self, value: str, **_: object) -> None:
        self._actionable("fill").value = value


class FakePage:
    """Page look-alike: a document holding one body element."""

    def __init__(self, body: FakeElement, url: str = "https://example.com/"):
        if body.tag != "body":
            body = FakeElement("body", children=[body])
        self.body = body
        self.document = FakeElement("#document", children=[body])
        self.url = url
        self.visited: List[str] = []
        self.load_states: List[str] = []
        self._root = FakeLocator(lambda: [self.document], "document")

    def locator(self, selector: str) -> FakeLocator:
        return self._root.locator(selector)

    def get_by_role(self, role: str, name: Optional[str] = None, exact: bool = False,
                    **kwargs: object) -> FakeLocator:
        return self._root.get_by_role(role, name=name, exact=exact, **kwargs)

    def get_by_placeholder(self, text: str, exact: bool = False) -> FakeLocator:
        return self._root.get_by_placeholder(text, exact=exact)

    async def goto(self, url: str, wait_until: Optional[str] = None, **_: object) -> None:
        self.url = url
        self.visited.append(url)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        self.load_states.append(state)

    async def wait_for_url(self, url: Union[str, Pattern], timeout: Optional[float] = None) -> None:
        ok = url.search(self.url) if isinstance(url, re.Pattern) else url == self.url
        if not ok:
            raise PlaywrightTimeoutError(f"wait_for_url: {self.url} does not match {url}")

    async def screenshot(self, path: Optional[str] = None, **_: object) -> bytes:
        if path:
            with open(path, "wb") as f:
                f.write(b"")
        return b""


def later(delay: float, callback: Callable[[], None]) -> None:
    """Run callback after a delay on the running loop (simulated client script)."""
    asyncio.get_running_loop().call_later(delay, callback)


__all__ = [
    "FakeElement",
    "FakeLocator",
    "FakePage",
    "el",
    "later",
    "matches",
    "parse_selector",
    "role_of",
    "accessible_name",
]
