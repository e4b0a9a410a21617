"""
================================================================================
Tab / Accordion State Controller
================================================================================

Drives a container holding labelled triggers and their content regions.
Exactly one trigger is active at a time. Activation is performed by client
script after the click, so `activate()` clicks and then polls (bounded) until
the DOM reports the requested label as active. There is no transient state
exposed: the caller is blocked until success or a TabActivationTimeout.

Every query re-derives its answer from the live DOM; nothing is cached,
because navigation or other interactions may change the widget behind the
controller's back.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Union

import allure
from loguru import logger
from playwright.async_api import Locator

from .exceptions import InactiveScopeError, TabActivationTimeout, TriggerNotFound
from .field_extractor import has_class_token, normalize_space
from .surface import UISurface
from .wait_helpers import poll_until


# =============================================================================
# Active rules
# =============================================================================

class ActiveRule:
    """Decides whether a trigger element is the active one."""

    async def is_active(self, trigger: Locator) -> bool:
        raise NotImplementedError


class ClassActiveRule(ActiveRule):
    """Active when the trigger's class attribute carries a token (default `is-active`)."""

    def __init__(self, token: str = "is-active"):
        self.token = token

    async def is_active(self, trigger: Locator) -> bool:
        return has_class_token(await trigger.get_attribute("class"), self.token)

    def __repr__(self) -> str:
        return f"ClassActiveRule({self.token!r})"


class AttributeActiveRule(ActiveRule):
    """Active when an attribute has a value, e.g. aria-selected="true"."""

    def __init__(self, name: str = "aria-selected", value: str = "true"):
        self.name = name
        self.value = value

    async def is_active(self, trigger: Locator) -> bool:
        return (await trigger.get_attribute(self.name)) == self.value

    def __repr__(self) -> str:
        return f"AttributeActiveRule({self.name!r}={self.value!r})"


@dataclass(frozen=True)
class TabDescriptor:
    """Live snapshot of one trigger. Never cache it across interactions."""
    label: str
    is_active: bool
    index: int


def match_label(labels: List[str], label: str) -> Optional[int]:
    """Index of the label: exact text first, then first containing match."""
    wanted = normalize_space(label)
    for i, candidate in enumerate(labels):
        if candidate == wanted:
            return i
    for i, candidate in enumerate(labels):
        if wanted and wanted in candidate:
            return i
    return None


class TabController:
    """
    Controller over one tab widget.

    Usage:
        tabs = TabController(surface, section_locator)
        await tabs.activate("高校受験")
        content = await tabs.content_for("高校受験")
        records = await reader.read_all(content)
    """

    def __init__(
        self,
        surface: UISurface,
        container: Union[str, Locator],
        trigger_selector: str = ".js-tab__item",
        content_selector: str = ".js-tab__content",
        active_rule: Optional[ActiveRule] = None,
        name: str = "tabs",
    ):
        """
        Args:
            surface: Rendered page handle
            container: Selector or locator of the widget's container
            trigger_selector: Selector of one trigger inside the container
            content_selector: Selector of one content region inside the container;
                regions pair with triggers by position
            active_rule: Rule deciding which trigger is active
            name: Human-readable widget name for logs and reports
        """
        self.surface = surface
        self.container = surface.locator(container) if isinstance(container, str) else container
        self.trigger_selector = trigger_selector
        self.content_selector = content_selector
        self.active_rule = active_rule or ClassActiveRule()
        self.name = name

    @property
    def triggers(self) -> Locator:
        return self.container.locator(self.trigger_selector)

    @property
    def contents(self) -> Locator:
        return self.container.locator(self.content_selector)

    # =========================================================================
    # Queries (always live)
    # =========================================================================

    async def tabs(self) -> List[TabDescriptor]:
        """Descriptors of every trigger in DOM order."""
        triggers = self.triggers
        descriptors = []
        for i in range(await triggers.count()):
            trigger = triggers.nth(i)
            label = normalize_space(await trigger.text_content())
            descriptors.append(
                TabDescriptor(label, await self.active_rule.is_active(trigger), i)
            )
        return descriptors

    async def list_labels(self) -> List[str]:
        """Trigger labels in DOM order."""
        return [tab.label for tab in await self.tabs()]

    async def _active_tab(self) -> Optional[TabDescriptor]:
        for tab in await self.tabs():
            if tab.is_active:
                return tab
        return None

    async def active_label(self) -> Optional[str]:
        """Label of the active trigger, or None when no trigger is active."""
        tab = await self._active_tab()
        return tab.label if tab else None

    async def is_active(self, label: str) -> bool:
        """Whether the trigger matching `label` is the active one."""
        tabs = await self.tabs()
        index = match_label([tab.label for tab in tabs], label)
        return index is not None and tabs[index].is_active

    # =========================================================================
    # Transitions
    # =========================================================================

    async def activate(self, label: str, timeout: Optional[float] = None) -> str:
        """
        Activate a trigger and block until the DOM shows it as active.

        Already-active labels succeed without clicking.

        Args:
            label: Trigger label (exact text preferred, containing text accepted)
            timeout: Seconds to wait; the tab_activation scenario when None

        Returns:
            The full label of the activated trigger

        Raises:
            TriggerNotFound: No trigger carries the label
            TabActivationTimeout: The label did not become active in time
        """
        with allure.step(f"Activate {self.name} tab: {label}"):
            tabs = await self.tabs()
            labels = [tab.label for tab in tabs]
            index = match_label(labels, label)
            if index is None:
                raise TriggerNotFound(label, labels)

            expected = labels[index]
            if tabs[index].is_active:
                logger.debug(f"[{self.name}] '{expected}' already active")
                return expected

            config = self.surface.wait_config("tab_activation")
            if timeout is not None:
                config = replace(config, timeout=timeout)

            await self.triggers.nth(index).click()

            async def check_active():
                active = await self.active_label()
                return active == expected, active

            result = await poll_until(
                check_active, config, f"Wait for {self.name} tab '{expected}' to be active"
            )
            if not result.ok:
                logger.error(
                    f"[{self.name}] '{expected}' not active after {config.timeout}s "
                    f"(observed: {result.observed!r})"
                )
                raise TabActivationTimeout(
                    expected, result.observed, config.timeout, result.last_error
                )

            logger.info(f"[{self.name}] switched to '{expected}'")
            return expected

    async def activate_index(self, index: int, timeout: Optional[float] = None) -> str:
        """Activate the trigger at a DOM position."""
        labels = await self.list_labels()
        if not 0 <= index < len(labels):
            raise TriggerNotFound(f"#{index}", labels)
        return await self.activate(labels[index], timeout=timeout)

    # =========================================================================
    # Scopes
    # =========================================================================

    def _content_at(self, index: int) -> Locator:
        return self.contents.nth(index)

    async def active_content(self) -> Locator:
        """
        Content region of the active trigger.

        Raises:
            InactiveScopeError: No trigger is active
        """
        tab = await self._active_tab()
        if tab is None:
            raise InactiveScopeError(None, None)
        return self._content_at(tab.index)

    async def content_for(self, label: str) -> Locator:
        """
        Content region of `label`, which must be the active trigger.

        Raises:
            InactiveScopeError: `label` is not active
        """
        tabs = await self.tabs()
        index = match_label([tab.label for tab in tabs], label)
        if index is None or not tabs[index].is_active:
            active = next((tab.label for tab in tabs if tab.is_active), None)
            raise InactiveScopeError(label, active)
        return self._content_at(index)


__all__ = [
    "ActiveRule",
    "ClassActiveRule",
    "AttributeActiveRule",
    "TabDescriptor",
    "TabController",
    "match_label",
]
