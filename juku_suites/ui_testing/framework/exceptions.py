"""
================================================================================
UI State Conditions
================================================================================

Typed failures raised by the state controllers. Each condition carries the
requested target and the last state observed, and renders both in its
message so a failing test report is diagnosable without a re-run.

Taxonomy:
    - Timeouts: bounded polling expired
    - Resolution failures: nothing matched a label query
    - Precondition violations: caller bugs (AssertionError subclasses)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class UISyncError(Exception):
    """Base class for typed UI synchronisation and resolution failures."""

    def context(self) -> Dict[str, Any]:
        """Context fields for reporting."""
        return {}


# =============================================================================
# Timeouts
# =============================================================================

class WaitTimeoutError(UISyncError):
    """Raised when a bounded wait expires."""

    def __init__(self, message: str, timeout: float = 0.0, last_error: Optional[str] = None):
        super().__init__(message)
        self.timeout = timeout
        self.last_error = last_error

    def context(self) -> Dict[str, Any]:
        return {"timeout": self.timeout, "last_error": self.last_error}


class TabActivationTimeout(WaitTimeoutError):
    """A tab did not become active within the bound."""

    def __init__(self, requested: str, observed: Optional[str], timeout: float,
                 last_error: Optional[str] = None):
        self.requested = requested
        self.observed = observed
        super().__init__(
            f"Tab '{requested}' not active after {timeout:.1f}s "
            f"(observed active: {observed!r})",
            timeout=timeout,
            last_error=last_error,
        )

    def context(self) -> Dict[str, Any]:
        return {
            "requested": self.requested,
            "observed": self.observed,
            **super().context(),
        }


class AccordionExpansionTimeout(WaitTimeoutError):
    """An accordion group did not visibly expand within the bound."""

    def __init__(self, group: str, observed_expanded: Sequence[str], timeout: float,
                 last_error: Optional[str] = None):
        self.group = group
        self.observed_expanded = list(observed_expanded)
        super().__init__(
            f"Group '{group}' not expanded after {timeout:.1f}s "
            f"(expanded groups: {self.observed_expanded})",
            timeout=timeout,
            last_error=last_error,
        )

    def context(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "observed_expanded": self.observed_expanded,
            **super().context(),
        }


class FilterModalTimeout(WaitTimeoutError):
    """The filter modal did not open (or close) within the bound."""

    def __init__(self, timeout: float, last_error: Optional[str] = None,
                 action: str = "open", observed_open: Optional[bool] = None):
        self.action = action
        self.observed_open = observed_open
        state = "open" if action == "close" else "closed"
        super().__init__(
            f"Filter modal did not {action} after {timeout:.1f}s (still {state})",
            timeout=timeout,
            last_error=last_error,
        )

    def context(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "observed_open": self.observed_open,
            **super().context(),
        }


class LoadMoreTimeout(WaitTimeoutError):
    """A "load more" click did not add cards to the list within the bound."""

    def __init__(self, before: int, observed: Optional[int], timeout: float,
                 last_error: Optional[str] = None):
        self.before = before
        self.observed = observed
        super().__init__(
            f"No additional cards after load more in {timeout:.1f}s "
            f"(before: {before}, observed: {observed})",
            timeout=timeout,
            last_error=last_error,
        )

    def context(self) -> Dict[str, Any]:
        return {
            "before": self.before,
            "observed": self.observed,
            **super().context(),
        }


class FilterApplyTimeout(WaitTimeoutError):
    """The result list did not finish reloading after a filter submission."""

    def __init__(self, selection: Any, observed: Any, timeout: float,
                 last_error: Optional[str] = None):
        self.selection = selection
        self.observed = observed
        super().__init__(
            f"Filter submission not settled after {timeout:.1f}s "
            f"(requested: {selection}, observed: {observed})",
            timeout=timeout,
            last_error=last_error,
        )

    def context(self) -> Dict[str, Any]:
        return {
            "selection": str(self.selection),
            "observed": str(self.observed),
            **super().context(),
        }


# =============================================================================
# Resolution failures
# =============================================================================

class TriggerNotFound(UISyncError):
    """No trigger with the requested label is rendered."""

    def __init__(self, label: str, available: Sequence[str]):
        self.label = label
        self.available = list(available)
        super().__init__(f"No trigger labelled '{label}' (available: {self.available})")

    def context(self) -> Dict[str, Any]:
        return {"label": self.label, "available": self.available}


class StationNotFound(UISyncError):
    """Neither exact nor contains matching found a station in expanded groups."""

    def __init__(self, label: str, searched_groups: Sequence[str]):
        self.label = label
        self.searched_groups = list(searched_groups)
        super().__init__(
            f"Station '{label}' not found in expanded groups {self.searched_groups}"
        )

    def context(self) -> Dict[str, Any]:
        return {"label": self.label, "searched_groups": self.searched_groups}


class AmbiguousStationMatch(UISyncError):
    """Strict resolution found more than one candidate in the winning tier."""

    def __init__(self, label: str, candidates: Sequence[str]):
        self.label = label
        self.candidates = list(candidates)
        super().__init__(f"Station '{label}' is ambiguous: {self.candidates}")

    def context(self) -> Dict[str, Any]:
        return {"label": self.label, "candidates": self.candidates}


# =============================================================================
# Precondition violations
# =============================================================================

class InactiveScopeError(AssertionError):
    """Content of a tab was requested while that tab is not active."""

    def __init__(self, requested: Optional[str], active: Optional[str]):
        self.requested = requested
        self.active = active
        target = f"'{requested}'" if requested is not None else "active content"
        super().__init__(
            f"Cannot read {target}: active tab is {active!r}. "
            f"Call activate() before reading its content."
        )

    def context(self) -> Dict[str, Any]:
        return {"requested": self.requested, "active": self.active}


class CollapsedGroupError(AssertionError):
    """A station lookup was scoped to a group that is not expanded."""

    def __init__(self, group: str):
        self.group = group
        super().__init__(
            f"Group '{group}' is collapsed; expand() it before resolving its stations"
        )

    def context(self) -> Dict[str, Any]:
        return {"group": self.group}


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
]
