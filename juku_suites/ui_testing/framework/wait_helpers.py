# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Bounded polling for rendered UI state that changes asynchronously after a
# user action (tab activation, accordion disclosure, filter reload).
#
# Key Features:
#   - One polling primitive shared by every controller
#   - Named wait scenarios, overridable from config/config.yaml
#   - Optional multiplicative backoff
#   - Allure step integration
#
# Usage:
#   ok, observed = await poll_until(check_active, get_wait_config("tab_activation"))
#
# ================================================================================

import asyncio
import inspect
import random
import time
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, TypeVar, Union

import allure
from loguru import logger

from juku_tools.common import ConfigLoader


T = TypeVar('T')

Check = Callable[[], Union[Tuple[bool, T], Awaitable[Tuple[bool, T]]]]


@dataclass(frozen=True)
class WaitConfig:
    """
    Configuration for a bounded polling wait.

    Attributes:
        timeout: Total time budget in seconds
        interval: Initial sleep between attempts in seconds
        multiplier: Interval multiplier after each attempt (1.0 = fixed)
        max_interval: Upper bound for the sleep between attempts
        jitter: Add +/-25% random jitter to each sleep
    """
    timeout: float = 10.0
    interval: float = 0.2
    multiplier: float = 1.0
    max_interval: float = 2.0
    jitter: bool = False


# Built-in scenarios; config/config.yaml (ui.waits.<scenario>) overrides fields
WAIT_SCENARIOS: Dict[str, WaitConfig] = {
    "default": WaitConfig(),
    "tab_activation": WaitConfig(timeout=5.0, interval=0.1),
    "accordion_expansion": WaitConfig(timeout=5.0, interval=0.1),
    "modal_open": WaitConfig(timeout=5.0, interval=0.1),
    "filter_apply": WaitConfig(timeout=15.0, interval=0.25, multiplier=1.5, max_interval=1.0),
}


@dataclass
class PollResult:
    """Outcome of poll_until: success flag plus the last observed value."""
    ok: bool
    observed: Any = None
    attempts: int = 0
    elapsed: float = 0.0
    last_error: Optional[str] = None

    def __iter__(self):
        # Allows `ok, observed = await poll_until(...)`
        return iter((self.ok, self.observed))


def get_wait_config(scenario: str, config: Optional[ConfigLoader] = None) -> WaitConfig:
    """
    Get wait configuration for a named scenario.

    Built-in values are merged with `ui.waits.<scenario>` from the YAML
    configuration (and its environment overrides).

    Args:
        scenario: Scenario name (e.g., "tab_activation", "filter_apply")
        config: Configuration loader; the process-wide instance by default

    Returns:
        WaitConfig for the scenario, or default if not found
    """
    base = WAIT_SCENARIOS.get(scenario, WAIT_SCENARIOS["default"])
    loader = config or ConfigLoader()

    overrides = {}
    for field_name in ("timeout", "interval", "multiplier", "max_interval"):
        value = loader.get(f"ui.waits.{scenario}.{field_name}", getattr(base, field_name))
        if value is not None:
            overrides[field_name] = float(value)
    return replace(base, **overrides)


def calculate_next_interval(current_interval: float, config: WaitConfig) -> float:
    """
    Calculate the next sleep interval with backoff and optional jitter.

    Args:
        current_interval: Current interval in seconds
        config: Wait configuration

    Returns:
        Next interval in seconds
    """
    next_interval = min(current_interval * config.multiplier, config.max_interval)

    if config.jitter:
        jitter_factor = 0.75 + (random.random() * 0.5)
        next_interval = next_interval * jitter_factor

    return next_interval


async def poll_until(
    check_fn: Check,
    config: Optional[WaitConfig] = None,
    description: str = "Waiting for condition",
) -> PollResult:
    """
    Poll a condition until it holds or the time budget is spent.

    The check is attempted at least once, even with a zero timeout.
    Exceptions raised by the check (for example an element detached while the
    widget re-renders) count as "not yet" and are kept as `last_error`.
    Expiry is reported through the returned PollResult, never raised: the
    caller turns it into its own typed condition.

    Args:
        check_fn: Sync or async callable returning (done: bool, observed)
        config: WaitConfig bounding the wait
        description: Human-readable description for logging

    Returns:
        PollResult; truthiness of `ok` tells whether the condition held

    Example:
        async def check_active():
            active = await controller.active_label()
            return active == "高校受験", active

        result = await poll_until(check_active, get_wait_config("tab_activation"))
        if not result.ok:
            raise TabActivationTimeout("高校受験", result.observed, config.timeout)
    """
    config = config or WAIT_SCENARIOS["default"]

    start_time = time.monotonic()
    current_interval = config.interval
    attempt = 0
    observed: Any = None
    last_error: Optional[str] = None

    with allure.step(description):
        while True:
            attempt += 1

            try:
                outcome = check_fn()
                if inspect.isawaitable(outcome):
                    outcome = await outcome
                done, observed = outcome
                last_error = None

                if done:
                    elapsed = time.monotonic() - start_time
                    logger.debug(
                        f"Condition met after {attempt} attempt(s) "
                        f"({elapsed:.2f}s): {description}"
                    )
                    return PollResult(True, observed, attempt, elapsed)

            except Exception as e:
                last_error = f"{type(e).__name__}: {e}"
                logger.debug(f"Attempt {attempt} raised {last_error}")

            elapsed = time.monotonic() - start_time
            if elapsed >= config.timeout:
                logger.debug(
                    f"Gave up after {attempt} attempt(s) ({elapsed:.2f}s): "
                    f"{description}. Last observed: {observed!r}"
                )
                return PollResult(False, observed, attempt, elapsed, last_error)

            sleep_for = min(current_interval, max(config.timeout - elapsed, 0.0))
            await asyncio.sleep(sleep_for)
            current_interval = calculate_next_interval(current_interval, config)


__all__ = [
    "WaitConfig",
    "WAIT_SCENARIOS",
    "PollResult",
    "get_wait_config",
    "calculate_next_interval",
    "poll_until",
]
