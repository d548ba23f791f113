"""Bounded polling helpers for action implementations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from screenplay.core.errors import RuntimeFailure, SetupError

logger = logging.getLogger("screenplay.waiting")

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 0.1  # max 10 Hz


def wait_for_return_value(
    timeout: float,
    caller_name: str,
    fn: Callable[[], T],
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> T:
    """Call fn until it returns instead of raising, or the timeout passes.

    fn always runs at least once, and runs once more after the deadline so
    it gets its full allotted time even if the scheduler was slow.

    Args:
        timeout: Seconds to keep trying
        caller_name: Name used in the timeout error message
        fn: Function to call; any exception counts as "not yet"
        poll_interval: Seconds to sleep between attempts

    Returns:
        The first value fn returns

    Raises:
        SetupError: If timeout is not a number
        RuntimeFailure: If fn never returned before the timeout
    """
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise SetupError(
            f"wait_for_return_value got a bad timeout type: ({type(timeout).__name__}) {timeout}"
        )

    stop_time = time.monotonic() + timeout
    caught: Exception | None = None
    runs_after_timeout = 0
    attempts = 0

    while True:
        now = time.monotonic()
        if now >= stop_time:
            if runs_after_timeout >= 1:
                break
            runs_after_timeout += 1

        attempts += 1
        try:
            return fn()
        except Exception as e:
            caught = e
        time.sleep(poll_interval)

    logger.debug("%s gave up after %d attempts", caller_name, attempts)
    raise RuntimeFailure(f"{caller_name} failed by timeout after {timeout} seconds: {caught}")


def wait_for(
    timeout: float,
    caller_name: str,
    predicate: Callable[[], bool],
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> None:
    """Wait until predicate() returns a truthy value."""

    def check() -> bool:
        if not predicate():
            raise RuntimeFailure("condition not met")
        return True

    wait_for_return_value(timeout, caller_name, check, poll_interval)
