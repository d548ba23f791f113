"""Common actions available to every project on the "do" screen."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from screenplay.core.errors import RuntimeFailure

if TYPE_CHECKING:
    from screenplay.core.automator import Automator

logger = logging.getLogger("screenplay.builtin")

BUILTIN_APP = "screenplay"
BUILTIN_SCREEN = "do"


def _always_active() -> bool:
    return True


def install_builtin_actions(automator: Automator, devices: Sequence[str]) -> None:
    """Define screenplay.do.{delay, debug, fail, logState} on the given devices."""

    def delay(parameters: dict[str, Any]) -> None:
        time.sleep(parameters["seconds"])

    def debug(parameters: dict[str, Any]) -> None:
        logger.info(parameters["debug_fn"]())

    def fail() -> None:
        raise RuntimeFailure("purposely-thrown exception to halt the test scenario")

    def log_state() -> None:
        logger.info("Scenario state: %s", automator.state.external)

    screen = automator.appmap.create_or_augment_app(BUILTIN_APP).with_screen(BUILTIN_SCREEN)
    for device in devices:
        screen.on_device(device, _always_active)

    (
        screen.with_action("delay", "Delay a given amount of time")
        .with_param("seconds", "Number of seconds to delay", True, True)
        .with_implementation(delay)
        .with_action("debug", "Print the results of a debug function")
        .with_param("debug_fn", "Function returning a string", True)
        .with_implementation(debug)
        .with_action("fail", "Unconditionally fail the current test for debugging purposes")
        .with_implementation(fail)
        .with_action("logState", "Log the values stored in the scenario state")
        .with_implementation(log_state)
    )
