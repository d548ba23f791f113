"""Automator: the app map, scenarios and run state of one test project."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from screenplay.core.appmap import DEFAULT_SETTLE_DELAY, AppBuilder, AppMap
from screenplay.core.runner import Callbacks, ScenarioRunner, execute_callback
from screenplay.core.scenarios import ScenarioBuilder, ScenarioStore
from screenplay.core.state import RunState

if TYPE_CHECKING:
    from screenplay.core.console_reporter import ConsoleReporter

logger = logging.getLogger("screenplay.automator")


class Automator:
    """Entry point for test-authoring code.

    Definitions files create one Automator, describe apps through
    automator.appmap and scenarios through create_scenario(). Action
    implementations use defer_failure() and the state accessors to talk to
    the runner.
    """

    def __init__(self, settle_delay: float = DEFAULT_SETTLE_DELAY):
        self.appmap = AppMap(settle_delay=settle_delay)
        self.scenarios = ScenarioStore()
        self.callbacks = Callbacks()
        self.state = RunState()
        self.diagnostics: Callable[[], str] | None = None
        self.capture_screen: Callable[[str], Any] | None = None

    # Definition shortcuts

    def create_or_augment_app(self, app_name: str) -> AppBuilder:
        return self.appmap.create_or_augment_app(app_name)

    def create_scenario(self, title: str, tags: list[str] | None = None) -> ScenarioBuilder:
        return self.scenarios.create_scenario(title, tags)

    # Side channel for action implementations

    def defer_failure(self, message: Any) -> None:
        """Record a non-fatal failure for the running step."""
        self.state.defer_failure(message)

    def set_state(self, key: str, value: Any) -> None:
        self.state.set_state(key, value)

    def has_state(self, key: str) -> bool:
        return self.state.has_state(key)

    def get_state(self, key: str, default: Any = None) -> Any:
        return self.state.get_state(key, default)

    # Running

    def runner(
        self,
        device: str,
        reporter: ConsoleReporter | None = None,
        artifacts_dir: Path | None = None,
    ) -> ScenarioRunner:
        """Build a runner for device sharing this automator's state and callbacks."""
        self.state.diagnostics = self.diagnostics
        return ScenarioRunner(
            device=device,
            state=self.state,
            callbacks=self.callbacks,
            diagnostics=self.diagnostics,
            capture_screen=self.capture_screen,
            reporter=reporter,
            artifacts_dir=artifacts_dir,
        )

    def initialize(self, entry_point: str) -> bool:
        """Run the on_init callback once definitions are loaded."""
        ok, _ = execute_callback(self.callbacks, "on_init", {"entryPoint": entry_point})
        return ok

    def log_info(self) -> list[str]:
        """Log the defined tags and return them."""
        tags = self.scenarios.all_tags()
        logger.info("Defined tags: '%s'", "', '".join(tags))
        return tags

    def describe(self, output_dir: Path) -> list[Path]:
        """Write markdown and JSON descriptions of all definitions."""
        from screenplay.core.report import ReportGenerator

        paths = ReportGenerator(output_dir).write_description(self.appmap, self.scenarios)
        for path in paths:
            logger.info("Wrote definitions to %s", path)
        return paths
