"""Scenario execution engine."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from screenplay.core.errors import InvariantViolation, VerificationFailure
from screenplay.core.results import (
    FAILED,
    PASSED,
    SETUP_FAILED,
    RunResult,
    ScenarioResult,
)
from screenplay.core.selection import select_by_names, select_by_tags
from screenplay.core.shuffle import shuffle
from screenplay.core.state import RunState
from screenplay.models.scenario import Scenario, Step

if TYPE_CHECKING:
    from screenplay.core.console_reporter import ConsoleReporter

logger = logging.getLogger("screenplay.runner")

CallbackFn = Callable[..., Any]


@dataclass
class Callbacks:
    """Hooks invoked around a run. Unset hooks only log.

    on_init and the scenario/complete hooks receive a dict of details;
    prepare and pre_scenario take no arguments.
    """

    on_init: CallbackFn | None = None
    prepare: CallbackFn | None = None
    pre_scenario: CallbackFn | None = None
    on_scenario_pass: CallbackFn | None = None
    on_scenario_fail: CallbackFn | None = None
    complete: CallbackFn | None = None


def execute_callback(
    callbacks: Callbacks,
    name: str,
    parameters: dict[str, Any] | None = None,
    *,
    log_fail: bool = False,
) -> tuple[bool, str | None]:
    """Run a callback, catching anything it raises.

    Returns:
        (succeeded, failure message)
    """
    fn = getattr(callbacks, name)
    if fn is None:
        logger.debug("Running default '%s' callback %s", name, parameters or "")
        return True, None

    try:
        if parameters is None:
            fn()
        else:
            fn(parameters)
        return True, None
    except Exception as e:
        message = f"Callback '{name}' failed: {e}"
        if log_fail:
            logger.error(message)
        else:
            logger.warning(message)
        logger.debug("Callback traceback", exc_info=True)
        return False, message


class ScenarioRunner:
    """Runs scenarios one at a time against a single device."""

    def __init__(
        self,
        device: str,
        state: RunState | None = None,
        callbacks: Callbacks | None = None,
        diagnostics: Callable[[], str] | None = None,
        capture_screen: Callable[[str], Any] | None = None,
        reporter: ConsoleReporter | None = None,
        artifacts_dir: Path | None = None,
    ):
        """Initialize runner.

        Args:
            device: Device/implementation identifier (e.g. "iPhone")
            state: Run state shared with action implementations
            callbacks: Run lifecycle hooks
            diagnostics: Returns a UI-state dump, logged on failures
            capture_screen: Saves a screenshot with the given name on failures
            reporter: Optional ConsoleReporter for live CLI output
            artifacts_dir: If set, the intended scenario list is written here
        """
        self.device = device
        self.state = state or RunState(diagnostics=diagnostics)
        if diagnostics is not None and self.state.diagnostics is None:
            self.state.diagnostics = diagnostics
        self.callbacks = callbacks or Callbacks()
        self._diagnostics = diagnostics
        self._capture_screen = capture_screen
        self._reporter = reporter
        self._artifacts_dir = artifacts_dir
        self._last_run_scenario: str | None = None

    def run_by_tags(
        self,
        scenarios: Sequence[Scenario],
        tags_any: Sequence[str],
        tags_all: Sequence[str],
        tags_none: Sequence[str],
        seed: int | None = None,
    ) -> RunResult:
        """Run the scenarios matching the tag sets that this device supports."""
        logger.info(
            "Running scenarios with tagsAny: [%s], tagsAll: [%s], tagsNone: [%s]",
            ", ".join(tags_any),
            ", ".join(tags_all),
            ", ".join(tags_none),
        )
        selected = select_by_tags(scenarios, tags_any, tags_all, tags_none, self.device)
        return self.run_list(selected, seed)

    def run_by_names(
        self, scenarios: Sequence[Scenario], names: Sequence[str], seed: int | None = None
    ) -> RunResult:
        """Run the named scenarios that this device supports."""
        logger.info("Running %d scenarios by name", len(names))
        selected = select_by_names(scenarios, names, self.device)
        return self.run_list(selected, seed)

    def run_list(self, scenarios: Sequence[Scenario], seed: int | None = None) -> RunResult:
        """Run a list of scenarios, optionally reordered once by seed.

        A failing scenario never stops the run.
        """
        to_run = list(scenarios)
        if seed is not None:
            logger.info("Randomizing scenarios with seed = %d", seed)
            to_run = shuffle(to_run, seed)

        run = RunResult(device=self.device, seed=seed)
        t0 = time.time()

        ok, error = execute_callback(self.callbacks, "prepare")
        if not ok:
            run.prepared = False
            run.error = error
            run.duration = time.time() - t0
            return run

        if self._artifacts_dir is not None:
            from screenplay.core.report import ReportGenerator

            path = ReportGenerator(self._artifacts_dir).write_intended_test_list(to_run)
            logger.info("Saved intended test list to: %s", path)

        logger.info("%d scenarios to run", len(to_run))
        for index, scenario in enumerate(to_run, start=1):
            message = f"Running scenario {index} of {len(to_run)}"
            run.add(self.run_scenario(scenario, message, index=index, total=len(to_run)))

        run.duration = time.time() - t0
        logger.info(
            "Completed running scenario list (%d scenarios) in %.1fs: %s",
            len(to_run),
            run.duration,
            run.summary(),
        )
        execute_callback(
            self.callbacks,
            "complete",
            {"scenarioCount": len(to_run), "timeStarted": t0, "duration": run.duration},
        )
        return run

    def run_scenario(
        self,
        scenario: Scenario,
        message: str | None = None,
        *,
        index: int | None = None,
        total: int | None = None,
    ) -> ScenarioResult:
        """Run one scenario and fire its pass/fail callback."""
        t1 = time.time()
        if self._reporter:
            self._reporter.start_scenario(scenario.title, len(scenario.steps), index, total)

        result = self._evaluate_scenario(scenario, message)
        result.duration = time.time() - t1

        if self._reporter:
            self._reporter.finish_scenario(result)

        logger.debug("Scenario completed in %.2fs", result.duration)
        info = {"scenarioName": scenario.title, "timeStarted": t1, "duration": result.duration}
        execute_callback(
            self.callbacks, "on_scenario_pass" if result.passed else "on_scenario_fail", info
        )
        return result

    def _evaluate_scenario(self, scenario: Scenario, message: str | None) -> ScenarioResult:
        """Run the steps of a scenario and classify the outcome."""
        total_steps = len(scenario.steps)
        result = ScenarioResult(
            title=scenario.title, status=PASSED, tags=scenario.tags, total_steps=total_steps
        )

        logger.info("Starting scenario: %s", scenario.title)
        logger.info("Scenario tags are [%s]", ", ".join(scenario.tags))
        if message:
            logger.info(message)
        if self._last_run_scenario:
            logger.info("(Previous test was: %s)", self._last_run_scenario)
        else:
            logger.debug("(No previous test)")
        self._last_run_scenario = scenario.title

        logger.info("STEP 0: Reset state for new scenario")
        self.state.reset()
        ok, error = execute_callback(
            self.callbacks, "pre_scenario", None, log_fail=True
        )
        if not ok:
            self._log_diagnostics()
            result.status = SETUP_FAILED
            result.error = f"Test setup failed: {error}"
            logger.error(result.error)
            return result

        step_name = ""
        number = 0
        try:
            for number, step in enumerate(scenario.steps, start=1):
                step_name = step.name
                self.state.set_step(number, step_name)
                self._log_step(number, total_steps, step)
                if self._reporter:
                    self._reporter.step_started(number, step.name, step.summary())

                deferred_before = len(self.state.deferred_failures)
                self._assert_correct_screen(step)
                self._execute_step_action(step)
                result.steps_run = number

                if self._reporter:
                    deferred = len(self.state.deferred_failures) > deferred_before
                    self._reporter.step_completed(number, "deferred" if deferred else PASSED)

        except Exception as e:
            failure = str(e) or type(e).__name__
            long_message = (
                f"Step {number} of {total_steps} ({step_name}) failed in scenario: "
                f'"{scenario.title}" with message: {failure}'
            )
            if isinstance(e, InvariantViolation):
                logger.error("Selection/execution mismatch: %s", failure)
            logger.debug("FAILED: %s", failure, exc_info=True)
            self._log_diagnostics()
            self._capture(step_name)

            if self._reporter:
                self._reporter.step_completed(number, FAILED, failure)

            deferred = list(self.state.deferred_failures)
            if deferred:
                self._log_deferred(deferred)
                long_message += f" :: {len(deferred)} other failures had been deferred"

            logger.error(long_message)
            result.status = FAILED
            result.error = long_message
            result.failed_step = number
            result.failed_action = step_name
            result.deferred_failures = deferred
            return result

        deferred = list(self.state.deferred_failures)
        result.deferred_failures = deferred
        if deferred:
            self._log_deferred(deferred)
            result.status = FAILED
            listed = "; ".join(f"{i}: {msg}" for i, msg in enumerate(deferred, start=1))
            result.error = (
                f"The test completed all its steps, but {len(deferred)} failures were deferred "
                f"({listed})"
            )
            logger.error(result.error)
            return result

        logger.info("Scenario passed: %s", scenario.title)
        return result

    def _log_step(self, number: int, total: int, step: Step) -> None:
        action = step.action
        logger.info(
            "STEP %d of %d: (%s.%s) %s%s",
            number,
            total,
            action.app_name,
            action.qualified_name,
            action.description,
            step.summary(),
        )

    def _log_deferred(self, deferred: list[str]) -> None:
        for i, msg in enumerate(deferred, start=1):
            logger.info("Deferred Failure %d: %s", i, msg)

    def _assert_correct_screen(self, step: Step) -> None:
        """Check that the screen owning the step's action is active."""
        predicate = step.action.is_correct_screen.get(self.device)
        if predicate is None:
            raise InvariantViolation(
                f"No screen-is-active function defined for '{step.name}' on {self.device}"
            )
        if not predicate():
            raise VerificationFailure(
                f"Failed assertion that '{step.action.screen_name}' is active"
            )

    def _execute_step_action(self, step: Step) -> None:
        """Call the device-specific (or default) implementation of the step's action."""
        fn = step.action.implementation_for(self.device)
        if fn is None:
            raise InvariantViolation(
                f"No implementation of '{step.name}' for {self.device} or default, "
                "but the scenario was selected to run"
            )
        if step.parameters is not None:
            fn(dict(step.parameters))
        else:
            fn()

    def _log_diagnostics(self) -> None:
        if self._diagnostics is None:
            return
        try:
            logger.debug("Screen state:\n%s", self._diagnostics())
        except Exception as e:
            logger.warning("Diagnostic dump failed: %s", e)

    def _capture(self, name: str) -> None:
        if self._capture_screen is None:
            return
        try:
            self._capture_screen(name)
        except Exception as e:
            logger.warning("Screen capture failed: %s", e)
