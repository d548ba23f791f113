"""Tests for the built-in "do" screen actions."""

import logging
from unittest.mock import patch

import pytest

from screenplay.core.builtin import BUILTIN_APP, BUILTIN_SCREEN, install_builtin_actions
from screenplay.core.errors import SetupError
from screenplay.core.results import FAILED, PASSED


@pytest.fixture
def do_screen(automator):
    install_builtin_actions(automator, ["iPhone", "iPad"])
    return automator.appmap[BUILTIN_APP].screens[BUILTIN_SCREEN]


class TestBuiltinActions:
    """Tests for delay, debug, fail and logState."""

    def test_installed_on_every_device(self, do_screen):
        assert set(do_screen.is_active) == {"iPhone", "iPad"}
        assert {"delay", "debug", "fail", "logState"} <= set(do_screen.actions)

    def test_delay_requires_seconds(self, automator, do_screen):
        with pytest.raises(SetupError, match="'seconds'"):
            automator.create_scenario("Wait").with_step(do_screen.delay)

    def test_delay_sleeps(self, automator, do_screen):
        scenario = automator.create_scenario("Wait").with_step(do_screen.delay, {"seconds": 2}).scenario

        with patch("screenplay.core.builtin.time.sleep") as sleep:
            result = automator.runner("iPhone").run_scenario(scenario)

        assert result.status == PASSED
        sleep.assert_called_once_with(2)
        assert scenario.steps[0].summary() == " {seconds: 2}"

    def test_debug_logs_function_result(self, automator, do_screen, caplog):
        scenario = (
            automator.create_scenario("Debug")
            .with_step(do_screen.debug, {"debug_fn": lambda: "tree dump"})
            .scenario
        )

        with caplog.at_level(logging.INFO, logger="screenplay.builtin"):
            automator.runner("iPad").run_scenario(scenario)

        assert "tree dump" in caplog.text

    def test_fail_halts_scenario(self, automator, do_screen):
        scenario = (
            automator.create_scenario("Fail")
            .with_step(do_screen.fail)
            .with_step(do_screen.logState)
            .scenario
        )

        result = automator.runner("iPhone").run_scenario(scenario)

        assert result.status == FAILED
        assert result.failed_step == 1
        assert "purposely-thrown exception" in result.error

    def test_log_state(self, automator, do_screen, caplog):
        automator.callbacks.pre_scenario = lambda: automator.set_state("user", "user1")
        scenario = automator.create_scenario("State").with_step(do_screen.logState).scenario

        with caplog.at_level(logging.INFO, logger="screenplay.builtin"):
            automator.runner("iPhone").run_scenario(scenario)

        assert "'user': 'user1'" in caplog.text
