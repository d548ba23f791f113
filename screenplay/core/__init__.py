"""Core modules for screenplay."""

from screenplay.core.appmap import ActionBuilder, AppBuilder, AppMap, ScreenBuilder
from screenplay.core.automator import Automator
from screenplay.core.builtin import install_builtin_actions
from screenplay.core.config import ConfigLoader, ScreenplayConfig, TagConfig
from screenplay.core.errors import (
    DuplicateNameError,
    InvariantViolation,
    RuntimeFailure,
    ScreenplayError,
    SetupError,
    VerificationFailure,
)
from screenplay.core.results import RunResult, ScenarioResult
from screenplay.core.runner import Callbacks, ScenarioRunner
from screenplay.core.scenarios import ScenarioBuilder, ScenarioStore
from screenplay.core.selection import (
    device_supports_scenario,
    matches_criteria,
    select_by_names,
    select_by_tags,
)
from screenplay.core.shuffle import shuffle
from screenplay.core.state import RunState
from screenplay.core.waiting import wait_for, wait_for_return_value

__all__ = [
    "ActionBuilder",
    "AppBuilder",
    "AppMap",
    "Automator",
    "Callbacks",
    "ConfigLoader",
    "DuplicateNameError",
    "InvariantViolation",
    "RunResult",
    "RunState",
    "RuntimeFailure",
    "ScenarioBuilder",
    "ScenarioResult",
    "ScenarioRunner",
    "ScenarioStore",
    "ScreenBuilder",
    "ScreenplayConfig",
    "ScreenplayError",
    "SetupError",
    "TagConfig",
    "VerificationFailure",
    "device_supports_scenario",
    "install_builtin_actions",
    "matches_criteria",
    "select_by_names",
    "select_by_tags",
    "shuffle",
    "wait_for",
    "wait_for_return_value",
]
