"""Scenario store: builds scenarios of steps and enforces unique titles."""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

from screenplay.core.errors import DuplicateNameError, SetupError
from screenplay.models.appmap import Action, ParamSpec
from screenplay.models.scenario import UNTAGGED, Scenario, Step

logger = logging.getLogger("screenplay.scenarios")

DISALLOWED_TAG_CHARS = frozenset("!@#$%^&*()[]{}<>`~,'\"/\\+=;:")

# Frames from these files are skipped when recording where a scenario was defined
_INTERNAL_FILES = {"scenarios.py", "automator.py", "parser.py"}


def params_to_string(params: Mapping[str, ParamSpec]) -> str:
    """Readable description of the parameters an action expects."""
    described = [
        f"{name} ({'required' if spec.required else 'optional'}: {spec.description})"
        for name, spec in params.items()
    ]
    return f"parameters are: [{', '.join(described)}]"


def _definition_site() -> tuple[str | None, str | None]:
    """Find the file and function that called into the scenario store."""
    for frame_info in inspect.stack(context=0)[2:]:
        if Path(frame_info.filename).name not in _INTERNAL_FILES:
            return frame_info.filename, frame_info.function
    return None, None


class ScenarioStore:
    """Holds every defined scenario in creation order."""

    def __init__(self) -> None:
        self._scenarios: list[Scenario] = []
        self._by_title: dict[str, Scenario] = {}

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self._scenarios)

    def __len__(self) -> int:
        return len(self._scenarios)

    def __contains__(self, title: object) -> bool:
        return title in self._by_title

    def get(self, title: str) -> Scenario | None:
        return self._by_title.get(title)

    @property
    def scenarios(self) -> list[Scenario]:
        return list(self._scenarios)

    def create_scenario(self, title: str, tags: list[str] | None = None) -> ScenarioBuilder:
        """Create an empty scenario and return a builder for its steps.

        Args:
            title: Scenario title, unique across the store
            tags: Tags for selection (defaults to ["_untagged"])

        Raises:
            DuplicateNameError: If the title is already used
            SetupError: If a tag contains a disallowed character
        """
        if title in self._by_title:
            raise DuplicateNameError(
                f"Can't create Scenario '{title}', because that name already exists"
            )

        tags = list(tags) if tags else [UNTAGGED]
        for tag in tags:
            for char in tag:
                if char in DISALLOWED_TAG_CHARS:
                    raise SetupError(
                        f"Disallowed character '{char}' in tag '{tag}' in scenario '{title}'"
                    )

        in_file, defined_by = _definition_site()
        scenario = Scenario(title=title, tags=tuple(tags), in_file=in_file, defined_by=defined_by)
        logger.debug("Creating scenario '%s' [%s]", title, ", ".join(scenario.tags))

        self._scenarios.append(scenario)
        self._by_title[title] = scenario
        return ScenarioBuilder(scenario, self)

    def discard(self, title: str) -> None:
        """Forget a scenario whose definition failed part way."""
        scenario = self._by_title.pop(title, None)
        if scenario is not None:
            self._scenarios.remove(scenario)
            logger.debug("Discarded scenario '%s'", title)

    def all_tags(self) -> list[str]:
        """Every tag used by any scenario, in first-seen order."""
        seen: dict[str, None] = {}
        for scenario in self._scenarios:
            for tag in scenario.tags:
                seen.setdefault(tag, None)
        return list(seen)

    def to_manifest(self, include_steps: bool = False) -> dict[str, Any]:
        """Machine-readable list of scenarios."""
        scenarios = []
        for scenario in self._scenarios:
            entry: dict[str, Any] = {
                "title": scenario.title,
                "tags": list(scenario.tags),
                "inFile": scenario.in_file,
                "definedBy": scenario.defined_by,
            }
            if include_steps:
                entry["steps"] = [step.name for step in scenario.steps]
            scenarios.append(entry)
        return {"scenarios": scenarios}

    def to_markdown(self) -> str:
        """Render all scenarios with their steps and parameter values."""
        lines = ["The following scenarios are defined:", "", "Scenarios", "=" * 10]
        for scenario in self._scenarios:
            lines.extend(["", "", scenario.title, "-" * max(10, len(scenario.title))])
            lines.append("Tags: `" + "`, `".join(scenario.tags) + "`")
            lines.append("")
            for number, step in enumerate(scenario.steps, start=1):
                lines.append(f"{number}. **{step.name}**: {step.action.description}")
                for key, value in (step.parameters or {}).items():
                    lines.append(f"    * `{key}` = {_format_param(value)}")
        return "\n".join(lines)


def _format_param(value: Any) -> str:
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, str):
        return f"`{value}`"
    if callable(value):
        name = getattr(value, "__qualname__", repr(value))
        return f"`{name}` (function)"
    try:
        encoded = json.dumps(value)
    except (TypeError, ValueError):
        encoded = repr(value)
    return f"`{encoded}` ({type(value).__name__})"


class ScenarioBuilder:
    """Adds steps to one scenario, validating parameters as it goes."""

    def __init__(self, scenario: Scenario, store: ScenarioStore | None = None):
        self.scenario = scenario
        self._store = store

    def _abandon(self) -> None:
        if self._store is not None:
            self._store.discard(self.scenario.title)

    def _fail_prefix(self, action: Action) -> str:
        return (
            f"In scenario '{self.scenario.title}' in step {len(self.scenario.steps) + 1} "
            f"({action.name}) "
        )

    def _assert_required_parameters(
        self, action: Action, parameters: Mapping[str, Any] | None
    ) -> None:
        for name, spec in action.params.items():
            if spec.required and (parameters is None or parameters.get(name) is None):
                raise SetupError(
                    f"{self._fail_prefix(action)}missing required parameter '{name}'; "
                    f"{params_to_string(action.params)}"
                )

    def _assert_known_parameters(self, action: Action, parameters: Mapping[str, Any]) -> None:
        for name in parameters:
            if name not in action.params:
                raise SetupError(
                    f"{self._fail_prefix(action)}received undefined parameter '{name}'; "
                    f"{params_to_string(action.params)}"
                )

    def with_step(
        self, action: Action | None, parameters: Mapping[str, Any] | None = None
    ) -> ScenarioBuilder:
        """Append a step to the scenario.

        A step that fails validation removes the whole scenario from its
        store, so a half-built scenario is never selected or run.

        Raises:
            SetupError: If the action is unresolved, a required parameter is
                missing, or an unknown parameter is supplied.
        """
        try:
            self._validate_step(action, parameters)
        except SetupError:
            self._abandon()
            raise

        self.scenario.steps.append(Step(action=action, parameters=parameters))
        return self

    def _validate_step(self, action: Action | None, parameters: Mapping[str, Any] | None) -> None:
        if action is None or isinstance(action, str):
            message = f"with_step received an undefined screen action in scenario '{self.scenario.title}'"
            if self.scenario.steps:
                message += f" after step {self.scenario.steps[-1].name}"
            raise SetupError(message)

        self._assert_required_parameters(action, parameters)
        if parameters is not None:
            self._assert_known_parameters(action, parameters)

    def with_conditional_step(
        self,
        condition: bool,
        action: Action | None,
        parameters: Mapping[str, Any] | None = None,
    ) -> ScenarioBuilder:
        """Append a step only if condition holds when the scenario is defined."""
        if condition:
            self.with_step(action, parameters)
        return self

    def with_repeated_step(
        self,
        action: Action | None,
        quantity: int,
        parameters: Mapping[str, Any] | Callable[[int], Mapping[str, Any] | None] | None = None,
    ) -> ScenarioBuilder:
        """Append the same action quantity times.

        parameters may be a mapping, or a function taking the 0-indexed
        repetition number and returning the mapping for that repetition.
        """
        for i in range(quantity):
            params = parameters(i) if callable(parameters) else parameters
            self.with_step(action, params)
        return self

    def with_generated_steps(
        self,
        generator: Callable[[ScenarioBuilder, Any], None],
        parameters: Any = None,
    ) -> ScenarioBuilder:
        """Let a function add steps to this scenario.

        If the generator raises, the scenario is removed from its store.
        """
        try:
            generator(self, parameters)
        except Exception:
            self._abandon()
            raise
        return self
