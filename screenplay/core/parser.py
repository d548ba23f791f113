"""YAML scenario file parser.

Scenarios can be written as data instead of Python:

    scenarios:
      - title: Press button to populate label
        tags: [smoke]
        steps:
          - SampleApp.homeScreen.pressButton
          - action: SampleApp.homeScreen.verifyLabelString
            params:
              labelText: Button Pressed
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from screenplay.core.automator import Automator
from screenplay.core.scenarios import ScenarioBuilder
from screenplay.models.appmap import Action
from screenplay.models.scenario import Scenario


class ParseError(Exception):
    """Error parsing scenario file."""

    pass


class ScenarioParser:
    """Parse YAML scenario files into scenarios of an Automator."""

    @classmethod
    def load(cls, path: Path, automator: Automator) -> list[Scenario]:
        """Parse a YAML scenario file and register its scenarios.

        Args:
            path: Path to YAML file
            automator: Automator whose app map resolves the actions

        Returns:
            Scenarios created, in file order

        Raises:
            ParseError: If the file is invalid or references unknown actions
            SetupError: If a scenario fails validation (duplicate title, bad parameters)
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ParseError(f"Scenario file not found: {path}")
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid YAML: {e}")

        if data is None:
            raise ParseError("Scenario file is empty")

        if isinstance(data, dict):
            data = data.get("scenarios")
        if not isinstance(data, list):
            raise ParseError("Scenario file must contain a list of scenarios")

        return [cls._parse_scenario(item, automator) for item in data]

    @classmethod
    def _parse_scenario(cls, data: Any, automator: Automator) -> Scenario:
        if not isinstance(data, dict):
            raise ParseError(f"Invalid scenario: {data}")
        if not data.get("title"):
            raise ParseError(f"Missing required field: title in {data}")

        tags = data.get("tags")
        if tags is not None and not isinstance(tags, list):
            tags = [tags]

        steps = data.get("steps") or []
        if not isinstance(steps, list):
            raise ParseError(f"Steps of '{data['title']}' must be a list")

        title = str(data["title"])
        builder = automator.create_scenario(title, [str(t) for t in tags] if tags else None)
        try:
            for step in steps:
                cls._parse_step(step, builder, automator)
        except Exception:
            automator.scenarios.discard(title)
            raise
        return builder.scenario

    @classmethod
    def _parse_step(cls, data: Any, builder: ScenarioBuilder, automator: Automator) -> None:
        # Simple syntax: `- App.screen.action`
        if isinstance(data, str):
            builder.with_step(cls._resolve_action(data, automator))
            return

        if not isinstance(data, dict) or "action" not in data:
            raise ParseError(f"Invalid step: {data}")

        action = cls._resolve_action(data["action"], automator)
        params = data.get("params")
        if params is not None and not isinstance(params, dict):
            raise ParseError(f"Parameters of step '{data['action']}' must be a mapping")

        repeat = data.get("repeat")
        if repeat is not None:
            builder.with_repeated_step(action, int(repeat), params)
        else:
            builder.with_step(action, params)

    @classmethod
    def _resolve_action(cls, reference: Any, automator: Automator) -> Action:
        """Resolve "App.screen.action" against the app map."""
        parts = str(reference).split(".")
        if len(parts) != 3:
            raise ParseError(f"Action reference must look like App.screen.action: {reference}")

        action = automator.appmap.get_action(*parts)
        if action is None:
            raise ParseError(f"Unknown action: {reference}")
        return action
