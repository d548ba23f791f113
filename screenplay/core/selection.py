"""Scenario selection by tags or names, filtered by device support."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from screenplay.models.scenario import Scenario

logger = logging.getLogger("screenplay.selection")


def matches_criteria(
    scenario: Scenario,
    tags_any: Sequence[str],
    tags_all: Sequence[str],
    tags_none: Sequence[str],
) -> bool:
    """Whether a scenario's tags satisfy the three tag sets.

    tags_all and tags_none are hard filters applied first. An empty tags_any
    then accepts everything; otherwise at least one of its tags must match.
    """
    if any(tag not in scenario.tag_set for tag in tags_all):
        return False
    if any(tag in scenario.tag_set for tag in tags_none):
        return False
    if not tags_any:
        return True
    return any(tag in scenario.tag_set for tag in tags_any)


def unsupported_reason(scenario: Scenario, device: str) -> str | None:
    """Explain why a scenario can't run on a device, or None if it can."""
    for step in scenario.steps:
        action = step.action
        if device not in action.is_correct_screen:
            return (
                f"Skipping scenario '{scenario.title}' because screen '{action.screen_name}' "
                f"doesn't have a screen-is-active function for {device}"
            )
        if action.implementation_for(device) is None:
            return (
                f"Skipping scenario '{scenario.title}' because action '{action.qualified_name}' "
                f"isn't supported on {device}"
            )
    return None


def device_supports_scenario(scenario: Scenario, device: str) -> bool:
    reason = unsupported_reason(scenario, device)
    if reason is not None:
        logger.debug(reason)
        return False
    return True


def select_by_tags(
    scenarios: Iterable[Scenario],
    tags_any: Sequence[str],
    tags_all: Sequence[str],
    tags_none: Sequence[str],
    device: str,
) -> list[Scenario]:
    """Scenarios matching the tag sets and supported on device, in creation order."""
    return [
        scenario
        for scenario in scenarios
        if matches_criteria(scenario, tags_any, tags_all, tags_none)
        and device_supports_scenario(scenario, device)
    ]


def select_by_names(
    scenarios: Iterable[Scenario], names: Sequence[str], device: str
) -> list[Scenario]:
    """Scenarios with the given titles, in the order the titles are given.

    Unknown titles are skipped with a warning; repeated titles are selected once.
    """
    by_title = {scenario.title: scenario for scenario in scenarios}
    selected: list[Scenario] = []
    seen: set[str] = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        scenario = by_title.get(name)
        if scenario is None:
            logger.warning("No scenario named '%s' is defined, skipping it", name)
            continue
        if device_supports_scenario(scenario, device):
            selected.append(scenario)
    return selected
