"""App map data models: apps, screens, actions and their parameters."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

DEFAULT_DEVICE = "default"

ScreenPredicate = Callable[[], bool]
ActionImplementation = Callable[..., None]


@dataclass
class ParamSpec:
    """Schema entry for one action parameter."""

    description: str
    required: bool = False
    include_in_summary: bool = False


def snapshot_predicates(
    predicates: Mapping[str, ScreenPredicate],
) -> Mapping[str, ScreenPredicate]:
    """Return a read-only copy of a device -> predicate map.

    Actions keep their own copy so later changes to the screen are not seen
    until the action is explicitly re-synced.
    """
    return MappingProxyType(dict(predicates))


@dataclass
class Action:
    """A named, parameterized operation bound to a screen."""

    app_name: str
    screen_name: str
    name: str
    description: str
    params: dict[str, ParamSpec] = field(default_factory=dict)
    implementations: dict[str, ActionImplementation] = field(default_factory=dict)
    is_correct_screen: Mapping[str, ScreenPredicate] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def qualified_name(self) -> str:
        return f"{self.screen_name}.{self.name}"

    @property
    def devices(self) -> list[str]:
        """Devices this action's screen can be verified on."""
        return list(self.is_correct_screen)

    def implementation_for(self, device: str) -> ActionImplementation | None:
        """Device-specific implementation, falling back to the default one."""
        if device in self.implementations:
            return self.implementations[device]
        return self.implementations.get(DEFAULT_DEVICE)

    def __repr__(self) -> str:
        return f"Action({self.app_name}.{self.qualified_name})"


@dataclass
class Screen:
    """A distinguishable UI state, identified per device by a predicate."""

    app_name: str
    name: str
    is_active: dict[str, ScreenPredicate] = field(default_factory=dict)
    actions: dict[str, Action] = field(default_factory=dict)

    def __getattr__(self, item: str) -> Any:
        # Allows app.homeScreen.pressButton style lookups in scenario files
        actions = self.__dict__.get("actions", {})
        if item in actions:
            return actions[item]
        raise AttributeError(f"Screen '{self.name}' has no action '{item}'")


@dataclass
class App:
    """Top-level namespace grouping the screens of one target application."""

    name: str
    screens: dict[str, Screen] = field(default_factory=dict)

    def __getattr__(self, item: str) -> Any:
        screens = self.__dict__.get("screens", {})
        if item in screens:
            return screens[item]
        raise AttributeError(f"App '{self.name}' has no screen '{item}'")
