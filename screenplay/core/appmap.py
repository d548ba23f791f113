"""App map builder: apps have screens, screens have actions.

Definitions are built with chained calls, each returning a builder that
carries its own cursor:

    appmap.create_or_augment_app("SampleApp").with_screen("home")
        .on_device("iPhone", lambda: home_visible())
        .with_action("pressButton", "Press the button")
        .with_implementation(press_button, "iPhone")

Re-entering an app, screen or action augments the existing definition
instead of replacing it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from screenplay.core.errors import SetupError, VerificationFailure
from screenplay.models.appmap import (
    DEFAULT_DEVICE,
    Action,
    ActionImplementation,
    App,
    ParamSpec,
    Screen,
    ScreenPredicate,
    snapshot_predicates,
)

logger = logging.getLogger("screenplay.appmap")

VERIFY_IS_ACTIVE = "verifyIsActive"
VERIFY_NOT_ACTIVE = "verifyNotActive"

# Seconds verifyNotActive waits for animations before checking
DEFAULT_SETTLE_DELAY = 0.35


def _always_true() -> bool:
    return True


def _noop(parameters: dict[str, Any] | None = None) -> None:
    pass


class AppMap:
    """Stores all app definitions, keyed by app name."""

    def __init__(self, settle_delay: float = DEFAULT_SETTLE_DELAY):
        self.apps: dict[str, App] = {}
        self.settle_delay = settle_delay

    def __getitem__(self, app_name: str) -> App:
        return self.apps[app_name]

    def has_app(self, app_name: str) -> bool:
        return app_name in self.apps

    def has_screen(self, app_name: str, screen_name: str) -> bool:
        return self.has_app(app_name) and screen_name in self.apps[app_name].screens

    def has_action(self, app_name: str, screen_name: str, action_name: str) -> bool:
        return (
            self.has_screen(app_name, screen_name)
            and action_name in self.apps[app_name].screens[screen_name].actions
        )

    def get_apps(self) -> list[str]:
        return list(self.apps)

    def get_screens(self, app_name: str) -> list[str]:
        return list(self.apps[app_name].screens)

    def get_action(self, app_name: str, screen_name: str, action_name: str) -> Action | None:
        """Look up an action, returning None if any level is missing."""
        if not self.has_action(app_name, screen_name, action_name):
            return None
        return self.apps[app_name].screens[screen_name].actions[action_name]

    def create_or_augment_app(self, app_name: str) -> AppBuilder:
        """Start (or resume) building an app."""
        app = self.apps.get(app_name)
        if app is None:
            logger.debug("Creating app %s", app_name)
            app = App(name=app_name)
            self.apps[app_name] = app
        else:
            logger.debug("Augmenting app %s", app_name)
        return AppBuilder(self, app)

    def to_markdown(self) -> str:
        """Render every app, screen, action and parameter as markdown."""
        lines = ["The following apps are defined in the app map:", ""]
        for app in self.apps.values():
            lines.append(app.name)
            lines.append("=" * max(10, len(app.name)))
            lines.append("")
            for screen in app.screens.values():
                lines.append(f"## {screen.name}")
                devices = ", ".join(f"`{d}`" for d in screen.is_active) or "(none)"
                lines.append(f"Devices: {devices}")
                lines.append("")
                for action in screen.actions.values():
                    impls = ", ".join(f"`{d}`" for d in action.implementations) or "(none)"
                    lines.append(f"* **{action.name}**: {action.description} (implementations: {impls})")
                    for param_name, spec in action.params.items():
                        kind = "required" if spec.required else "optional"
                        lines.append(f"    * `{param_name}` ({kind}): {spec.description}")
                lines.append("")
        return "\n".join(lines)


class AppBuilder:
    """Builder cursor positioned on one app."""

    def __init__(self, appmap: AppMap, app: App):
        self._appmap = appmap
        self.app = app

    def with_screen(self, screen_name: str) -> ScreenBuilder:
        """Start (or resume) building a screen of this app."""
        screen = self.app.screens.get(screen_name)
        if screen is None:
            logger.debug("Adding screen %s.%s", self.app.name, screen_name)
            screen = Screen(app_name=self.app.name, name=screen_name)
            self.app.screens[screen_name] = screen
        else:
            logger.debug("Augmenting screen %s.%s", self.app.name, screen_name)
        return ScreenBuilder(self, screen)


class ScreenBuilder:
    """Builder cursor positioned on one screen."""

    def __init__(self, app_builder: AppBuilder, screen: Screen):
        self._app_builder = app_builder
        self.screen = screen

    def with_screen(self, screen_name: str) -> ScreenBuilder:
        return self._app_builder.with_screen(screen_name)

    def on_device(self, device: str, is_active_fn: ScreenPredicate) -> ScreenBuilder:
        """Enable the screen on a device.

        is_active_fn() should return True if the screen is currently both
        visible and accessible. Also defines the verifyIsActive and
        verifyNotActive actions for the device.
        """
        logger.debug("Screen %s on device %s", self.screen.name, device)
        self.screen.is_active[device] = is_active_fn
        screen_name = self.screen.name

        verify_is_active = self.with_action(
            VERIFY_IS_ACTIVE, f"Null op to verify that the {screen_name} screen is active"
        )
        verify_is_active.action.is_correct_screen = snapshot_predicates(self.screen.is_active)
        verify_is_active.with_implementation(_noop, device)

        appmap = self._app_builder._appmap

        def verify_not_active(parameters: dict[str, Any] | None = None) -> None:
            time.sleep(appmap.settle_delay)
            if is_active_fn():
                raise VerificationFailure(f"Failed assertion that '{screen_name}' is NOT active")

        verify_not = self.with_action(
            VERIFY_NOT_ACTIVE, f"Verify that the {screen_name} screen is NOT active"
        )
        # The real check happens in the implementation, so the screen
        # precondition always holds for this action.
        verify_not.action.is_correct_screen = snapshot_predicates(
            {d: _always_true for d in self.screen.is_active}
        )
        verify_not.with_implementation(verify_not_active, device)
        return self

    def resync_actions(self) -> ScreenBuilder:
        """Re-snapshot the screen's predicates into every existing action."""
        for action in self.screen.actions.values():
            if action.name == VERIFY_NOT_ACTIVE:
                action.is_correct_screen = snapshot_predicates(
                    {d: _always_true for d in self.screen.is_active}
                )
            else:
                action.is_correct_screen = snapshot_predicates(self.screen.is_active)
        return self

    def with_action(self, action_name: str, description: str = "") -> ActionBuilder:
        """Start (or resume) building an action on this screen."""
        action = self.screen.actions.get(action_name)
        if action is None:
            logger.debug("Adding action %s.%s", self.screen.name, action_name)
            action = Action(
                app_name=self.screen.app_name,
                screen_name=self.screen.name,
                name=action_name,
                description=description,
                is_correct_screen=snapshot_predicates(self.screen.is_active),
            )
            self.screen.actions[action_name] = action
        else:
            logger.debug("Augmenting action %s.%s", self.screen.name, action_name)
        return ActionBuilder(self, action)


class ActionBuilder:
    """Builder cursor positioned on one action."""

    def __init__(self, screen_builder: ScreenBuilder, action: Action):
        self._screen_builder = screen_builder
        self.action = action

    def with_screen(self, screen_name: str) -> ScreenBuilder:
        return self._screen_builder.with_screen(screen_name)

    def with_action(self, action_name: str, description: str = "") -> ActionBuilder:
        return self._screen_builder.with_action(action_name, description)

    def on_device(self, device: str, is_active_fn: ScreenPredicate) -> ScreenBuilder:
        return self._screen_builder.on_device(device, is_active_fn)

    def with_param(
        self,
        name: str,
        description: str,
        required: bool = False,
        include_in_summary: bool = False,
    ) -> ActionBuilder:
        """Add (or overwrite) a parameter on this action."""
        logger.debug("Adding parameter %s to %s", name, self.action.qualified_name)
        self.action.params[name] = ParamSpec(
            description=description,
            required=required,
            include_in_summary=include_in_summary,
        )
        return self

    def with_implementation(
        self, fn: ActionImplementation | Callable[[], None], device: str = DEFAULT_DEVICE
    ) -> ActionBuilder:
        """Register an implementation for a device, or the default one.

        Raises:
            SetupError: If the device has no is-active predicate on this screen.
        """
        if device != DEFAULT_DEVICE and device not in self.action.is_correct_screen:
            devices = "', '".join(self.action.devices)
            raise SetupError(
                f"Screen {self.action.app_name}.{self.action.screen_name} only has devices: "
                f"'{devices}' but tried to add an implementation for device '{device}' "
                f"in action '{self.action.name}'"
            )
        logger.debug("Adding implementation of %s on %s", self.action.qualified_name, device)
        self.action.implementations[device] = fn
        return self
