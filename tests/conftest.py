"""Shared fixtures: a small Login app defined for iPhone."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from screenplay.core.automator import Automator


@pytest.fixture(autouse=True)
def reset_screenplay_logger():
    """Close debug.log handlers left by setup_logging."""
    yield
    root_logger = logging.getLogger("screenplay")
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


@pytest.fixture
def automator() -> Automator:
    """Automator with no settle delay so verifyNotActive tests run fast."""
    return Automator(settle_delay=0)


@pytest.fixture
def login_impls() -> dict[str, MagicMock]:
    """Mock implementations for the Login app actions."""
    return {
        "enterText": MagicMock(name="enterText"),
        "tapButton": MagicMock(name="tapButton"),
        "openProfile": MagicMock(name="openProfile"),
    }


@pytest.fixture
def login_app(automator: Automator, login_impls: dict[str, MagicMock]) -> Automator:
    """Automator with a LoginApp whose screens are always active on iPhone."""
    (
        automator.create_or_augment_app("LoginApp")
        .with_screen("loginScreen")
        .on_device("iPhone", lambda: True)
        .with_action("enterText", "Type into a text field")
        .with_param("field", "Field to type into", True, True)
        .with_param("text", "Text to type")
        .with_implementation(login_impls["enterText"], "iPhone")
        .with_action("tapButton", "Tap a button by label")
        .with_param("label", "Button label", True, True)
        .with_implementation(login_impls["tapButton"])
        .with_screen("homeScreen")
        .on_device("iPhone", lambda: True)
        .with_action("openProfile", "Open the profile page")
        .with_implementation(login_impls["openProfile"], "iPhone")
    )
    return automator
