"""Per-scenario run state shared between steps."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("screenplay.state")


class RunState:
    """Mutable state for the scenario currently executing.

    Holds the internal bookkeeping used for error attribution, the list of
    deferred failures, and a key/value store that steps can use to pass
    values to later steps. Everything is cleared by reset() at the start of
    each scenario.
    """

    def __init__(self, diagnostics: Callable[[], str] | None = None):
        self.diagnostics = diagnostics
        self.external: dict[str, Any] = {}
        self.current_step_name: str | None = None
        self.current_step_number: int | None = None
        self.deferred_failures: list[str] = []

    def reset(self) -> None:
        self.external = {}
        self.current_step_name = None
        self.current_step_number = None
        self.deferred_failures = []

    def set_step(self, number: int, name: str) -> None:
        self.current_step_number = number
        self.current_step_name = name

    def set_state(self, key: str, value: Any) -> None:
        self.external[key] = value

    def has_state(self, key: str) -> bool:
        return key in self.external

    def get_state(self, key: str, default: Any = None) -> Any:
        if self.has_state(key):
            return self.external[key]
        logger.debug("State '%s' not found, returning default", key)
        return default

    def defer_failure(self, message: Any) -> None:
        """Record a failure to be reported when the scenario ends."""
        logger.debug("Deferring an error: %s", message)
        if self.diagnostics is not None:
            try:
                logger.debug("Screen state:\n%s", self.diagnostics())
            except Exception as e:
                logger.warning("Diagnostic dump failed: %s", e)

        if self.current_step_name and self.current_step_number:
            prefix = f"Step {self.current_step_number} ({self.current_step_name}): "
        else:
            prefix = "<Undefined step>: "
        self.deferred_failures.append(f"{prefix}{message}")
