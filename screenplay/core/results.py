"""Scenario and run outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field

PASSED = "passed"
FAILED = "failed"
SETUP_FAILED = "setup_failed"


@dataclass
class ScenarioResult:
    """Outcome of executing one scenario."""

    title: str
    status: str  # "passed", "failed", "setup_failed"
    duration: float = 0.0
    tags: tuple[str, ...] = ()
    deferred_failures: list[str] = field(default_factory=list)
    error: str | None = None
    failed_step: int | None = None  # 1-based
    failed_action: str | None = None  # "screen.action"
    steps_run: int = 0
    total_steps: int = 0

    @property
    def passed(self) -> bool:
        return self.status == PASSED


@dataclass
class RunResult:
    """Collects scenario outcomes for one run."""

    results: list[ScenarioResult] = field(default_factory=list)
    device: str | None = None
    seed: int | None = None
    duration: float = 0.0
    prepared: bool = True
    error: str | None = None

    def add(self, result: ScenarioResult) -> None:
        self.results.append(result)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> list[ScenarioResult]:
        return [r for r in self.results if r.status == PASSED]

    @property
    def failed(self) -> list[ScenarioResult]:
        return [r for r in self.results if r.status != PASSED]

    @property
    def status(self) -> str:
        if not self.prepared or self.failed:
            return FAILED
        return PASSED

    def summary(self) -> str:
        """One-line summary distinguishing empty, all-passed and failing runs."""
        if not self.prepared:
            return f"Run preparation failed: {self.error}"
        if not self.results:
            return "No scenarios selected"
        if not self.failed:
            return f"All {self.total} scenarios passed"
        return f"{len(self.failed)} of {self.total} scenarios failed"
