"""Live console output for scenario execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from screenplay.core.results import RunResult, ScenarioResult


@dataclass
class StepDisplay:
    """Display state for a single step."""

    step_num: int
    name: str
    summary: str
    status: str  # running, passed, deferred, failed
    error: str | None = None


# Status icons
ICONS = {
    "pending": "🔲",
    "running": "⏳",
    "passed": "✅",
    "deferred": "⚠️",
    "failed": "❌",
}


class ConsoleReporter:
    """Live console output for a run of scenarios.

    Uses Rich's Live display for in-place terminal updates of the steps of
    the scenario currently executing.

    Usage:
        reporter = ConsoleReporter()
        reporter.start_scenario("Login", total_steps=3, index=1, total=4)
        reporter.step_started(1, "loginScreen.enterText", " {field: user1}")
        reporter.step_completed(1, "passed")
        reporter.finish_scenario(result)
    """

    def __init__(self, console: Console | None = None):
        self._console = console or Console()
        self._title = ""
        self._position = ""
        self._steps: list[StepDisplay] = []
        self._live: Live | None = None
        self._final: ScenarioResult | None = None

    def start_scenario(
        self,
        title: str,
        total_steps: int,
        index: int | None = None,
        total: int | None = None,
    ) -> None:
        """Begin the live display for a scenario."""
        self._title = title
        self._position = f"[{index}/{total}] " if index is not None and total else ""
        self._steps = []
        self._final = None
        self._live = Live(
            self._render(),
            console=self._console,
            refresh_per_second=10,
            transient=True,  # Clear when done, we'll print final state
        )
        self._live.start()

    def step_started(self, step_num: int, name: str, summary: str = "") -> None:
        self._steps.append(StepDisplay(step_num=step_num, name=name, summary=summary, status="running"))
        self._refresh()

    def step_completed(self, step_num: int, status: str, error: str | None = None) -> None:
        for step in self._steps:
            if step.step_num == step_num:
                step.status = status
                step.error = error
                break
        self._refresh()

    def finish_scenario(self, result: ScenarioResult) -> None:
        """Stop the live display and print the final state of the scenario."""
        self._final = result
        if self._live:
            self._live.stop()
            self._live = None
        self._console.print(self._render())

    def print_summary(self, run: RunResult) -> None:
        """Print a table of scenario outcomes and the run summary line."""
        if run.results:
            table = Table(title="Scenario Results")
            table.add_column("Scenario", style="cyan")
            table.add_column("Status")
            table.add_column("Duration", justify="right")
            table.add_column("Deferred", justify="right")
            for result in run.results:
                style = "green" if result.passed else "red"
                table.add_row(
                    escape(result.title),
                    f"[{style}]{result.status}[/{style}]",
                    f"{result.duration:.1f}s",
                    str(len(result.deferred_failures)),
                )
            self._console.print(table)

        color = "green" if run.status == "passed" else "red"
        if not run.results and run.prepared:
            color = "yellow"
        self._console.print(f"[{color}]{escape(run.summary())}[/{color}]")

    def _refresh(self) -> None:
        if self._live:
            self._live.update(self._render())

    def _render(self) -> Text:
        """Build the current display."""
        lines: list[str] = []

        header = f"┌─ {self._position}{escape(self._title)} "
        header += "─" * max(0, 50 - len(header))
        lines.append(header)

        for step in self._steps:
            icon = ICONS.get(step.status, "🔲")
            line = f"│ {icon} {escape(step.name)}"
            if step.summary:
                summary = step.summary.strip()
                if len(summary) > 40:
                    summary = summary[:37] + "..."
                line += f" [dim]{escape(summary)}[/dim]"
            lines.append(line)

            if step.error:
                error = step.error
                if len(error) > 60:
                    error = error[:57] + "..."
                lines.append(f"│    [red]{escape(error)}[/red]")

        if self._final is not None:
            result = self._final
            for message in result.deferred_failures:
                lines.append(f"│    [yellow]deferred: {escape(message)}[/yellow]")
            if result.passed:
                status_text = f"[green]✓ PASSED[/green] ({result.duration:.1f}s)"
            elif result.status == "setup_failed":
                status_text = f"[red]✗ SETUP FAILED[/red] ({result.duration:.1f}s)"
            else:
                status_text = f"[red]✗ FAILED[/red] ({result.duration:.1f}s)"
            lines.append(f"└─ {status_text}")
        else:
            lines.append("└" + "─" * 49)

        return Text.from_markup("\n".join(lines))
