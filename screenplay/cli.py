"""CLI commands for screenplay."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from screenplay import __version__

if TYPE_CHECKING:
    from screenplay.core.automator import Automator
    from screenplay.core.config import ScreenplayConfig

# Load .env file from current directory or parent directories
load_dotenv()

app = typer.Typer(
    name="screenplay",
    help="Declarative mobile UI scenarios - select by tag or name and run them on a device",
    no_args_is_help=True,
)
console = Console()


def _create_run_folder(base_dir: Path) -> Path:
    """Create timestamped run folder for scenario execution.

    Args:
        base_dir: Base directory (e.g., ./)

    Returns:
        Path to created run folder (e.g., runs/2026-01-17_14-30-25/)
    """
    runs_dir = base_dir / "runs"
    runs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    run_folder = runs_dir / timestamp
    run_folder.mkdir(exist_ok=True)

    return run_folder


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"screenplay version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """screenplay - declarative mobile UI scenario runner."""
    pass


def _load_automator(
    definitions: Path | None,
    config: ScreenplayConfig,
    scenario_files: list[Path] | None = None,
) -> Automator:
    """Load definitions (and optional YAML scenarios), exiting with code 2 on errors."""
    from screenplay.core.errors import ScreenplayError
    from screenplay.core.loader import LoadError, load_definitions
    from screenplay.core.parser import ParseError, ScenarioParser

    path = definitions or (Path(config.definitions) if config.definitions else None)
    if path is None:
        console.print(
            "[red]Error:[/red] No definitions file given. "
            "Pass one or set 'definitions' in .screenplay.yaml"
        )
        raise typer.Exit(2)

    try:
        automator = load_definitions(path)
        for scenario_file in scenario_files or []:
            ScenarioParser.load(scenario_file, automator)
    except (LoadError, ParseError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    except ScreenplayError as e:
        console.print(f"[red]Definition error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    except Exception as e:
        console.print(f"[red]Error:[/red] {type(e).__name__}: {escape(str(e))}")
        raise typer.Exit(2)

    # Only a configured value replaces the one chosen in the definitions file
    if config.settle_delay is not None:
        automator.appmap.settle_delay = config.settle_delay
    return automator


def _print_scenario_table(automator: Automator, device: str) -> None:
    """Print every defined scenario with its tags and device support."""
    from screenplay.core.selection import unsupported_reason

    table = Table(title=f"Defined Scenarios ({device})")
    table.add_column("Scenario", style="cyan")
    table.add_column("Tags", style="green")
    table.add_column("Steps", justify="right")
    table.add_column("Supported", style="yellow")

    for scenario in automator.scenarios:
        reason = unsupported_reason(scenario, device)
        table.add_row(
            escape(scenario.title),
            escape(", ".join(scenario.tags)),
            str(len(scenario.steps)),
            "yes" if reason is None else "no",
        )

    console.print(table)
    tags = automator.log_info()
    console.print(f"[dim]Defined tags:[/dim] {escape(', '.join(tags)) or '(none)'}")


@app.command()
def run(
    definitions: Path | None = typer.Argument(None, help="Python file defining the automator"),
    device: str | None = typer.Option(None, "--device", "-d", help="Device/implementation ID"),
    tag_any: list[str] | None = typer.Option(
        None, "--tag-any", "-a", help="Run scenarios with any of these tags"
    ),
    tag_all: list[str] | None = typer.Option(
        None, "--tag-all", help="Run scenarios with all of these tags"
    ),
    tag_none: list[str] | None = typer.Option(
        None, "--tag-none", help="Skip scenarios with any of these tags"
    ),
    name: list[str] | None = typer.Option(
        None, "--name", "-n", help="Run scenarios by title (overrides tags)"
    ),
    scenario_file: list[Path] | None = typer.Option(
        None, "--scenarios", "-s", help="YAML file of additional scenarios"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Randomize run order with this seed"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    junit: Path | None = typer.Option(None, "--junit", help="JUnit XML output path"),
    verbose: bool = typer.Option(False, "--verbose", help="Write a debug log to the run folder"),
) -> None:
    """Run scenarios selected by tag or name."""
    from screenplay.core.config import ConfigLoader, setup_logging
    from screenplay.core.console_reporter import ConsoleReporter
    from screenplay.core.report import ReportGenerator

    config = ConfigLoader.load()

    # CLI options override config
    if device:
        config.device = device
    if seed is not None:
        config.random_seed = seed
    if verbose:
        config.verbose = True
    if tag_any or tag_all or tag_none:
        config.tags.any = list(tag_any or [])
        config.tags.all = list(tag_all or [])
        config.tags.none = list(tag_none or [])
    if name:
        config.scenarios = list(name)

    if output:
        run_folder = output
        run_folder.mkdir(parents=True, exist_ok=True)
    elif config.artifacts_dir:
        run_folder = _create_run_folder(Path(config.artifacts_dir))
    else:
        run_folder = _create_run_folder(Path.cwd())

    if config.verbose:
        log_file = setup_logging(verbose=True, log_dir=run_folder)
        if log_file:
            console.print(f"[dim]Verbose logging → {log_file}[/dim]")

    automator = _load_automator(definitions, config, scenario_file)

    entry_point = "runTestsByName" if config.scenarios else "runTestsByTag"
    if not automator.initialize(entry_point):
        console.print("[red]Error:[/red] on_init callback failed")
        raise typer.Exit(1)

    if not config.scenarios and config.tags.empty:
        console.print(
            "[yellow]No tag sets (any / all / none) or names were specified, "
            "so listing the defined scenarios instead[/yellow]"
        )
        _print_scenario_table(automator, config.device)
        raise typer.Exit(0)

    if config.scenarios:
        selection = f"names: {', '.join(config.scenarios)}"
    else:
        selection = (
            f"any: [{', '.join(config.tags.any)}]  all: [{', '.join(config.tags.all)}]  "
            f"none: [{', '.join(config.tags.none)}]"
        )
    panel_content = f"[dim]Device:[/dim]   {escape(config.device)}\n"
    panel_content += f"[dim]Select:[/dim]   {escape(selection)}\n"
    panel_content += f"[dim]Seed:[/dim]     {config.random_seed if config.random_seed is not None else '-'}"
    console.print(Panel(panel_content, border_style="blue", padding=(0, 1)))
    console.print()

    reporter = ConsoleReporter(console=console)
    runner = automator.runner(config.device, reporter=reporter, artifacts_dir=run_folder)

    if config.scenarios:
        result = runner.run_by_names(automator.scenarios.scenarios, config.scenarios, config.random_seed)
    else:
        result = runner.run_by_tags(
            automator.scenarios.scenarios,
            config.tags.any,
            config.tags.all,
            config.tags.none,
            config.random_seed,
        )

    console.print()
    reporter.print_summary(result)

    generator = ReportGenerator(run_folder)
    report_path = generator.generate_json(result)
    console.print(f"[dim]Report: {report_path}[/dim]")

    if junit:
        generator.generate_junit(result, junit)
        console.print(f"[dim]JUnit: {junit}[/dim]")

    # Exit code
    if result.status == "passed":
        raise typer.Exit(0)
    else:
        raise typer.Exit(1)


@app.command()
def describe(
    definitions: Path | None = typer.Argument(None, help="Python file defining the automator"),
    scenario_file: list[Path] | None = typer.Option(
        None, "--scenarios", "-s", help="YAML file of additional scenarios"
    ),
    output: Path = typer.Option(Path("describe"), "--output", "-o", help="Output directory"),
) -> None:
    """Write markdown and JSON descriptions of the app map and scenarios."""
    from screenplay.core.config import ConfigLoader

    config = ConfigLoader.load()
    automator = _load_automator(definitions, config, scenario_file)
    automator.initialize("describe")

    for path in automator.describe(output):
        console.print(f"[green]Wrote:[/green] {path}")


@app.command(name="list")
def list_scenarios(
    definitions: Path | None = typer.Argument(None, help="Python file defining the automator"),
    device: str | None = typer.Option(None, "--device", "-d", help="Device/implementation ID"),
    scenario_file: list[Path] | None = typer.Option(
        None, "--scenarios", "-s", help="YAML file of additional scenarios"
    ),
) -> None:
    """List defined scenarios, their tags and whether the device supports them."""
    from screenplay.core.config import ConfigLoader

    config = ConfigLoader.load()
    if device:
        config.device = device
    automator = _load_automator(definitions, config, scenario_file)

    if not len(automator.scenarios):
        console.print("[yellow]No scenarios defined[/yellow]")
        raise typer.Exit(0)

    _print_scenario_table(automator, config.device)


if __name__ == "__main__":
    app()
