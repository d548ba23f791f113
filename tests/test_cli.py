"""Tests for CLI commands."""

import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from screenplay import __version__
from screenplay.cli import _load_automator, app
from screenplay.core.config import ScreenplayConfig

runner = CliRunner()

DEFINITIONS = textwrap.dedent("""
    from screenplay import Automator, RuntimeFailure

    automator = Automator(settle_delay=0)
    events = []
    automator.callbacks.on_init = lambda info: events.append(info["entryPoint"])

    def fail():
        raise RuntimeFailure("button missing")

    (
        automator.create_or_augment_app("LoginApp")
        .with_screen("loginScreen")
        .on_device("iPhone", lambda: True)
        .with_action("tapButton", "Tap a button")
        .with_param("label", "Button label", True, True)
        .with_implementation(lambda parameters: None)
        .with_action("broken", "Always fails")
        .with_implementation(fail)
    )
    screen = automator.appmap["LoginApp"].loginScreen
    automator.create_scenario("Login", ["smoke"]).with_step(
        screen.tapButton, {"label": "Submit"}
    )
    automator.create_scenario("Crash", ["crash"]).with_step(screen.broken)
""")


@pytest.fixture
def definitions(tmp_path: Path) -> Path:
    """Definitions file with one passing and one failing scenario."""
    path = tmp_path / "defs.py"
    path.write_text(DEFINITIONS)
    return path


@pytest.fixture(autouse=True)
def default_config():
    """Keep user and project config files out of the tests."""
    with patch("screenplay.core.config.ConfigLoader.load", side_effect=lambda: ScreenplayConfig()):
        yield


class TestVersion:
    """Tests for --version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestRunCommand:
    """Tests for the run command."""

    def test_run_by_tag_passes(self, definitions: Path, tmp_path: Path) -> None:
        """Passing selection exits 0 and writes report.json."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["run", str(definitions), "--tag-any", "smoke", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "All 1 scenarios passed" in result.output
        report = json.loads((out / "report.json").read_text())
        assert report["status"] == "passed"
        assert report["scenarios"][0]["title"] == "Login"
        intended = json.loads((out / "intendedTestList.json").read_text())
        assert intended == {"scenarioNames": ["Login"]}

    def test_run_failure_exits_1(self, definitions: Path, tmp_path: Path) -> None:
        """Any failing scenario exits 1."""
        result = runner.invoke(
            app, ["run", str(definitions), "--tag-any", "crash", "-o", str(tmp_path / "out")]
        )

        assert result.exit_code == 1
        assert "1 of 1 scenarios failed" in result.output

    def test_run_by_name(self, definitions: Path, tmp_path: Path) -> None:
        """--name selects scenarios by title."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["run", str(definitions), "-n", "Login", "-n", "Typo", "-o", str(out)])

        assert result.exit_code == 0, result.output
        report = json.loads((out / "report.json").read_text())
        assert [s["title"] for s in report["scenarios"]] == ["Login"]

    def test_run_tag_none(self, definitions: Path, tmp_path: Path) -> None:
        """--tag-none alone excludes matching scenarios."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["run", str(definitions), "--tag-none", "crash", "-o", str(out)])

        assert result.exit_code == 0, result.output
        report = json.loads((out / "report.json").read_text())
        assert [s["title"] for s in report["scenarios"]] == ["Login"]

    def test_no_selection_lists_scenarios(self, definitions: Path, tmp_path: Path) -> None:
        """Without tags or names nothing runs and the scenarios are listed."""
        out = tmp_path / "out"

        result = runner.invoke(app, ["run", str(definitions), "-o", str(out)])

        assert result.exit_code == 0
        assert "No tag sets" in result.output
        assert "Crash" in result.output
        assert not (out / "report.json").exists()

    def test_no_matching_scenarios(self, definitions: Path, tmp_path: Path) -> None:
        """An empty selection is reported and exits 0."""
        result = runner.invoke(
            app, ["run", str(definitions), "--tag-any", "nothing", "-o", str(tmp_path / "out")]
        )

        assert result.exit_code == 0
        assert "No scenarios selected" in result.output

    def test_unsupported_device_skips(self, definitions: Path, tmp_path: Path) -> None:
        """Scenarios the device can't run are never started."""
        result = runner.invoke(
            app,
            ["run", str(definitions), "--tag-any", "smoke", "-d", "Android", "-o", str(tmp_path / "out")],
        )

        assert result.exit_code == 0
        assert "No scenarios selected" in result.output

    def test_junit_output(self, definitions: Path, tmp_path: Path) -> None:
        junit = tmp_path / "junit.xml"

        runner.invoke(
            app,
            ["run", str(definitions), "--tag-any", "smoke", "--tag-any", "crash",
             "-o", str(tmp_path / "out"), "--junit", str(junit)],
        )

        assert junit.exists()
        assert 'tests="2"' in junit.read_text()

    def test_seed_recorded(self, definitions: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"

        runner.invoke(
            app,
            ["run", str(definitions), "-a", "smoke", "-a", "crash", "--seed", "3", "-o", str(out)],
        )

        report = json.loads((out / "report.json").read_text())
        assert report["seed"] == 3
        assert len(report["scenarios"]) == 2

    def test_yaml_scenarios(self, definitions: Path, tmp_path: Path) -> None:
        """--scenarios adds scenarios written in YAML."""
        yaml_file = tmp_path / "more.yaml"
        yaml_file.write_text(
            "- title: From YAML\n"
            "  tags: [yaml]\n"
            "  steps:\n"
            "    - action: LoginApp.loginScreen.tapButton\n"
            "      params: {label: OK}\n"
        )
        out = tmp_path / "out"

        result = runner.invoke(
            app, ["run", str(definitions), "-s", str(yaml_file), "-a", "yaml", "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        report = json.loads((out / "report.json").read_text())
        assert report["scenarios"][0]["title"] == "From YAML"

    def test_verbose_writes_debug_log(self, definitions: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"

        runner.invoke(app, ["run", str(definitions), "-a", "smoke", "-o", str(out), "--verbose"])

        assert (out / "debug.log").exists()
        assert "Starting scenario: Login" in (out / "debug.log").read_text()

    def test_missing_definitions_exits_2(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["run", str(tmp_path / "nope.py"), "-a", "smoke", "-o", str(tmp_path)])

        assert result.exit_code == 2
        assert "not found" in result.output

    def test_no_definitions_given_exits_2(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["run", "-a", "smoke", "-o", str(tmp_path)])

        assert result.exit_code == 2
        assert "No definitions file" in result.output

    def test_definition_error_exits_2(self, tmp_path: Path) -> None:
        path = tmp_path / "dup.py"
        path.write_text(
            "from screenplay import Automator\n"
            "automator = Automator()\n"
            "automator.create_scenario('A')\n"
            "automator.create_scenario('A')\n"
        )

        result = runner.invoke(app, ["run", str(path), "-a", "smoke", "-o", str(tmp_path / "out")])

        assert result.exit_code == 2
        assert "Definition error" in result.output

    def test_python_error_in_definitions_exits_2(self, tmp_path: Path) -> None:
        """A NameError in the user's file is a load error, not a crash."""
        path = tmp_path / "typo.py"
        path.write_text(
            "from screenplay import Automator\n"
            "automator = Automator()\n"
            "undefined_name\n"
        )

        result = runner.invoke(app, ["run", str(path), "-a", "smoke", "-o", str(tmp_path / "out")])

        assert result.exit_code == 2
        assert "NameError" in result.output

    def test_bad_yaml_value_exits_2(self, definitions: Path, tmp_path: Path) -> None:
        scenarios = tmp_path / "scenarios.yaml"
        scenarios.write_text(
            "- title: Repeat\n"
            "  steps:\n"
            "    - action: LoginApp.loginScreen.tapButton\n"
            "      params: {label: Next}\n"
            "      repeat: many\n"
        )

        result = runner.invoke(
            app,
            ["run", str(definitions), "-s", str(scenarios), "-a", "smoke", "-o", str(tmp_path / "out")],
        )

        assert result.exit_code == 2
        assert "ValueError" in result.output

    def test_on_init_failure_exits_1(self, tmp_path: Path) -> None:
        path = tmp_path / "init_fails.py"
        path.write_text(
            "from screenplay import Automator\n"
            "automator = Automator()\n"
            "def boom(info):\n"
            "    raise RuntimeError('no simulator')\n"
            "automator.callbacks.on_init = boom\n"
        )

        result = runner.invoke(app, ["run", str(path), "-a", "smoke", "-o", str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "on_init callback failed" in result.output


class TestDescribeCommand:
    """Tests for the describe command."""

    def test_describe_writes_files(self, definitions: Path, tmp_path: Path) -> None:
        out = tmp_path / "describe"

        result = runner.invoke(app, ["describe", str(definitions), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "appMap.md").exists()
        assert (out / "scenarios.md").exists()
        manifest = json.loads((out / "scenarios.json").read_text())
        assert [s["title"] for s in manifest["scenarios"]] == ["Login", "Crash"]


class TestListCommand:
    """Tests for the list command."""

    def test_list_shows_scenarios(self, definitions: Path) -> None:
        result = runner.invoke(app, ["list", str(definitions)])

        assert result.exit_code == 0
        assert "Login" in result.output
        assert "smoke" in result.output
        assert "Defined tags" in result.output

    def test_list_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "nothing.py"
        path.write_text("from screenplay import Automator\nautomator = Automator()\n")

        result = runner.invoke(app, ["list", str(path)])

        assert result.exit_code == 0
        assert "No scenarios defined" in result.output


class TestLoadAutomator:
    """Tests for applying config to loaded definitions."""

    def test_definitions_settle_delay_kept_without_config(self, definitions: Path) -> None:
        """Automator(settle_delay=0) survives when no config sets a delay."""
        automator = _load_automator(definitions, ScreenplayConfig())

        assert automator.appmap.settle_delay == 0

    def test_configured_settle_delay_applied(self, definitions: Path) -> None:
        automator = _load_automator(definitions, ScreenplayConfig(settle_delay=1.5))

        assert automator.appmap.settle_delay == 1.5

    def test_default_settle_delay_when_neither_sets_it(self, tmp_path: Path) -> None:
        path = tmp_path / "plain.py"
        path.write_text("from screenplay import Automator\nautomator = Automator()\n")

        automator = _load_automator(path, ScreenplayConfig())

        assert automator.appmap.settle_delay == 0.35
