# tests/test_report.py
import json
from xml.etree import ElementTree

import pytest

from screenplay.core.report import ReportGenerator
from screenplay.core.results import FAILED, PASSED, SETUP_FAILED, RunResult, ScenarioResult


class TestReportGenerator:
    @pytest.fixture
    def run_result(self):
        """Sample run with one passing, one failing and one setup-failed scenario."""
        run = RunResult(device="iPhone", seed=42, duration=3.2)
        run.add(ScenarioResult(title="Login", status=PASSED, duration=1.0, tags=("smoke",), total_steps=3, steps_run=3))
        run.add(
            ScenarioResult(
                title="Profile",
                status=FAILED,
                duration=2.0,
                tags=("smoke",),
                error='Step 2 of 2 (homeScreen.openProfile) failed in scenario: "Profile" with message: y',
                failed_step=2,
                failed_action="homeScreen.openProfile",
                deferred_failures=["Step 1 (homeScreen.verifyIsActive): slow"],
                steps_run=1,
                total_steps=2,
            )
        )
        run.add(ScenarioResult(title="Setup", status=SETUP_FAILED, error="Test setup failed: crash"))
        return run

    def test_generates_json_report(self, run_result, tmp_path):
        """Generates valid JSON report."""
        generator = ReportGenerator(tmp_path / "report")
        json_path = generator.generate_json(run_result)

        assert json_path.exists()
        data = json.loads(json_path.read_text())
        assert data["device"] == "iPhone"
        assert data["seed"] == 42
        assert data["status"] == "failed"
        assert data["summary"]["total"] == 3
        assert data["summary"]["passed"] == 1
        assert data["summary"]["failed"] == 2
        assert data["summary"]["message"] == "2 of 3 scenarios failed"

    def test_json_scenario_details(self, run_result, tmp_path):
        """Each scenario keeps its failure details and deferred failures."""
        data = json.loads(ReportGenerator(tmp_path).generate_json(run_result).read_text())

        profile = data["scenarios"][1]
        assert profile["status"] == "failed"
        assert profile["failedStep"] == 2
        assert profile["failedAction"] == "homeScreen.openProfile"
        assert profile["deferredFailures"] == ["Step 1 (homeScreen.verifyIsActive): slow"]
        assert data["scenarios"][2]["status"] == "setup_failed"

    def test_generates_junit(self, run_result, tmp_path):
        """JUnit XML has one testcase per scenario, failures marked."""
        junit_path = tmp_path / "junit" / "results.xml"

        ReportGenerator(tmp_path).generate_junit(run_result, junit_path)

        root = ElementTree.parse(junit_path).getroot()
        assert root.tag == "testsuite"
        assert root.get("tests") == "3"
        assert root.get("failures") == "2"
        cases = root.findall("testcase")
        assert [c.get("name") for c in cases] == ["Login", "Profile", "Setup"]
        assert cases[0].find("failure") is None
        failure = cases[1].find("failure")
        assert failure.get("type") == "failed"
        assert "slow" in failure.text

    def test_intended_test_list(self, login_app, tmp_path):
        """Intended list keeps the given order."""
        store = login_app.scenarios
        b = store.create_scenario("B").scenario
        a = store.create_scenario("A").scenario

        path = ReportGenerator(tmp_path).write_intended_test_list([b, a])

        assert json.loads(path.read_text()) == {"scenarioNames": ["B", "A"]}

    def test_write_description(self, login_app, tmp_path):
        """Writes app map markdown, scenario markdown and scenario manifest."""
        app = login_app.appmap["LoginApp"]
        login_app.create_scenario("Login", ["smoke"]).with_step(app.loginScreen.verifyIsActive)

        paths = ReportGenerator(tmp_path).write_description(login_app.appmap, login_app.scenarios)

        assert [p.name for p in paths] == ["appMap.md", "scenarios.md", "scenarios.json"]
        assert "LoginApp" in paths[0].read_text()
        assert "Login" in paths[1].read_text()
        manifest = json.loads(paths[2].read_text())
        assert manifest["scenarios"][0]["steps"] == ["loginScreen.verifyIsActive"]
