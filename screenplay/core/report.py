"""Run reports and definition artifacts."""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any
from xml.etree.ElementTree import Element, SubElement, tostring

from screenplay.core.appmap import AppMap
from screenplay.core.results import RunResult
from screenplay.core.scenarios import ScenarioStore
from screenplay.models.scenario import Scenario


class ReportGenerator:
    """Write JSON, JUnit and markdown artifacts into an output directory."""

    INTENDED_TEST_LIST = "intendedTestList.json"
    APPMAP_MARKDOWN = "appMap.md"
    SCENARIOS_MARKDOWN = "scenarios.md"
    SCENARIOS_JSON = "scenarios.json"

    def __init__(self, output_dir: Path):
        """Initialize generator.

        Args:
            output_dir: Directory to write reports
        """
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def _write_json(self, name: str, data: Any) -> Path:
        path = self._output_dir / name
        with open(path, "w") as f:
            json.dump(data, f, indent=4)
        return path

    def generate_json(self, run: RunResult) -> Path:
        """Generate report.json for a run.

        Args:
            run: Run result

        Returns:
            Path to generated report.json
        """
        return self._write_json("report.json", self._run_to_dict(run))

    def generate_junit(self, run: RunResult, path: Path) -> Path:
        """Generate JUnit XML, one testcase per scenario.

        Args:
            run: Run result
            path: Output path for JUnit XML
        """
        testsuite = Element(
            "testsuite",
            {
                "name": f"screenplay ({run.device})" if run.device else "screenplay",
                "tests": str(run.total),
                "failures": str(len(run.failed)),
                "time": f"{run.duration:.3f}",
            },
        )

        for result in run.results:
            testcase = SubElement(
                testsuite,
                "testcase",
                {"name": result.title, "time": f"{result.duration:.3f}"},
            )
            if not result.passed:
                failure = SubElement(
                    testcase,
                    "failure",
                    {"message": result.error or "Failed", "type": result.status},
                )
                failure.text = "\n".join([result.error or "", *result.deferred_failures])

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(b'<?xml version="1.0" encoding="UTF-8"?>\n')
            f.write(tostring(testsuite))
        return path

    def write_intended_test_list(self, scenarios: Sequence[Scenario]) -> Path:
        """Save the titles of the scenarios about to run, in run order."""
        return self._write_json(
            self.INTENDED_TEST_LIST, {"scenarioNames": [s.title for s in scenarios]}
        )

    def write_description(self, appmap: AppMap, scenarios: ScenarioStore) -> list[Path]:
        """Write markdown and JSON descriptions of every definition."""
        appmap_path = self._output_dir / self.APPMAP_MARKDOWN
        appmap_path.write_text(appmap.to_markdown())

        scenarios_path = self._output_dir / self.SCENARIOS_MARKDOWN
        scenarios_path.write_text(scenarios.to_markdown())

        manifest_path = self._write_json(
            self.SCENARIOS_JSON, scenarios.to_manifest(include_steps=True)
        )
        return [appmap_path, scenarios_path, manifest_path]

    def _run_to_dict(self, run: RunResult) -> dict[str, Any]:
        """Convert RunResult to dictionary."""
        return {
            "device": run.device,
            "seed": run.seed,
            "status": run.status,
            "duration": f"{run.duration:.1f}s",
            "timestamp": datetime.now().isoformat(),
            "error": run.error,
            "scenarios": [
                {
                    "title": r.title,
                    "tags": list(r.tags),
                    "status": r.status,
                    "duration": f"{r.duration:.1f}s",
                    "error": r.error,
                    "failedStep": r.failed_step,
                    "failedAction": r.failed_action,
                    "deferredFailures": r.deferred_failures,
                    "stepsRun": r.steps_run,
                    "totalSteps": r.total_steps,
                }
                for r in run.results
            ],
            "summary": {
                "total": run.total,
                "passed": len(run.passed),
                "failed": len(run.failed),
                "message": run.summary(),
            },
        }
