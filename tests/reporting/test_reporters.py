"""
Tests for gate reporters
"""

import io

import pytest

from release_gate.domain.gate import DefectGateOutcome, TestGateOutcome
from release_gate.reporting import (
    AzurePipelinesReporter,
    ConsoleReporter,
    GitHubActionsReporter,
    detect_reporter_name,
    get_reporter,
)
from release_gate.reporting.azure_pipelines import escape_vso


@pytest.fixture
def failed_outcome():
    return TestGateOutcome(gate_name="Release tests", total_cases=2, passed_cases=1)


@pytest.fixture
def passed_outcome():
    return TestGateOutcome(gate_name="Release tests", total_cases=2, passed_cases=2)


def lines(stream):
    return stream.getvalue().splitlines()


class TestAzurePipelinesReporter:
    """Tests for AzurePipelinesReporter"""

    def test_failure_lines(self, failed_outcome):
        stream = io.StringIO()

        AzurePipelinesReporter(stream).report(failed_outcome)

        assert lines(stream) == [
            "##vso[task.logissue type=warning]Total test cases: 2, passed test cases: 1",
            "##vso[task.logissue type=warning]Quality gate 'Release tests' failed",
            "##vso[task.logissue type=error]Quality gate 'Release tests' failed. Deployment is blocked",
        ]

    def test_success_line(self, passed_outcome):
        stream = io.StringIO()

        AzurePipelinesReporter(stream).report(passed_outcome)

        assert lines(stream) == ["##vso[task.logissue type=warning]Quality gate 'Release tests' succeeded"]

    def test_defect_failure_summary(self):
        stream = io.StringIO()

        AzurePipelinesReporter(stream).report(DefectGateOutcome(gate_name="Open bugs", defect_count=3))

        assert lines(stream)[0] == "##vso[task.logissue type=warning]Defects found: 3"
        assert len(lines(stream)) == 3

    def test_gate_name_is_escaped(self):
        stream = io.StringIO()
        outcome = TestGateOutcome(gate_name="Smoke]\n##vso[task.complete result=Succeeded]", total_cases=0)

        AzurePipelinesReporter(stream).report(outcome)

        assert len(lines(stream)) == 1
        assert "%5D%0A##vso[task.complete result=Succeeded%5D" in lines(stream)[0]

    def test_escape_vso(self):
        assert escape_vso("100%;a]b\r\n") == "100%AZP25%3Ba%5Db%0D%0A"

    def test_publish_variables(self, failed_outcome):
        stream = io.StringIO()

        AzurePipelinesReporter(stream).publish_variables(failed_outcome)

        assert lines(stream) == [
            "##vso[task.setvariable variable=QualityGate.Succeeded]false",
            "##vso[task.setvariable variable=QualityGate.TotalCases]2",
            "##vso[task.setvariable variable=QualityGate.PassedCases]1",
        ]

    def test_publish_defect_variables(self):
        stream = io.StringIO()

        AzurePipelinesReporter(stream).publish_variables(DefectGateOutcome(gate_name="Bugs", defect_count=0))

        assert lines(stream) == [
            "##vso[task.setvariable variable=QualityGate.Succeeded]true",
            "##vso[task.setvariable variable=QualityGate.DefectCount]0",
        ]


class TestGitHubActionsReporter:
    """Tests for GitHubActionsReporter"""

    def test_failure_lines(self, failed_outcome):
        stream = io.StringIO()

        GitHubActionsReporter(stream).report(failed_outcome)

        assert lines(stream) == [
            "::warning::Total test cases: 2, passed test cases: 1",
            "::warning::Quality gate 'Release tests' failed",
            "::error::Quality gate 'Release tests' failed. Deployment is blocked",
        ]

    def test_publish_variables_appends_to_output_file(self, failed_outcome, clean_env, tmp_path):
        output = tmp_path / "github_output"
        output.write_text("existing=1\n", encoding="utf-8")
        clean_env.setenv("GITHUB_OUTPUT", str(output))

        GitHubActionsReporter(io.StringIO()).publish_variables(failed_outcome)

        assert output.read_text(encoding="utf-8").splitlines() == [
            "existing=1",
            "succeeded=false",
            "total_cases=2",
            "passed_cases=1",
        ]

    def test_publish_variables_without_output_file(self, failed_outcome, clean_env):
        stream = io.StringIO()

        GitHubActionsReporter(stream).publish_variables(failed_outcome)

        assert stream.getvalue() == ""


class TestConsoleReporter:
    def test_writes_to_stdout_by_default(self, failed_outcome, capsys):
        ConsoleReporter().report(failed_outcome)

        assert capsys.readouterr().out.splitlines() == [
            "WARNING: Total test cases: 2, passed test cases: 1",
            "WARNING: Quality gate 'Release tests' failed",
            "ERROR: Quality gate 'Release tests' failed. Deployment is blocked",
        ]

    def test_publish_variables_is_noop(self, passed_outcome, capsys):
        ConsoleReporter().publish_variables(passed_outcome)

        assert capsys.readouterr().out == ""


class TestGetReporter:
    """Tests for reporter selection"""

    def test_detect_azure_pipelines(self, clean_env):
        clean_env.setenv("TF_BUILD", "True")

        assert detect_reporter_name() == "azure-pipelines"

    def test_detect_github_actions(self, clean_env):
        clean_env.setenv("GITHUB_ACTIONS", "true")

        assert detect_reporter_name() == "github-actions"

    def test_detect_console(self, clean_env):
        assert isinstance(get_reporter(), ConsoleReporter)

    def test_explicit_name(self, clean_env):
        assert isinstance(get_reporter("azure-pipelines"), AzurePipelinesReporter)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown reporter"):
            get_reporter("jenkins")
