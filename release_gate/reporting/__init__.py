"""Gate reporters.

One reporter per CI system, all implementing GateReporter:
    - AzurePipelinesReporter: ##vso[task.logissue] logging commands
    - GitHubActionsReporter: ::warning:: / ::error:: workflow commands
    - ConsoleReporter: plain text

Usage:
    from release_gate.reporting import get_reporter

    reporter = get_reporter("auto")
    reporter.report(outcome)
"""

import os

from .azure_pipelines import AzurePipelinesReporter
from .base import GateReporter
from .console import ConsoleReporter
from .github_actions import GitHubActionsReporter

REPORTERS: dict[str, type[GateReporter]] = {
    AzurePipelinesReporter.name: AzurePipelinesReporter,
    GitHubActionsReporter.name: GitHubActionsReporter,
    ConsoleReporter.name: ConsoleReporter,
}


def detect_reporter_name() -> str:
    """
    Pick a reporter from the CI environment.

    Returns:
        "azure-pipelines" when TF_BUILD is set, "github-actions" when
        GITHUB_ACTIONS is set, "console" otherwise
    """
    if os.getenv("TF_BUILD"):
        return AzurePipelinesReporter.name
    if os.getenv("GITHUB_ACTIONS"):
        return GitHubActionsReporter.name
    return ConsoleReporter.name


def get_reporter(name: str = "auto") -> GateReporter:
    """
    Create a reporter by name.

    Args:
        name: "auto", "azure-pipelines", "github-actions" or "console"

    Returns:
        GateReporter instance

    Raises:
        ValueError: If name is unknown
    """
    if name == "auto":
        name = detect_reporter_name()

    if name not in REPORTERS:
        raise ValueError(f"Unknown reporter: {name}. Must be one of: auto, {', '.join(sorted(REPORTERS))}")

    return REPORTERS[name]()


__all__ = [
    "GateReporter",
    "AzurePipelinesReporter",
    "GitHubActionsReporter",
    "ConsoleReporter",
    "REPORTERS",
    "detect_reporter_name",
    "get_reporter",
]
