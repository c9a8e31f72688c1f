"""GitHub Actions reporter using workflow commands."""

import os

from release_gate.domain.gate import GateOutcome

from .base import GateReporter


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GitHubActionsReporter(GateReporter):
    """
    Report through ::warning:: / ::error:: annotations.
    """

    name = "github-actions"

    def report_warning(self, message: str) -> None:
        self._write(f"::warning::{escape_data(message)}")

    def report_error(self, message: str) -> None:
        self._write(f"::error::{escape_data(message)}")

    def publish_variables(self, outcome: GateOutcome) -> None:
        """Append succeeded and the counters to $GITHUB_OUTPUT when it is available."""
        output_path = os.getenv("GITHUB_OUTPUT")
        if not output_path:
            return

        lines = [f"succeeded={str(outcome.succeeded).lower()}"]
        for key, value in outcome.to_dict().items():
            if isinstance(value, int) and not isinstance(value, bool):
                lines.append(f"{key}={value}")

        with open(output_path, "a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
