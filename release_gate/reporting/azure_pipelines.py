"""Azure Pipelines reporter using ##vso logging commands.

Logging commands reference:
    https://learn.microsoft.com/en-us/azure/devops/pipelines/scripts/logging-commands
"""

from release_gate.domain.gate import GateOutcome

from .base import GateReporter

VARIABLE_PREFIX = "QualityGate"


def escape_vso(value: str) -> str:
    """
    Escape a value for use in a ##vso logging command.

    Carriage returns, newlines, ';' and ']' would otherwise end the message
    or the property list early.
    """
    return (
        value.replace("%", "%AZP25")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
        .replace(";", "%3B")
        .replace("]", "%5D")
    )


class AzurePipelinesReporter(GateReporter):
    """
    Report through task.logissue so warnings and errors show on the run summary.
    """

    name = "azure-pipelines"

    def report_warning(self, message: str) -> None:
        self._write(f"##vso[task.logissue type=warning]{escape_vso(message)}")

    def report_error(self, message: str) -> None:
        self._write(f"##vso[task.logissue type=error]{escape_vso(message)}")

    def publish_variables(self, outcome: GateOutcome) -> None:
        """
        Set QualityGate.* pipeline variables for later steps.

        Example output:
            ##vso[task.setvariable variable=QualityGate.Succeeded]false
            ##vso[task.setvariable variable=QualityGate.TotalCases]12
        """
        values = {"Succeeded": str(outcome.succeeded).lower()}
        for key, value in outcome.to_dict().items():
            if isinstance(value, int) and not isinstance(value, bool):
                values["".join(part.title() for part in key.split("_"))] = str(value)

        for key, value in values.items():
            self._write(f"##vso[task.setvariable variable={VARIABLE_PREFIX}.{key}]{escape_vso(value)}")
