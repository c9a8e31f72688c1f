"""Base reporter interface for gate outcomes."""

import sys
from abc import ABC, abstractmethod
from typing import TextIO

from release_gate.domain.gate import GateOutcome


class GateReporter(ABC):
    """
    Writes gate results in the annotation format of one CI system.

    Reporting contract:
        failure -> warning(summary), warning(gate failed), error(gate failed)
        success -> warning(gate succeeded)

    Subclasses only decide how a warning or error line is rendered.
    """

    name = "base"

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the output
        return self._stream or sys.stdout

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    @abstractmethod
    def report_warning(self, message: str) -> None:
        """Emit a warning-severity line."""

    @abstractmethod
    def report_error(self, message: str) -> None:
        """Emit an error-severity line."""

    def report_success(self, outcome: GateOutcome) -> None:
        self.report_warning(f"Quality gate '{outcome.gate_name}' succeeded")

    def report_failure(self, outcome: GateOutcome) -> None:
        self.report_warning(outcome.summary)
        self.report_warning(f"Quality gate '{outcome.gate_name}' failed")
        self.report_error(f"Quality gate '{outcome.gate_name}' failed. Deployment is blocked")

    def report(self, outcome: GateOutcome) -> None:
        """Report an outcome according to whether it succeeded."""
        if outcome.succeeded:
            self.report_success(outcome)
        else:
            self.report_failure(outcome)

    def publish_variables(self, outcome: GateOutcome) -> None:
        """Expose outcome values to later pipeline steps. No-op unless the CI system supports it."""
