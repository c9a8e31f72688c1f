"""Plain-text reporter for local runs and unsupported CI systems."""

from .base import GateReporter


class ConsoleReporter(GateReporter):
    name = "console"

    def report_warning(self, message: str) -> None:
        self._write(f"WARNING: {message}")

    def report_error(self, message: str) -> None:
        self._write(f"ERROR: {message}")
