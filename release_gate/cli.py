#!/usr/bin/env python3
"""
Release Quality Gate CLI

Evaluates an Azure DevOps quality gate and sets the process exit status.

Usage:
    release-gate --mode test-plans --organization myorg --project MyProject \\
        --plans 101,102 --gate-name "Release tests"

    release-gate --mode test-plans-and-suites --project MyProject --plans 10:20,11:21 --gate-name Smoke

    release-gate --mode query --project MyProject --gate-name "Open P1 bugs" \\
        --query "SELECT [System.Id] FROM WorkItems WHERE [System.WorkItemType] = 'Bug' AND [System.State] = 'Active'"

Exit codes:
    0  gate succeeded
    1  gate failed
    2  evaluation aborted (configuration, input, network, authentication or response error)
"""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

from release_gate import __version__
from release_gate.ado_rest_client import ResponseFormatError, get_ado_rest_client
from release_gate.core import ConfigurationError, get_config, get_logger, setup_logging
from release_gate.domain.gate import GateOutcome
from release_gate.gate import GateMode, QualityGateEvaluator
from release_gate.reporting import REPORTERS, GateReporter, get_reporter
from release_gate.security import ReferenceValidator, ValidationError, WIQLValidator
from release_gate.utils.error_handling import describe_error

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_GATE_FAILED = 1
EXIT_FAULT = 2

# Faults that abort the run; anything else is a bug and keeps its traceback
OPERATIONAL_FAULTS = (httpx.HTTPError, ResponseFormatError, ConfigurationError, ValidationError)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-gate",
        description="Fail a pipeline step when Azure DevOps tests are not all passed or defects exist",
    )
    parser.add_argument(
        "--mode",
        default=GateMode.QUERY.value,
        help="test-plans, test-plans-and-suites or query (unrecognized names fall back to query)",
    )
    parser.add_argument(
        "--organization", help="Organization name or URL (default: ADO_ORGANIZATION_URL / ADO_ORGANIZATION)"
    )
    parser.add_argument("--project", help="Project name (default: ADO_PROJECT)")
    parser.add_argument("--plans", help="Comma-separated plan IDs, or planId:suiteId pairs for test-plans-and-suites")
    parser.add_argument("--query", help="WIQL defect query for query mode")
    parser.add_argument("--gate-name", required=True, help="Gate name used in report lines")
    parser.add_argument("--pat", help="Personal Access Token (default: ADO_PAT, then SYSTEM_ACCESSTOKEN)")
    parser.add_argument(
        "--reporter",
        default="auto",
        choices=["auto", *sorted(REPORTERS)],
        help="Annotation format (default: detect from CI environment)",
    )
    parser.add_argument(
        "--set-variables", action="store_true", help="Publish outcome values as pipeline variables / step outputs"
    )
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Diagnostic log level"
    )
    parser.add_argument("--json-logs", action="store_true", help="Write diagnostics as JSON lines")
    parser.add_argument("--log-file", type=Path, help="Also write JSON diagnostics to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run_gate(args: argparse.Namespace) -> GateOutcome:
    """
    Validate inputs, build the client and evaluate the gate.

    Args:
        args: Parsed command-line arguments

    Returns:
        Gate outcome

    Raises:
        ConfigurationError, ValidationError: For invalid configuration or input
        httpx.HTTPError, ResponseFormatError: For faults talking to Azure DevOps
    """
    mode = GateMode.from_name(args.mode)

    # Inputs are checked before any request is made
    plan_ids = pairs = query = None
    if mode is GateMode.TEST_PLANS:
        plan_ids = ReferenceValidator.parse_plan_ids(args.plans)
    elif mode is GateMode.TEST_PLANS_AND_SUITES:
        pairs = ReferenceValidator.parse_plan_suite_pairs(args.plans)
    else:
        query = WIQLValidator.validate_query(args.query)

    ado_config = get_config().get_ado_config(organization=args.organization, project=args.project, pat=args.pat)
    if not ado_config.project:
        raise ConfigurationError("ADO_PROJECT (or --project) is required")
    project = WIQLValidator.validate_project_name(ado_config.project)

    evaluator = QualityGateEvaluator(get_ado_rest_client(ado_config), project=project, gate_name=args.gate_name)
    return await evaluator.evaluate(mode, plan_ids=plan_ids, pairs=pairs, query=query)


def main(argv: list[str] | None = None) -> int:
    """
    Command-line entry point.

    Args:
        argv: Arguments (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, log_file=args.log_file, json_output=args.json_logs)
    reporter: GateReporter = get_reporter(args.reporter)

    try:
        outcome = asyncio.run(run_gate(args))
    except OPERATIONAL_FAULTS as e:
        logger.error(f"Quality gate '{args.gate_name}' evaluation aborted", exc_info=True)
        reporter.report_error(f"Quality gate '{args.gate_name}' could not be evaluated: {describe_error(e)}")
        return EXIT_FAULT

    reporter.report(outcome)
    if args.set_variables:
        reporter.publish_variables(outcome)

    return EXIT_SUCCESS if outcome.succeeded else EXIT_GATE_FAILED


if __name__ == "__main__":
    sys.exit(main())
