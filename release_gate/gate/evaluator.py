#!/usr/bin/env python3
"""
Quality Gate Evaluator

Computes a pass/fail outcome for a release from Azure DevOps signals:
- Test plans: every test point of every suite in the listed plans must be "Passed"
- Test plan / suite pairs: every test point of each listed suite must be "Passed"
- Query: a WIQL defect query must match no work items

Read-only operation. Requests are awaited one after another; any fault aborts
the evaluation and the counts gathered so far are discarded.
"""

import re
from enum import Enum

from release_gate.ado_rest_client import AzureDevOpsRESTClient, ResponseFormatError
from release_gate.core import get_logger, log_with_context
from release_gate.domain.gate import DefectGateOutcome, PlanSuitePair, TestGateOutcome, TestPoint

logger = get_logger(__name__)


class GateMode(Enum):
    """Evaluation modes of the quality gate."""

    TEST_PLANS = "test-plans"
    TEST_PLANS_AND_SUITES = "test-plans-and-suites"
    QUERY = "query"

    @classmethod
    def from_name(cls, name: str | None) -> "GateMode":
        """
        Resolve a mode name.

        Matching ignores case, spaces, hyphens and underscores, and accepts the
        "EvaluateBy..." spellings (e.g. "EvaluateByTestPlansAndSuites").
        Unrecognized names fall back to QUERY with a warning.

        Args:
            name: Mode name as given by the caller

        Returns:
            GateMode

        Example:
            >>> GateMode.from_name("TestPlansAndSuites")
            <GateMode.TEST_PLANS_AND_SUITES: 'test-plans-and-suites'>
        """
        key = re.sub(r"[\s_\-]", "", name or "").lower()
        if key.startswith("evaluateby"):
            key = key[len("evaluateby") :]

        for mode in cls:
            if key == mode.value.replace("-", ""):
                return mode

        logger.warning(f"Unrecognized gate mode '{name}', falling back to '{cls.QUERY.value}'")
        return cls.QUERY


class QualityGateEvaluator:
    """
    Evaluates one quality gate against a single Azure DevOps project.

    Example:
        evaluator = QualityGateEvaluator(rest_client, project="MyProject", gate_name="Release tests")
        outcome = await evaluator.evaluate_by_test_plans([101, 102])
        if not outcome.succeeded:
            print(outcome.summary)
    """

    def __init__(self, rest_client: AzureDevOpsRESTClient, project: str, gate_name: str):
        self.rest_client = rest_client
        self.project = project
        self.gate_name = gate_name

    async def _fetch_points(self, plan_id: int, suite_id: int) -> list[TestPoint]:
        raw_points = await self.rest_client.get_test_points(project=self.project, plan_id=plan_id, suite_id=suite_id)
        if not all(isinstance(point, dict) and isinstance(point.get("testCase") or {}, dict) for point in raw_points):
            raise ResponseFormatError(f"Suite {plan_id}:{suite_id} returned a malformed test point")
        points = [TestPoint.from_api(point) for point in raw_points]
        log_with_context(
            logger,
            "debug",
            f"Suite {plan_id}:{suite_id} has {len(points)} test points",
            plan_id=plan_id,
            suite_id=suite_id,
            point_count=len(points),
        )
        return points

    def _log_test_outcome(self, outcome: TestGateOutcome) -> None:
        if outcome.total_cases == 0:
            logger.warning(f"Gate '{self.gate_name}' found no test cases; treating as passed")

        breakdown = ", ".join(f"{name}={count}" for name, count in sorted(outcome.outcome_counts.items()))
        logger.info(f"{outcome.summary} ({breakdown or 'no outcomes'})")

        for name in outcome.failed_test_cases:
            logger.info(f"  Not passed: {name}")

    async def evaluate_by_test_plans(self, plan_ids: list[int]) -> TestGateOutcome:
        """
        Evaluate every suite of every listed test plan.

        Args:
            plan_ids: Test plan IDs

        Returns:
            TestGateOutcome, succeeded iff all test points passed
        """
        outcome = TestGateOutcome(gate_name=self.gate_name)

        for plan_id in plan_ids:
            suites = await self.rest_client.get_test_suites(project=self.project, plan_id=plan_id)
            logger.info(f"Test plan {plan_id}: {len(suites)} suites")

            for suite in suites:
                suite_id = suite.get("id") if isinstance(suite, dict) else None
                if suite_id is None:
                    raise ResponseFormatError(f"Test plan {plan_id} returned a suite without an id")
                outcome.add_points(await self._fetch_points(plan_id, suite_id))

        self._log_test_outcome(outcome)
        return outcome

    async def evaluate_by_test_plans_and_suites(self, pairs: list[PlanSuitePair]) -> TestGateOutcome:
        """
        Evaluate explicitly listed test suites.

        Points are fetched directly for each pair; suites are not discovered.

        Args:
            pairs: Plan/suite pairs

        Returns:
            TestGateOutcome, succeeded iff all test points passed
        """
        outcome = TestGateOutcome(gate_name=self.gate_name)

        for pair in pairs:
            outcome.add_points(await self._fetch_points(pair.plan_id, pair.suite_id))

        self._log_test_outcome(outcome)
        return outcome

    async def evaluate_by_query(self, query: str) -> DefectGateOutcome:
        """
        Evaluate a WIQL defect query.

        Args:
            query: WIQL query text

        Returns:
            DefectGateOutcome, succeeded iff the query matched no work items
        """
        result = await self.rest_client.query_by_wiql(project=self.project, wiql_query=query)
        work_items = result["workItems"]

        outcome = DefectGateOutcome(
            gate_name=self.gate_name,
            defect_count=len(work_items),
            work_item_ids=[item["id"] for item in work_items if isinstance(item, dict) and "id" in item],
        )
        logger.info(outcome.summary)
        if outcome.work_item_ids:
            logger.info(f"  Matching work items: {', '.join(str(i) for i in outcome.work_item_ids)}")

        return outcome

    async def evaluate(
        self,
        mode: GateMode,
        plan_ids: list[int] | None = None,
        pairs: list[PlanSuitePair] | None = None,
        query: str | None = None,
    ) -> TestGateOutcome | DefectGateOutcome:
        """
        Dispatch to the evaluation for the given mode.

        Args:
            mode: Evaluation mode
            plan_ids: Required for TEST_PLANS
            pairs: Required for TEST_PLANS_AND_SUITES
            query: Required for QUERY

        Returns:
            Gate outcome

        Raises:
            ValueError: If the input for the selected mode is missing
        """
        logger.info(f"Evaluating gate '{self.gate_name}' in mode '{mode.value}' for project '{self.project}'")

        if mode is GateMode.TEST_PLANS:
            if plan_ids is None:
                raise ValueError("plan_ids is required for mode 'test-plans'")
            return await self.evaluate_by_test_plans(plan_ids)

        if mode is GateMode.TEST_PLANS_AND_SUITES:
            if pairs is None:
                raise ValueError("pairs is required for mode 'test-plans-and-suites'")
            return await self.evaluate_by_test_plans_and_suites(pairs)

        if query is None:
            raise ValueError("query is required for mode 'query'")
        return await self.evaluate_by_query(query)
