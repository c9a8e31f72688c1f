"""
Quality gate domain models - Test points, references and gate outcomes

Represents the data a release quality gate is computed from:
    - Test plan / test suite references
    - Test points (latest outcome of a test case within a suite)
    - Gate outcomes for test-based and query-based gates

Outcomes are derived per invocation and never persisted.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

PASSED_OUTCOME = "Passed"


@dataclass(frozen=True)
class PlanSuitePair:
    """
    A test suite addressed by its owning test plan.

    Attributes:
        plan_id: Test plan ID
        suite_id: Test suite ID within the plan
    """

    plan_id: int
    suite_id: int

    def __str__(self) -> str:
        return f"{self.plan_id}:{self.suite_id}"


@dataclass(frozen=True)
class TestPoint:
    """
    Latest execution outcome of one test case within a suite.

    Attributes:
        outcome: Outcome reported by Azure DevOps ("Passed", "Failed", "Blocked",
            "NotApplicable", "Unspecified", ...) or None if never run
        test_case_name: Name of the test case the point belongs to

    Example:
        point = TestPoint.from_api({"outcome": "Failed", "testCase": {"name": "Login works"}})
        if not point.is_passed:
            print(f"{point.test_case_name}: {point.outcome}")
    """

    __test__ = False  # Not a pytest test class

    outcome: str | None
    test_case_name: str | None = None

    @property
    def is_passed(self) -> bool:
        """Only an exact "Passed" outcome counts as passed."""
        return self.outcome == PASSED_OUTCOME

    @classmethod
    def from_api(cls, point: dict[str, Any]) -> "TestPoint":
        """
        Build a TestPoint from a REST API test point record.

        Args:
            point: Test point dict ({"outcome": ..., "testCase": {"name": ...}})

        Returns:
            TestPoint
        """
        test_case = point.get("testCase") or {}
        return cls(outcome=point.get("outcome"), test_case_name=test_case.get("name"))


@dataclass
class GateOutcome:
    """
    Base class for the result of evaluating a quality gate.

    Attributes:
        gate_name: Human-readable gate name used in report lines
    """

    gate_name: str

    @property
    def succeeded(self) -> bool:
        raise NotImplementedError

    @property
    def summary(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {"gate_name": self.gate_name, "succeeded": self.succeeded}


@dataclass(kw_only=True)
class TestGateOutcome(GateOutcome):
    """
    Outcome of a test-based gate (test plans, or plan/suite pairs).

    Every test point counts toward total_cases; only "Passed" points count
    toward passed_cases. The gate succeeds iff the two are equal, which makes
    an empty selection a vacuous pass.

    Attributes:
        gate_name: Gate name
        total_cases: Number of test points seen
        passed_cases: Number of test points with outcome "Passed"
        failed_test_cases: Names of test cases that did not pass
        outcome_counts: Number of test points per raw outcome

    Example:
        outcome = TestGateOutcome(gate_name="Smoke", total_cases=2, passed_cases=1)
        assert not outcome.succeeded
    """

    __test__ = False

    total_cases: int = 0
    passed_cases: int = 0
    failed_test_cases: list[str] = field(default_factory=list)
    outcome_counts: Counter = field(default_factory=Counter)

    def __post_init__(self) -> None:
        """
        Validate counters.

        Raises:
            ValueError: If counters are negative or passed exceeds total
        """
        if self.total_cases < 0 or self.passed_cases < 0:
            raise ValueError("Test case counts cannot be negative")
        if self.passed_cases > self.total_cases:
            raise ValueError(f"passed_cases ({self.passed_cases}) cannot exceed total_cases ({self.total_cases})")

    @property
    def succeeded(self) -> bool:
        return self.total_cases == self.passed_cases

    @property
    def summary(self) -> str:
        return f"Total test cases: {self.total_cases}, passed test cases: {self.passed_cases}"

    def add_points(self, points: list[TestPoint]) -> None:
        """
        Accumulate a batch of test points.

        Args:
            points: Test points of one suite
        """
        for point in points:
            self.total_cases += 1
            self.outcome_counts[point.outcome or "None"] += 1
            if point.is_passed:
                self.passed_cases += 1
            elif point.test_case_name:
                self.failed_test_cases.append(point.test_case_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "total_cases": self.total_cases,
            "passed_cases": self.passed_cases,
            "failed_test_cases": list(self.failed_test_cases),
            "outcome_counts": dict(self.outcome_counts),
        }


@dataclass(kw_only=True)
class DefectGateOutcome(GateOutcome):
    """
    Outcome of a query-based gate.

    Attributes:
        gate_name: Gate name
        defect_count: Number of work items matched by the query
        work_item_ids: IDs of the matched work items

    Example:
        outcome = DefectGateOutcome(gate_name="Open bugs", defect_count=0)
        assert outcome.succeeded
    """

    defect_count: int = 0
    work_item_ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.defect_count < 0:
            raise ValueError("defect_count cannot be negative")

    @property
    def succeeded(self) -> bool:
        return self.defect_count == 0

    @property
    def summary(self) -> str:
        return f"Defects found: {self.defect_count}"

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "defect_count": self.defect_count,
            "work_item_ids": list(self.work_item_ids),
        }
