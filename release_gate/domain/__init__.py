"""
Domain Models - Type-safe data structures for quality gates

Usage:
    from release_gate.domain import PlanSuitePair, TestGateOutcome

    outcome = TestGateOutcome(gate_name="Smoke", total_cases=10, passed_cases=10)
    if outcome.succeeded:
        print(outcome.summary)
"""

from .gate import DefectGateOutcome, GateOutcome, PlanSuitePair, TestGateOutcome, TestPoint

__all__ = [
    "PlanSuitePair",
    "TestPoint",
    "GateOutcome",
    "TestGateOutcome",
    "DefectGateOutcome",
]
