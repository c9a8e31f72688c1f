"""
Quality gate evaluation.

Usage:
    from release_gate.gate import GateMode, QualityGateEvaluator
"""

from .evaluator import GateMode, QualityGateEvaluator

__all__ = ["GateMode", "QualityGateEvaluator"]
