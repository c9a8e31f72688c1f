"""
Tests for GateMode name resolution
"""

from unittest.mock import patch

import pytest

from release_gate.gate import GateMode


class TestGateModeFromName:
    """Tests for GateMode.from_name()"""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("test-plans", GateMode.TEST_PLANS),
            ("TestPlans", GateMode.TEST_PLANS),
            ("EvaluateByTestPlans", GateMode.TEST_PLANS),
            ("test_plans_and_suites", GateMode.TEST_PLANS_AND_SUITES),
            ("TestPlansAndSuites", GateMode.TEST_PLANS_AND_SUITES),
            ("EvaluateByTestPlansAndSuites", GateMode.TEST_PLANS_AND_SUITES),
            ("query", GateMode.QUERY),
            ("EvaluateByQuery", GateMode.QUERY),
        ],
    )
    def test_known_names(self, name, expected):
        """Test that known spellings resolve without a warning"""
        with patch("release_gate.gate.evaluator.logger") as mock_logger:
            assert GateMode.from_name(name) is expected

        mock_logger.warning.assert_not_called()

    @pytest.mark.parametrize("name", ["TestPlan", "suites", "", None])
    def test_unrecognized_name_falls_back_to_query(self, name):
        """Test that unknown names fall back to QUERY with a warning"""
        with patch("release_gate.gate.evaluator.logger") as mock_logger:
            assert GateMode.from_name(name) is GateMode.QUERY

        mock_logger.warning.assert_called_once()
        assert "falling back" in mock_logger.warning.call_args[0][0]
