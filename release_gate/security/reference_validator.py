"""
Test Plan / Test Suite Reference Validator

Parses the comma-separated identifier lists accepted on the command line into
typed references. Every entry is checked before any request is made, so a typo
in a pipeline definition fails fast with the offending entry in the message.

Accepted formats:
    Plans:  "101,102,103"
    Pairs:  "101:2001,102:2002"   (planId:suiteId)

Blank entries (e.g. a trailing comma) are ignored.
"""

from release_gate.domain.gate import PlanSuitePair

from .validation import ValidationError


class ReferenceValidator:
    """
    Validates and parses Azure DevOps test plan and test suite references.
    """

    @staticmethod
    def validate_id(value: str, label: str = "ID") -> int:
        """
        Validate a single plan or suite identifier.

        Args:
            value: Raw identifier text
            label: Name used in error messages (e.g. "plan ID")

        Returns:
            Identifier as a positive integer

        Raises:
            ValidationError: If value is not a positive integer
        """
        text = value.strip()
        if not text.isdigit() or not text.isascii():
            raise ValidationError(f"Invalid {label}: '{value}'. Must be a positive integer")

        identifier = int(text)
        if identifier <= 0:
            raise ValidationError(f"Invalid {label}: '{value}'. Must be a positive integer")

        return identifier

    @staticmethod
    def _split_entries(value: str) -> list[str]:
        if value is None:
            return []
        return [entry.strip() for entry in value.split(",") if entry.strip()]

    @staticmethod
    def parse_plan_ids(value: str) -> list[int]:
        """
        Parse a comma-separated list of test plan IDs.

        Args:
            value: e.g. "101, 102"

        Returns:
            List of plan IDs in input order

        Raises:
            ValidationError: If the list is empty or any entry is not a positive integer

        Example:
            >>> ReferenceValidator.parse_plan_ids("101,102,")
            [101, 102]
        """
        entries = ReferenceValidator._split_entries(value)
        if not entries:
            raise ValidationError("At least one test plan ID is required")

        return [ReferenceValidator.validate_id(entry, "plan ID") for entry in entries]

    @staticmethod
    def parse_plan_suite_pairs(value: str) -> list[PlanSuitePair]:
        """
        Parse a comma-separated list of planId:suiteId pairs.

        Args:
            value: e.g. "10:20,11:21"

        Returns:
            List of PlanSuitePair in input order

        Raises:
            ValidationError: If the list is empty or any entry does not have
                exactly two colon-separated positive integers

        Example:
            >>> ReferenceValidator.parse_plan_suite_pairs("10:20,11:21")
            [PlanSuitePair(plan_id=10, suite_id=20), PlanSuitePair(plan_id=11, suite_id=21)]
        """
        entries = ReferenceValidator._split_entries(value)
        if not entries:
            raise ValidationError("At least one planId:suiteId pair is required")

        pairs = []
        for entry in entries:
            parts = entry.split(":")
            if len(parts) != 2:
                raise ValidationError(
                    f"Invalid plan/suite pair: '{entry}'. Expected format planId:suiteId (e.g. 10:20)"
                )

            plan_text, suite_text = parts
            try:
                plan_id = ReferenceValidator.validate_id(plan_text, "plan ID")
                suite_id = ReferenceValidator.validate_id(suite_text, "suite ID")
            except ValidationError as e:
                raise ValidationError(f"Invalid plan/suite pair: '{entry}'. {e}") from e

            pairs.append(PlanSuitePair(plan_id=plan_id, suite_id=suite_id))

        return pairs
