"""
Input Validation for Gate Parameters

Validates everything that arrives from the command line or environment before
it is used to build an Azure DevOps request.

Package Structure:
    - validation: Base ValidationError exception
    - wiql_validator: Project name and WIQL defect query validation
    - reference_validator: Test plan IDs and planId:suiteId pairs

Usage:
    from release_gate.security import ReferenceValidator, ValidationError

    try:
        pairs = ReferenceValidator.parse_plan_suite_pairs("10:20,11:21")
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        raise
"""

from .reference_validator import ReferenceValidator
from .validation import ValidationError
from .wiql_validator import WIQLValidator

__all__ = [
    "ValidationError",
    "WIQLValidator",
    "ReferenceValidator",
]
