"""
Base Validation Exception for Input Validators

This module provides the base exception class used across all gate input validators.
"""


class ValidationError(Exception):
    """
    Raised when input validation fails.

    Raised at the command-line boundary, before any request reaches Azure DevOps.
    """

    pass
