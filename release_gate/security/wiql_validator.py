"""
WIQL Validator for Azure DevOps Query Language

Validates the project name and the defect query handed to the query-based gate.
The query is supplied by the pipeline author, so it is passed through as written;
validation only rejects input that can never be a single WIQL SELECT statement.

Security Note:
    The project name is interpolated into request URLs and must pass
    validate_project_name() before use.
"""

import re

from .validation import ValidationError


class WIQLValidator:
    """
    Validates inputs for Azure DevOps WIQL (Work Item Query Language) queries.
    """

    MAX_QUERY_LENGTH = 32768  # Azure DevOps rejects longer WIQL bodies

    # WIQL sources a defect query may select from
    VALID_SOURCES = {"WORKITEMS", "WORKITEMLINKS"}

    # Reserved by Azure DevOps for project names, plus control characters
    FORBIDDEN_PROJECT_CHARS = re.compile(r"[\\/:*?\"'<>;#$}{,+=\[\]|\x00-\x1f\x7f]")

    @staticmethod
    def validate_project_name(project_name: str) -> str:
        """
        Validate Azure DevOps project name.

        ADO project names cannot contain control characters or any of
        \\ / : * ? " ' < > ; # $ { } , + = [ ] | and cannot start or end
        with a period. Other characters, including non-ASCII letters,
        parentheses and '&', are allowed.

        Max length: 64 characters

        Args:
            project_name: User-supplied project name

        Returns:
            Validated project name (unchanged if valid)

        Raises:
            ValidationError: If project name is invalid

        Example:
            >>> WIQLValidator.validate_project_name("My Project")
            'My Project'
        """
        if not project_name:
            raise ValidationError("Project name cannot be empty")

        if not isinstance(project_name, str):
            raise ValidationError(f"Project name must be string, got {type(project_name)}")

        if len(project_name) > 64:
            raise ValidationError(f"Project name too long: {len(project_name)} chars (max 64)")

        forbidden = WIQLValidator.FORBIDDEN_PROJECT_CHARS.search(project_name)
        if forbidden:
            raise ValidationError(
                f"Invalid project name: '{project_name}'. Character {forbidden.group()!r} is not allowed "
                f"in Azure DevOps project names."
            )

        if project_name.startswith(".") or project_name.endswith("."):
            raise ValidationError(f"Project name cannot start or end with a period: '{project_name}'")

        return project_name

    @staticmethod
    def validate_query(query: str) -> str:
        """
        Validate a defect query before it is posted to the WIQL endpoint.

        Accepted queries are a single SELECT statement over WorkItems or
        WorkItemLinks. Leading and trailing whitespace is stripped.

        Args:
            query: WIQL query text

        Returns:
            The stripped query

        Raises:
            ValidationError: If the query is empty, too long, not a SELECT,
                has no FROM clause, or contains a statement separator

        Example:
            >>> WIQLValidator.validate_query("SELECT [System.Id] FROM WorkItems WHERE [System.WorkItemType] = 'Bug'")
            "SELECT [System.Id] FROM WorkItems WHERE [System.WorkItemType] = 'Bug'"
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Query cannot be empty")

        query = query.strip()

        if len(query) > WIQLValidator.MAX_QUERY_LENGTH:
            raise ValidationError(f"Query too long: {len(query)} chars (max {WIQLValidator.MAX_QUERY_LENGTH})")

        if not re.match(r"^SELECT\s", query, re.IGNORECASE):
            raise ValidationError("Query must be a WIQL SELECT statement")

        source = re.search(r"\sFROM\s+(\w+)", query, re.IGNORECASE)
        if not source:
            raise ValidationError("Query has no FROM clause")

        if source.group(1).upper() not in WIQLValidator.VALID_SOURCES:
            raise ValidationError(
                f"Query selects from unsupported source: '{source.group(1)}'. Must be WorkItems or WorkItemLinks"
            )

        # Semicolons are only legal inside string literals
        unquoted = re.sub(r"'(?:[^']|'')*'", "''", query)
        if ";" in unquoted:
            raise ValidationError("Query must be a single statement (found ';')")

        return query
