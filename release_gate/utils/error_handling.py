"""
Error Handling Utility Module

Structured error logging for operational faults. Faults are never turned into
gate results: they are logged with context and re-raised so the command-line
boundary can abort the run.

Example:
    try:
        points = await client.get_test_points(project, plan_id, suite_id)
    except httpx.HTTPError as e:
        log_and_raise(logger, e, {"plan_id": plan_id, "suite_id": suite_id}, "Test point fetch")
"""

import logging
from typing import Any, NoReturn


def log_and_raise(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> NoReturn:
    """
    Log an error with context and re-raise it.

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        error_type: Human-readable description

    Raises:
        The original exception after logging
    """
    logger.error(
        f"{error_type} failed: {error}",
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        },
    )
    raise error


def describe_error(error: BaseException) -> str:
    """
    One-line description of a fault for report lines.

    HTTP status errors are reduced to status code and URL so that response
    bodies (which may echo request data) stay out of pipeline annotations.

    Args:
        error: The exception

    Returns:
        Short description, e.g. "HTTPStatusError: HTTP 401 for https://dev.azure.com/org/..."
    """
    response = getattr(error, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        request = getattr(error, "request", None)
        url = getattr(request, "url", None)
        target = f" for {url}" if url else ""
        return f"{error.__class__.__name__}: HTTP {status_code}{target}"

    return f"{error.__class__.__name__}: {error}"
