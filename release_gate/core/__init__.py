"""
Core Infrastructure - Configuration and Logging

Usage:
    from release_gate.core import get_config, get_logger

    logger = get_logger(__name__)
    ado_config = get_config().get_ado_config()
"""

from release_gate.secure_config import AzureDevOpsConfig, ConfigurationError, SecureConfig, get_config

from .logging_config import get_logger, log_with_context, setup_logging

__all__ = [
    # Configuration
    "get_config",
    "ConfigurationError",
    "SecureConfig",
    "AzureDevOpsConfig",
    # Logging
    "get_logger",
    "log_with_context",
    "setup_logging",
]
