"""
Secure Configuration Management

Provides centralized, validated configuration for the quality gate.
Values come from environment variables (optionally loaded from a .env file)
and can be overridden from the command line.

Usage:
    from release_gate.secure_config import get_config

    config = get_config()
    ado_config = config.get_ado_config(project="MyProject")
    print(ado_config.organization_url)

Environment variables:
    ADO_ORGANIZATION_URL  Organization URL (https://dev.azure.com/myorg)
    ADO_ORGANIZATION      Organization name, used when ADO_ORGANIZATION_URL is not set
    ADO_PROJECT           Project name
    ADO_PAT               Personal Access Token
    SYSTEM_ACCESSTOKEN    Azure Pipelines job token, used when ADO_PAT is not set

Security Features:
    - Fail-fast on missing/invalid configuration
    - Rejects a PAT that is a template placeholder (e.g., "your_personal_access_token")
    - HTTPS enforcement for URLs

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

from release_gate.security import ValidationError, WIQLValidator

ADO_HOST = "https://dev.azure.com"

# Values from .env templates and docs; compared against the whole token
PLACEHOLDER_PATS = {
    "your_personal_access_token",
    "replace_me_with_a_real_personal_access_token",
    "xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx",
}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


def build_organization_url(organization: str) -> str:
    """
    Expand an organization name into its Azure DevOps URL.

    Full URLs are returned unchanged (without trailing slash).

    Args:
        organization: Organization name ("myorg") or URL

    Returns:
        Organization URL

    Example:
        >>> build_organization_url("myorg")
        'https://dev.azure.com/myorg'
    """
    organization = (organization or "").strip().rstrip("/")
    if not organization:
        return ""
    if "://" in organization:
        return organization
    if not re.match(r"^[a-zA-Z0-9][a-zA-Z0-9\-]*$", organization):
        raise ConfigurationError(f"Invalid Azure DevOps organization name: {organization}")
    return f"{ADO_HOST}/{organization}"


@dataclass
class AzureDevOpsConfig:
    """
    Validated Azure DevOps configuration.
    """

    organization_url: str
    pat: str
    project: str | None = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate Azure DevOps configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.organization_url:
            raise ConfigurationError("ADO_ORGANIZATION_URL or ADO_ORGANIZATION is required")

        if not self.organization_url.startswith("https://"):
            raise ConfigurationError(f"ADO_ORGANIZATION_URL must use HTTPS: {self.organization_url}")

        if not ("dev.azure.com" in self.organization_url or "visualstudio.com" in self.organization_url):
            raise ConfigurationError(
                f"ADO_ORGANIZATION_URL must be a valid Azure DevOps URL: {self.organization_url}"
            )

        if not self.pat:
            raise ConfigurationError("ADO_PAT (or SYSTEM_ACCESSTOKEN) is required")

        if len(self.pat) < 20:
            raise ConfigurationError(f"ADO_PAT appears invalid (too short: {len(self.pat)} chars, expected >=20)")

        if self.pat.strip().lower() in PLACEHOLDER_PATS:
            raise ConfigurationError("ADO_PAT is a placeholder value - please set a real Personal Access Token")

        if self.project is not None:
            try:
                WIQLValidator.validate_project_name(self.project)
            except ValidationError as e:
                raise ConfigurationError(f"ADO_PROJECT is invalid: {e}") from e


class SecureConfig:
    """
    Centralized secure configuration manager.

    Loads and validates configuration from environment variables.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_ado_config(
        self, organization: str | None = None, project: str | None = None, pat: str | None = None
    ) -> AzureDevOpsConfig:
        """
        Get validated Azure DevOps configuration.

        Arguments take precedence over environment variables.

        Args:
            organization: Optional organization name or URL
            project: Optional project name
            pat: Optional Personal Access Token

        Returns:
            AzureDevOpsConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        organization_url = build_organization_url(
            organization or os.getenv("ADO_ORGANIZATION_URL") or os.getenv("ADO_ORGANIZATION") or ""
        )
        pat = pat or os.getenv("ADO_PAT") or os.getenv("SYSTEM_ACCESSTOKEN")
        project = project or os.getenv("ADO_PROJECT")

        return AzureDevOpsConfig(organization_url=organization_url, pat=pat or "", project=project)


_config_instance = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        SecureConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance
