"""
Tests for Secure Configuration Management
"""

import pytest

from release_gate.secure_config import (
    AzureDevOpsConfig,
    ConfigurationError,
    SecureConfig,
    build_organization_url,
)

VALID_PAT = "a" * 52


@pytest.fixture
def secure_config(clean_env, monkeypatch):
    """SecureConfig that does not read a local .env file"""
    monkeypatch.setattr("release_gate.secure_config.load_dotenv", lambda: None)
    return SecureConfig()


class TestBuildOrganizationUrl:
    def test_name_expanded(self):
        assert build_organization_url("myorg") == "https://dev.azure.com/myorg"

    def test_url_passed_through_without_trailing_slash(self):
        assert build_organization_url("https://myorg.visualstudio.com/") == "https://myorg.visualstudio.com"

    def test_empty(self):
        assert build_organization_url("") == ""

    def test_invalid_name_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid Azure DevOps organization name"):
            build_organization_url("my org/../x")


class TestAzureDevOpsConfig:
    """Tests for AzureDevOpsConfig validation"""

    def test_valid(self):
        config = AzureDevOpsConfig("https://dev.azure.com/org", VALID_PAT, project="My Project")

        assert config.project == "My Project"

    def test_missing_url(self):
        with pytest.raises(ConfigurationError, match="required"):
            AzureDevOpsConfig("", VALID_PAT)

    def test_http_rejected(self):
        with pytest.raises(ConfigurationError, match="HTTPS"):
            AzureDevOpsConfig("http://dev.azure.com/org", VALID_PAT)

    def test_non_ado_host_rejected(self):
        with pytest.raises(ConfigurationError, match="valid Azure DevOps URL"):
            AzureDevOpsConfig("https://example.com/org", VALID_PAT)

    def test_missing_pat(self):
        with pytest.raises(ConfigurationError, match="ADO_PAT"):
            AzureDevOpsConfig("https://dev.azure.com/org", "")

    def test_short_pat(self):
        with pytest.raises(ConfigurationError, match="too short"):
            AzureDevOpsConfig("https://dev.azure.com/org", "abc")

    def test_placeholder_pat(self):
        with pytest.raises(ConfigurationError, match="placeholder"):
            AzureDevOpsConfig("https://dev.azure.com/org", "YOUR_PERSONAL_ACCESS_TOKEN")

    def test_job_token_containing_placeholder_text_accepted(self):
        """Test that only a whole-token placeholder is rejected"""
        token = "eyJ0eXAiOiJKV1QiLCJhbGciOiJSUzI1NiJ9." + "aXxXbQ2Q2example" * 40

        assert AzureDevOpsConfig("https://dev.azure.com/org", token).pat == token

    def test_project_with_parentheses_and_ampersand_accepted(self):
        config = AzureDevOpsConfig("https://dev.azure.com/org", VALID_PAT, project="R&D (Legacy)")

        assert config.project == "R&D (Legacy)"

    def test_invalid_project(self):
        with pytest.raises(ConfigurationError, match="ADO_PROJECT"):
            AzureDevOpsConfig("https://dev.azure.com/org", VALID_PAT, project="a/b")


class TestSecureConfig:
    """Tests for SecureConfig.get_ado_config()"""

    def test_reads_environment(self, secure_config, ado_env):
        config = secure_config.get_ado_config()

        assert config.organization_url == "https://dev.azure.com/test-org"
        assert config.project == "Test Project"
        assert config.pat == VALID_PAT

    def test_arguments_override_environment(self, secure_config, ado_env):
        config = secure_config.get_ado_config(organization="other-org", project="Other", pat="b" * 52)

        assert config.organization_url == "https://dev.azure.com/other-org"
        assert config.project == "Other"
        assert config.pat == "b" * 52

    def test_organization_name_variable(self, secure_config, monkeypatch):
        monkeypatch.setenv("ADO_ORGANIZATION", "name-only")
        monkeypatch.setenv("ADO_PAT", VALID_PAT)

        assert secure_config.get_ado_config().organization_url == "https://dev.azure.com/name-only"

    def test_pipeline_access_token_fallback(self, secure_config, monkeypatch):
        monkeypatch.setenv("ADO_ORGANIZATION_URL", "https://dev.azure.com/org")
        monkeypatch.setenv("SYSTEM_ACCESSTOKEN", "c" * 52)

        assert secure_config.get_ado_config().pat == "c" * 52

    def test_missing_everything(self, secure_config):
        with pytest.raises(ConfigurationError):
            secure_config.get_ado_config()
