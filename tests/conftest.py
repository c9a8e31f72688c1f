"""
Pytest configuration and shared fixtures

Provides HTTP response factories, a patched HTTP client and sample
Azure DevOps payloads.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from release_gate.ado_rest_client import AzureDevOpsRESTClient

ORG_URL = "https://dev.azure.com/test-org"


# ===== HTTP Fixtures =====


@pytest.fixture
def make_response():
    """Factory for real httpx.Response objects bound to a request"""

    def _make(json_body=None, status_code=200, headers=None, method="GET", url=f"{ORG_URL}/_apis/test", text=None):
        request = httpx.Request(method, url)
        if text is not None:
            return httpx.Response(status_code, text=text, headers=headers, request=request)
        return httpx.Response(status_code, json=json_body, headers=headers, request=request)

    return _make


@pytest.fixture
def mock_http_client():
    """
    Patch AsyncSecureHTTPClient inside the REST client module.

    Set mock_http_client.get / .post side_effect or return_value per test.
    """
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)

    with patch("release_gate.ado_rest_client.AsyncSecureHTTPClient", return_value=client):
        yield client


@pytest.fixture
def rest_client():
    """REST client with dummy credentials"""
    return AzureDevOpsRESTClient(organization_url=ORG_URL, pat="test-pat-token-123")


@pytest.fixture
def mock_rest_client():
    """AsyncMock standing in for AzureDevOpsRESTClient in evaluator tests"""
    return AsyncMock(spec=AzureDevOpsRESTClient)


# ===== Azure DevOps Payload Fixtures =====


def point(outcome, name="Test case"):
    return {"id": 1, "outcome": outcome, "testCase": {"id": "1001", "name": name}}


@pytest.fixture
def passed_points():
    return [point("Passed", "Login works"), point("Passed", "Logout works")]


@pytest.fixture
def mixed_points():
    return [point("Passed", "Login works"), point("Failed", "Checkout works")]


@pytest.fixture
def ado_env(monkeypatch):
    """Valid Azure DevOps environment variables"""
    monkeypatch.setenv("ADO_ORGANIZATION_URL", "https://dev.azure.com/test-org")
    monkeypatch.setenv("ADO_PROJECT", "Test Project")
    monkeypatch.setenv("ADO_PAT", "a" * 52)
    monkeypatch.delenv("ADO_ORGANIZATION", raising=False)
    monkeypatch.delenv("SYSTEM_ACCESSTOKEN", raising=False)
    return monkeypatch


@pytest.fixture
def clean_env(monkeypatch):
    """No Azure DevOps or CI variables"""
    for name in (
        "ADO_ORGANIZATION_URL",
        "ADO_ORGANIZATION",
        "ADO_PROJECT",
        "ADO_PAT",
        "SYSTEM_ACCESSTOKEN",
        "TF_BUILD",
        "GITHUB_ACTIONS",
        "GITHUB_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
