"""
Azure DevOps REST API Client

Read-side access to the Azure DevOps endpoints a release quality gate needs:
test suites of a plan, test points of a suite, and WIQL work item queries.
Uses AsyncSecureHTTPClient for SSL enforcement and timeouts.

Requests are not retried: any HTTP error status, transport error or malformed
payload is logged and raised to the caller.

Usage:
    from release_gate.ado_rest_client import get_ado_rest_client

    client = get_ado_rest_client()

    suites = await client.get_test_suites(project="MyProject", plan_id=10)
    points = await client.get_test_points(project="MyProject", plan_id=10, suite_id=20)
    result = await client.query_by_wiql(project="MyProject", wiql_query="SELECT [System.Id] FROM WorkItems")

API Documentation:
    https://learn.microsoft.com/en-us/rest/api/azure/devops/?view=azure-devops-rest-7.1
"""

import base64
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from release_gate.async_http_client import AsyncSecureHTTPClient
from release_gate.core import get_logger
from release_gate.secure_config import AzureDevOpsConfig, get_config
from release_gate.utils.error_handling import log_and_raise

logger = get_logger(__name__)


class ResponseFormatError(ValueError):
    """Raised when Azure DevOps returns a payload that is not the expected JSON shape."""

    pass


class AzureDevOpsRESTClient:
    """
    Azure DevOps REST API client using direct HTTP calls.

    Features:
    - Base64-encoded PAT authentication
    - Continuation-token paging for collection endpoints
    - Fail-fast error handling (no retries)
    """

    API_VERSION = "7.1"
    # test/Plans/... routes belong to the legacy Test API, served up to 5.0
    TEST_API_VERSION = "5.0"
    CONTINUATION_HEADER = "x-ms-continuationtoken"

    def __init__(self, organization_url: str, pat: str):
        """
        Initialize Azure DevOps REST client.

        Args:
            organization_url: Azure DevOps organization URL (e.g., https://dev.azure.com/myorg)
            pat: Personal Access Token for authentication

        Raises:
            ValueError: If organization_url or pat is empty
        """
        if not organization_url or not pat:
            raise ValueError("organization_url and pat are required")

        self.organization_url = organization_url.rstrip("/")
        self.pat = pat
        self.auth_header = self._build_auth_header(pat)

    def _build_auth_header(self, pat: str) -> dict[str, str]:
        """
        Build Basic Authentication header from PAT.

        Azure DevOps uses Basic Auth with empty username and PAT as password.

        Args:
            pat: Personal Access Token

        Returns:
            Dictionary with Authorization header
        """
        credentials = f":{pat}"  # Empty username, PAT as password
        b64_credentials = base64.b64encode(credentials.encode()).decode()  # nosec B108
        return {
            "Authorization": f"Basic {b64_credentials}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _build_url(self, project: str | None, resource: str, **params: Any) -> str:
        """
        Build Azure DevOps REST API URL with query parameters.

        Args:
            project: Project name (None for organization-level APIs)
            resource: Resource path (e.g., "wit/wiql", "test/Plans/10/suites")
            **params: Query parameters (None values are filtered out)

        Returns:
            Complete API URL with query string

        Example:
            _build_url("MyProject", "wit/wiql", **{"api-version": "7.1"})
            -> "https://dev.azure.com/org/MyProject/_apis/wit/wiql?api-version=7.1"
        """
        if project:
            url = f"{self.organization_url}/{quote(project)}/_apis/{resource}"
        else:
            url = f"{self.organization_url}/_apis/{resource}"

        filtered_params = {k: v for k, v in params.items() if v is not None}
        if filtered_params:
            url = f"{url}?{urlencode(filtered_params)}"

        return url

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Execute a single API call.

        Args:
            method: HTTP method (GET or POST)
            url: Full API URL
            **kwargs: Additional arguments for the HTTP client (e.g. json=...)

        Returns:
            The successful response

        Raises:
            httpx.HTTPStatusError: For any non-2xx status (401/403 logged as authentication failures)
            httpx.RequestError: For network errors and timeouts
        """
        logger.debug(f"{method.upper()} {url}")

        try:
            async with AsyncSecureHTTPClient() as client:
                headers = {**self.auth_header, **kwargs.pop("headers", {})}

                if method.upper() == "GET":
                    response = await client.get(url, headers=headers, **kwargs)
                elif method.upper() == "POST":
                    response = await client.post(url, headers=headers, **kwargs)
                else:
                    raise ValueError(f"Unsupported HTTP method: {method}")

                response.raise_for_status()
                return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code in (401, 403):
                log_and_raise(logger, e, {"url": url, "status_code": status_code}, "Authentication")
            log_and_raise(logger, e, {"url": url, "status_code": status_code}, f"ADO API call (HTTP {status_code})")

        except httpx.RequestError as e:
            log_and_raise(logger, e, {"url": url}, "ADO API call (network)")

    def _parse_json(self, response: httpx.Response, url: str, collection_key: str) -> dict[str, Any]:
        """
        Decode a response body and check it carries the expected collection.

        Args:
            response: Successful HTTP response
            url: Request URL (for error messages)
            collection_key: Key that must hold a list ("value", "workItems")

        Returns:
            Decoded JSON object

        Raises:
            ResponseFormatError: If the body is not a JSON object with a list under collection_key
                of JSON objects
        """
        # ADO answers an unusable token with 203 and an HTML sign-in page
        if response.status_code == 203:
            raise ResponseFormatError(f"Azure DevOps returned a sign-in page (HTTP 203) for {url}; check the token")

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Response from {url} is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ResponseFormatError(f"Response from {url} is not a JSON object")

        if not isinstance(payload.get(collection_key), list):
            raise ResponseFormatError(f"Response from {url} has no '{collection_key}' list")

        if not all(isinstance(item, dict) for item in payload[collection_key]):
            raise ResponseFormatError(f"Response from {url} has a '{collection_key}' entry that is not a JSON object")

        return payload

    async def _get_collection(self, project: str, resource: str, api_version: str) -> list[dict[str, Any]]:
        """
        GET every page of a collection endpoint.

        Follows the x-ms-continuationtoken response header until the service
        stops returning one.

        Args:
            project: Project name
            resource: Resource path
            api_version: API version for this route

        Returns:
            Concatenated "value" items of all pages

        Raises:
            ResponseFormatError: If a page is malformed or the service repeats a continuation token
        """
        items: list[dict[str, Any]] = []
        token: str | None = None

        while True:
            url = self._build_url(project, resource, **{"api-version": api_version, "continuationToken": token})
            response = await self._send("GET", url)
            payload = self._parse_json(response, url, "value")
            items.extend(payload["value"])

            next_token = response.headers.get(self.CONTINUATION_HEADER)
            if not next_token:
                return items
            if next_token == token:
                raise ResponseFormatError(f"Continuation token repeated for {url}")
            token = next_token

    # ==============================
    # Test APIs
    # ==============================

    async def get_test_suites(self, project: str, plan_id: int) -> list[dict[str, Any]]:
        """
        Get all test suites of a test plan.

        REST Endpoint: GET {org}/{project}/_apis/test/Plans/{planId}/suites?api-version=5.0

        Args:
            project: Project name
            plan_id: Test plan ID

        Returns:
            List of suites:
            [
                {"id": 20, "name": "Smoke", "plan": {"id": "10"}, "testCaseCount": 12}
            ]
        """
        return await self._get_collection(project, f"test/Plans/{plan_id}/suites", self.TEST_API_VERSION)

    async def get_test_points(self, project: str, plan_id: int, suite_id: int) -> list[dict[str, Any]]:
        """
        Get all test points of a test suite.

        REST Endpoint: GET {org}/{project}/_apis/test/Plans/{planId}/Suites/{suiteId}/points?api-version=5.0

        Args:
            project: Project name
            plan_id: Test plan ID
            suite_id: Test suite ID

        Returns:
            List of test points:
            [
                {"id": 1, "outcome": "Passed", "testCase": {"id": "1001", "name": "Login works"}}
            ]
        """
        return await self._get_collection(
            project, f"test/Plans/{plan_id}/Suites/{suite_id}/points", self.TEST_API_VERSION
        )

    # ==============================
    # Work Item Tracking APIs
    # ==============================

    async def query_by_wiql(self, project: str, wiql_query: str) -> dict[str, Any]:
        """
        Execute WIQL (Work Item Query Language) query.

        REST Endpoint: POST {org}/{project}/_apis/wit/wiql?api-version=7.1

        Args:
            project: Project name
            wiql_query: WIQL query string

        Returns:
            Query result with workItems array:
            {
                "queryType": "flat",
                "queryResultType": "workItem",
                "workItems": [{"id": 1001, "url": "..."}]
            }

        Raises:
            ResponseFormatError: If the response has no workItems list
        """
        url = self._build_url(project, "wit/wiql", **{"api-version": self.API_VERSION})
        response = await self._send("POST", url, json={"query": wiql_query})
        return self._parse_json(response, url, "workItems")


def get_ado_rest_client(ado_config: AzureDevOpsConfig | None = None) -> AzureDevOpsRESTClient:
    """
    Get Azure DevOps REST client with credentials from config.

    Args:
        ado_config: Validated configuration; loaded from the environment when omitted

    Returns:
        AzureDevOpsRESTClient: Authenticated REST client

    Raises:
        ConfigurationError: If ADO_ORGANIZATION_URL or ADO_PAT are missing or invalid
    """
    if ado_config is None:
        ado_config = get_config().get_ado_config()
    return AzureDevOpsRESTClient(organization_url=ado_config.organization_url, pat=ado_config.pat)
