"""
Tests for the Jira REST client
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from search_fence.client import JiraClient, load_settings
from search_fence.errors import FetchError
from search_fence.settings import AccountSettings, Settings

SEARCH_RESPONSE = {
    "startAt": 0,
    "maxResults": 5,
    "total": 12,
    "issues": [{"key": "ABC-1", "fields": {"summary": "Fix login"}}],
}


def make_settings(*accounts: AccountSettings) -> Settings:
    return Settings(_env_file=None, jira_accounts=list(accounts), max_retries=2)


def make_client(settings: Settings, handler) -> JiraClient:
    return JiraClient(
        settings, transport=httpx.MockTransport(handler), backoff_factor=0
    )


class TestSearch:
    """Test cases for JiraClient.search"""

    @pytest.mark.asyncio
    async def test_search_success(self):
        """Test request parameters and result shape"""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=SEARCH_RESPONSE)

        account = AccountSettings(
            alias="Work",
            host="https://jira.example.com/",
            username="me@example.com",
            password="token",
            color="#0052cc",
        )
        client = make_client(make_settings(account), handler)

        results = await client.search("project = ABC", 5)

        assert results["total"] == 12
        assert results["issues"] == SEARCH_RESPONSE["issues"]
        assert results["account"] == {
            "alias": "Work",
            "host": "https://jira.example.com/",
            "color": "#0052cc",
        }

        request = requests[0]
        assert request.url.path == "/rest/api/2/search"
        assert request.url.params["jql"] == "project = ABC"
        assert request.url.params["maxResults"] == "5"
        assert request.headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_bearer_auth(self):
        """Test bearer token authentication"""
        headers = {}

        def handler(request: httpx.Request) -> httpx.Response:
            headers["authorization"] = request.headers.get("Authorization")
            return httpx.Response(200, json=SEARCH_RESPONSE)

        account = AccountSettings(
            host="https://jira.example.com", auth_type="bearer", bearer_token="pat"
        )
        await make_client(make_settings(account), handler).search("a", 1)

        assert headers["authorization"] == "Bearer pat"

    @pytest.mark.asyncio
    async def test_accounts_tried_by_priority(self):
        """Test fallback to the next account when one fails"""
        hosts = []

        def handler(request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            if request.url.host == "first.example.com":
                return httpx.Response(401, json={"errorMessages": ["Unauthorized"]})
            return httpx.Response(200, json=SEARCH_RESPONSE)

        settings = make_settings(
            AccountSettings(alias="Second", host="https://second.example.com", priority=2),
            AccountSettings(alias="First", host="https://first.example.com", priority=1),
        )
        results = await make_client(settings, handler).search("a", 1)

        assert hosts == ["first.example.com", "second.example.com"]
        assert results["account"]["alias"] == "Second"

    @pytest.mark.asyncio
    async def test_all_accounts_fail(self):
        """Test that the last failure is raised with Jira's message"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={"errorMessages": ["Field 'foo' does not exist."]}
            )

        settings = make_settings(AccountSettings(host="https://jira.example.com"))

        with pytest.raises(FetchError, match="Field 'foo' does not exist."):
            await make_client(settings, handler).search("foo = 1", 1)

    @pytest.mark.asyncio
    async def test_last_account_error_raised(self):
        """Test that the error of the last account tried is the one raised"""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "first.example.com":
                return httpx.Response(401, json={"errorMessages": ["Unauthorized"]})
            return httpx.Response(503, text="maintenance")

        settings = make_settings(
            AccountSettings(alias="First", host="https://first.example.com", priority=1),
            AccountSettings(alias="Second", host="https://second.example.com", priority=2),
        )

        with pytest.raises(FetchError, match="status 503: maintenance"):
            await make_client(settings, handler).search("a", 1)

    @pytest.mark.asyncio
    async def test_no_accounts(self):
        """Test that searching without accounts fails clearly"""
        client = make_client(make_settings(), lambda request: httpx.Response(200))

        with pytest.raises(FetchError, match="No Jira account configured"):
            await client.search("a", 1)

    @pytest.mark.asyncio
    async def test_rate_limit_retry(self):
        """Test that 429 responses are retried"""
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if len(attempts) < 3:
                return httpx.Response(429)
            return httpx.Response(200, json=SEARCH_RESPONSE)

        settings = make_settings(AccountSettings(host="https://jira.example.com"))
        results = await make_client(settings, handler).search("a", 1)

        assert len(attempts) == 3
        assert results["total"] == 12

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self):
        """Test that persistent rate limiting ends in a failure"""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text="slow down")

        settings = make_settings(AccountSettings(host="https://jira.example.com"))

        with pytest.raises(FetchError, match="status 429"):
            await make_client(settings, handler).search("a", 1)

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test that transport errors become fetch errors"""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused")

        settings = make_settings(AccountSettings(host="https://jira.example.com"))

        with pytest.raises(FetchError, match="Request failed: refused"):
            await make_client(settings, handler).search("a", 1)


class TestCustomFields:
    """Test cases for custom field discovery"""

    @pytest.mark.asyncio
    async def test_get_custom_fields(self):
        """Test that only custom fields are returned, keyed by numeric id"""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/rest/api/2/field"
            return httpx.Response(
                200,
                json=[
                    {"id": "summary", "name": "Summary", "custom": False},
                    {
                        "id": "customfield_10016",
                        "name": "Story Points",
                        "custom": True,
                        "schema": {"type": "number", "customId": 10016},
                    },
                ],
            )

        settings = make_settings(AccountSettings(host="https://jira.example.com"))
        fields = await make_client(settings, handler).get_custom_fields()

        assert fields == {"10016": "Story Points"}


class TestLoadSettings:
    """Test cases for filling in the custom field table at startup"""

    @pytest.mark.asyncio
    async def test_fields_fetched_when_not_configured(self):
        """Test that fetched fields are added to a copy of the settings"""
        settings = make_settings(AccountSettings(host="https://jira.example.com"))

        with patch.object(
            JiraClient,
            "get_custom_fields",
            AsyncMock(return_value={"10016": "Story Points"}),
        ):
            loaded = await load_settings(settings)

        assert loaded.custom_fields == {"10016": "Story Points"}
        assert loaded.custom_field_name_to_id == {"Story Points": "10016"}
        assert settings.custom_fields == {}

    @pytest.mark.asyncio
    async def test_configured_fields_kept(self):
        """Test that fields from the environment skip the fetch"""
        settings = Settings(
            _env_file=None,
            jira_accounts=[AccountSettings(host="https://jira.example.com")],
            custom_fields={"10050": "Team"},
        )

        with patch.object(JiraClient, "get_custom_fields", AsyncMock()) as mock_fields:
            assert await load_settings(settings) is settings

        mock_fields.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_accounts(self):
        """Test that nothing is fetched without an account"""
        settings = make_settings()

        with patch.object(JiraClient, "get_custom_fields", AsyncMock()) as mock_fields:
            assert await load_settings(settings) is settings

        mock_fields.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_settings_unchanged(self):
        """Test that an unreachable Jira leaves the field table empty"""
        settings = make_settings(AccountSettings(host="https://jira.example.com"))

        with patch.object(
            JiraClient, "get_custom_fields", AsyncMock(side_effect=FetchError("down"))
        ):
            loaded = await load_settings(settings)

        assert loaded is settings
