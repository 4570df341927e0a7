"""
Jira REST Client

Runs JQL searches against the configured Jira accounts.
"""

import asyncio
import itertools
import logging
from typing import Any

import httpx
from httpcore._async.connection import exponential_backoff

from ..errors import FetchError
from ..settings import AccountSettings, Settings, get_settings
from ..types import AccountInfo, SearchResults

logger = logging.getLogger("search_fence.client")

SEARCH_PATH = "/rest/api/2/search"
FIELDS_PATH = "/rest/api/2/field"


class JiraClient:
    """Jira search client with account fallback and rate limit backoff."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff_factor: float = 1.0,
    ):
        self.settings = settings or get_settings()
        self.transport = transport
        self.backoff_factor = backoff_factor

    def _accounts(self) -> list[AccountSettings]:
        accounts = sorted(self.settings.jira_accounts, key=lambda a: a.priority)
        if not accounts:
            raise FetchError("No Jira account configured")
        return accounts

    async def search(self, query: str, limit: int) -> SearchResults:
        """
        Run a JQL search, trying each account in priority order.

        Args:
            query: The JQL query string
            limit: Maximum number of issues to return

        Returns:
            Issues, total count and the account that answered

        Raises:
            FetchError: If no account could run the search
        """
        params = {"jql": query, "maxResults": str(limit), "startAt": "0"}

        last_error = FetchError("No Jira account answered the search")
        for account in self._accounts():
            try:
                data = await self._get(account, SEARCH_PATH, params)
            except FetchError as e:
                logger.warning(f"Search failed on account {account.alias}: {e}")
                last_error = e
                continue

            return SearchResults(
                issues=data.get("issues", []),
                total=data.get("total", 0),
                account=AccountInfo(
                    alias=account.alias, host=account.host, color=account.color
                ),
            )

        raise last_error

    async def get_custom_fields(self) -> dict[str, str]:
        """
        Get the custom field id -> name table of the highest priority account.

        Returns:
            Mapping of numeric custom field ids (as strings) to field names
        """
        fields = await self._get(self._accounts()[0], FIELDS_PATH)
        custom_fields: dict[str, str] = {}
        for field in fields:
            if field.get("custom") and "customId" in field.get("schema", {}):
                custom_fields[str(field["schema"]["customId"])] = field["name"]
        return custom_fields

    def _headers(self, account: AccountSettings) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if account.auth_type == "bearer":
            headers["Authorization"] = f"Bearer {account.bearer_token}"
        return headers

    def _auth(self, account: AccountSettings) -> httpx.Auth | None:
        if account.auth_type == "basic":
            return httpx.BasicAuth(account.username, account.password)
        return None

    async def _get(
        self,
        account: AccountSettings,
        path: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        url = account.host.rstrip("/") + path
        max_retries = self.settings.max_retries

        async with httpx.AsyncClient(
            timeout=self.settings.request_timeout,
            transport=self.transport,
            auth=self._auth(account),
        ) as client:
            for attempt, delay in enumerate(
                itertools.islice(
                    exponential_backoff(factor=self.backoff_factor), max_retries + 1
                )
            ):
                await asyncio.sleep(delay)  # 0, 1, 2, 4, 8, 16 seconds

                try:
                    response = await client.get(
                        url, headers=self._headers(account), params=params
                    )
                    response.raise_for_status()
                    return response.json()

                except httpx.TimeoutException as e:
                    raise FetchError(f"Request to {account.alias} timed out") from e
                except httpx.HTTPStatusError as e:
                    # Handle rate limiting with exponential backoff
                    if e.response.status_code == 429 and attempt < max_retries:
                        logger.info(
                            f"Rate limited, retrying in {delay} seconds... (attempt {attempt + 1}/{max_retries + 1})"
                        )
                        continue
                    raise FetchError(_error_message(e.response)) from e
                except (httpx.HTTPError, ValueError) as e:
                    raise FetchError(f"Request failed: {str(e)}") from e

        # If we get here, all retries failed
        raise FetchError("Maximum retries exceeded for rate limited requests")


def _error_message(response: httpx.Response) -> str:
    """Build a readable message from a Jira error response."""
    try:
        messages = response.json().get("errorMessages", [])
    except (ValueError, AttributeError):
        messages = []
    if messages:
        return f"Jira returned status {response.status_code}: {' '.join(messages)}"
    return f"Jira returned status {response.status_code}: {response.text}"


async def load_settings(settings: Settings | None = None) -> Settings:
    """
    Get settings with the custom field table filled in from Jira.

    Custom fields set in the environment are kept as they are. Otherwise the
    table is fetched from the highest priority account; if that fails the
    settings come back unchanged so blocks without custom fields still work.

    Args:
        settings: Base settings, the process settings when omitted

    Returns:
        Settings with ``custom_fields`` loaded where possible
    """
    settings = settings or get_settings()
    if settings.custom_fields or not settings.jira_accounts:
        return settings

    try:
        custom_fields = await JiraClient(settings).get_custom_fields()
    except FetchError as e:
        logger.warning(f"⚠️ Could not load custom fields: {e}")
        return settings

    logger.info(f"🏷️ Loaded {len(custom_fields)} custom fields")
    return settings.model_copy(update={"custom_fields": custom_fields})
