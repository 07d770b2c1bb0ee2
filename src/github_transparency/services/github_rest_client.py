"""GitHub REST API client."""

import logging
from typing import Any, Optional

import httpx

from github_transparency.config import Config
from github_transparency.exceptions import AuthenticationError, DecodeError, NetworkError
from github_transparency.models.outcome import ResponseOutcome
from github_transparency.utils.rate_limit import classify_response
from github_transparency.utils.decoding import decoding

logger = logging.getLogger(__name__)

ACCEPT_DEFAULT = "application/vnd.github.v3+json"
# Repository topics are only returned with the mercy preview media type
ACCEPT_TOPICS = "application/vnd.github.mercy-preview+json"


class GitHubRestClient:
    """Async client for GitHub REST API.

    Issues exactly one request per call and classifies the response. It never
    retries or sleeps.
    """

    def __init__(self, config: Config):
        if not config.github_token:
            raise AuthenticationError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )
        self.config = config
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        return {
            "Authorization": f"Bearer {self.config.github_token}",
            "Accept": ACCEPT_DEFAULT,
            "User-Agent": "github-transparency/0.1.0",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.github_api_url,
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubRestClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def call(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        include_topics: bool = False,
    ) -> ResponseOutcome:
        """Make one GET request and classify the response.

        Args:
            endpoint: API path relative to the base URL
            params: Query parameters (URL-encoded by httpx)
            include_topics: Negotiate the media type that includes repo topics

        Returns:
            ResponseOutcome for the response

        Raises:
            NetworkError: If no HTTP response was received
            DecodeError: If a successful response is not valid JSON
        """
        client = await self._get_client()
        headers = {"Accept": ACCEPT_TOPICS} if include_topics else None

        try:
            response = await client.get(endpoint, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to {endpoint} failed: {e}") from e

        try:
            outcome = classify_response(
                response,
                endpoint=endpoint,
                default_retry_after=self.config.default_retry_after,
            )
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {endpoint}: {e}") from e

        if not outcome.is_success:
            logger.debug("GET %s -> %s (%d)", endpoint, outcome.kind.value, outcome.status_code)
        return outcome

    async def get(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        include_topics: bool = False,
    ) -> Any:
        """Make a GET request and return the decoded JSON, raising on failure."""
        outcome = await self.call(endpoint, params=params, include_topics=include_topics)
        return outcome.unwrap()

    # Convenience methods for common endpoints

    async def get_authenticated_user(self) -> dict[str, Any]:
        """Get the profile of the token owner."""
        return await self.get("/user")

    async def get_commit(self, owner: str, repo: str, sha: str) -> dict[str, Any]:
        """Get a single commit including stats and files."""
        return await self.get(f"/repos/{owner}/{repo}/commits/{sha}")

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """Get pull request details."""
        return await self.get(f"/repos/{owner}/{repo}/pulls/{number}")

    async def search_issues(
        self,
        query: str,
        per_page: int = 100,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> dict[str, Any]:
        """Run one page of an issue/PR search.

        Args:
            query: Search query (e.g., "author:username type:pr")
            per_page: Items to return (max 100)
            sort: Optional sort field (e.g., "created")
            order: Optional sort order ("asc" or "desc")

        Returns:
            Search response with ``total_count`` and ``items``
        """
        params: dict[str, Any] = {"q": query, "per_page": per_page}
        if sort:
            params["sort"] = sort
        if order:
            params["order"] = order
        return await self.get("/search/issues", params=params)

    async def search_count(self, query: str) -> int:
        """Return only the total_count of a search."""
        result = await self.search_issues(query, per_page=1)
        with decoding("search"):
            return int(result.get("total_count", 0))
