"""GitHub GraphQL API client for contribution data."""

import logging
from typing import Any, Optional

import httpx

from github_transparency.config import Config
from github_transparency.exceptions import (
    AuthenticationError,
    DecodeError,
    GitHubGraphQLError,
    NetworkError,
)
from github_transparency.models.outcome import ResponseOutcome
from github_transparency.services.queries import (
    COMMIT_TIMESTAMPS_QUERY,
    CONTRIBUTIONS_QUERY,
    REVIEWS_WITH_REACTIONS_QUERY,
)
from github_transparency.utils.rate_limit import classify_response

logger = logging.getLogger(__name__)


def dig(data: Any, *path: str) -> Any:
    """Follow ``path`` through nested dicts, returning None at the first gap."""
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


class GitHubGraphQLClient:
    """Async client for GitHub GraphQL API."""

    def __init__(self, config: Config):
        if not config.github_token:
            raise AuthenticationError(
                "GitHub token is required for GraphQL API. "
                "Set GITHUB_TOKEN environment variable."
            )
        self.config = config
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        return {
            "Authorization": f"Bearer {self.config.github_token}",
            "Content-Type": "application/json",
            "User-Agent": "github-transparency/0.1.0",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self._get_headers(),
                timeout=self.config.request_timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GitHubGraphQLClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def call(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> ResponseOutcome:
        """POST a GraphQL document and classify the response.

        On success the outcome payload is the full ``{data, errors?}`` envelope.
        """
        client = await self._get_client()
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = await client.post(self.config.github_graphql_url, json=payload)
        except httpx.HTTPError as e:
            raise NetworkError(f"GraphQL request failed: {e}") from e

        try:
            return classify_response(
                response,
                endpoint="graphql",
                default_retry_after=self.config.default_retry_after,
            )
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from GraphQL API: {e}") from e

    async def execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            The ``data`` field of the response (empty dict when null)

        Raises:
            GitHubGraphQLError: If the response carries errors and no data
        """
        result = (await self.call(query, variables)).unwrap() or {}

        data = result.get("data")
        if "errors" in result and not data:
            error_messages = [e.get("message", "Unknown error") for e in result["errors"]]
            raise GitHubGraphQLError(
                f"GraphQL errors: {'; '.join(error_messages)}",
                errors=result["errors"],
            )
        if "errors" in result:
            logger.debug("GraphQL returned partial data with errors: %s", result["errors"])

        return data or {}

    async def get_contributions(self, username: str) -> dict[str, Any] | None:
        """Get the contribution calendar and totals, or None for an unknown user."""
        result = await self.execute(CONTRIBUTIONS_QUERY, {"username": username})
        return dig(result, "user", "contributionsCollection")

    async def get_commit_contributions(
        self,
        username: str,
        from_datetime: str,
    ) -> list[dict[str, Any]]:
        """Get commit contributions grouped by repository since ``from_datetime``."""
        result = await self.execute(
            COMMIT_TIMESTAMPS_QUERY,
            {"username": username, "from": from_datetime},
        )
        return (
            dig(result, "user", "contributionsCollection", "commitContributionsByRepository")
            or []
        )

    async def get_review_contributions(
        self,
        username: str,
        first: int = 50,
    ) -> list[dict[str, Any]]:
        """Get pull request review contribution nodes."""
        result = await self.execute(
            REVIEWS_WITH_REACTIONS_QUERY,
            {"username": username, "first": min(first, 100)},
        )
        return (
            dig(
                result,
                "user",
                "contributionsCollection",
                "pullRequestReviewContributions",
                "nodes",
            )
            or []
        )
