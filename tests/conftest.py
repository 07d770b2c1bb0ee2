"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from github_transparency.config import Config
from github_transparency.models.outcome import ResponseOutcome

API_URL = "https://api.github.com"
GRAPHQL_URL = "https://api.github.com/graphql"


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return Config(
        github_token="test_token",
        github_api_url=API_URL,
        github_graphql_url=GRAPHQL_URL,
    )


@pytest.fixture
def mock_rest_client():
    """A REST client double with async methods."""
    client = MagicMock()
    client.call = AsyncMock()
    client.get = AsyncMock()
    client.get_commit = AsyncMock()
    client.search_issues = AsyncMock()
    client.search_count = AsyncMock()
    return client


@pytest.fixture
def mock_graphql_client():
    """A GraphQL client double with async methods."""
    client = MagicMock()
    client.execute = AsyncMock()
    client.get_contributions = AsyncMock()
    client.get_commit_contributions = AsyncMock()
    client.get_review_contributions = AsyncMock()
    return client


def success(payload) -> ResponseOutcome:
    """Shorthand for a successful outcome."""
    return ResponseOutcome.success(payload)


def week(*days: tuple[str, int]) -> dict:
    """GraphQL-shaped contribution week from (date, count) pairs."""
    return {"contributionDays": [{"date": d, "contributionCount": c} for d, c in days]}
