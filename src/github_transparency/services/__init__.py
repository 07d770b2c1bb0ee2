"""Services for GitHub data collection."""

from github_transparency.services.github_graphql_client import GitHubGraphQLClient
from github_transparency.services.github_rest_client import GitHubRestClient

__all__ = [
    "GitHubRestClient",
    "GitHubGraphQLClient",
]
