"""Repository collector service."""

import logging

from github_transparency.models.repository import Repository, RepositorySummary
from github_transparency.services.github_rest_client import GitHubRestClient
from github_transparency.utils.decoding import decoding
from github_transparency.utils.pagination import fetch_all

logger = logging.getLogger(__name__)


class RepoCollector:
    """Collects repository data and statistics."""

    def __init__(self, rest_client: GitHubRestClient, per_page: int = 100):
        self.rest_client = rest_client
        self.per_page = per_page

    async def collect_repos(self) -> RepositorySummary:
        """Collect every repository the token owner can access.

        Includes private, owned, collaborator and organization repositories
        (``type=all``), with topics. A failure on any page raises; no partial
        list is returned.

        Returns:
            RepositorySummary with all repos and aggregated statistics
        """
        logger.debug("Fetching repositories for authenticated user")

        repos_data = await fetch_all(
            self.rest_client,
            "/user/repos",
            per_page=self.per_page,
            params={"type": "all"},
            include_topics=True,
        )
        with decoding("repository"):
            repos = [Repository.from_api(r) for r in repos_data]

        logger.debug("Found %d repositories", len(repos))

        return RepositorySummary.from_repos(repos)
