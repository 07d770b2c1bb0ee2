"""Commit detail collector service."""

import logging

from github_transparency.exceptions import GitHubTransparencyError
from github_transparency.models.activity import CommitDetail
from github_transparency.services.github_rest_client import GitHubRestClient
from github_transparency.utils.batching import BoundedConcurrentBatcher, FetchTask
from github_transparency.utils.decoding import decoding
from github_transparency.utils.pagination import fetch_all

logger = logging.getLogger(__name__)


class CommitCollector:
    """Collects commits with their diff stats."""

    def __init__(self, rest_client: GitHubRestClient, concurrency: int = 10):
        self.rest_client = rest_client
        self.batcher: BoundedConcurrentBatcher[CommitDetail] = BoundedConcurrentBatcher(
            self._fetch_detail, concurrency=concurrency
        )

    async def _fetch_detail(self, task: FetchTask) -> CommitDetail:
        data = await self.rest_client.get(task.endpoint)
        with decoding("commit"):
            return CommitDetail.from_api(data)

    async def get_commit_details(self, owner: str, repo: str, sha: str) -> CommitDetail | None:
        """Fetch one commit with stats, or None if it cannot be fetched."""
        try:
            data = await self.rest_client.get_commit(owner, repo, sha)
            with decoding("commit"):
                return CommitDetail.from_api(data)
        except GitHubTransparencyError as e:
            logger.debug("Failed to fetch commit %s/%s@%s: %s", owner, repo, sha, e)
            return None

    async def collect_commits_with_stats(
        self,
        owner: str,
        repo: str,
        author: str,
        limit: int = 100,
    ) -> list[CommitDetail]:
        """Collect recent commits by ``author`` in one repository, with stats.

        The commit list is paginated; the details are fetched in bounded
        waves and commits whose details fail are left out.

        Args:
            owner: Repository owner
            repo: Repository name
            author: Commit author login
            limit: Maximum commits to return

        Returns:
            CommitDetail list, newest first, at most ``limit`` long
        """
        if limit <= 0:
            return []

        commits = await fetch_all(
            self.rest_client,
            f"/repos/{owner}/{repo}/commits",
            per_page=min(limit, 100),
            params={"author": author},
            max_items=limit,
        )

        with decoding("commit list"):
            tasks = [
                FetchTask(key=c["sha"], endpoint=f"/repos/{owner}/{repo}/commits/{c['sha']}")
                for c in commits
                if c.get("sha")
            ]
        outcomes = await self.batcher.run(tasks)
        details = BoundedConcurrentBatcher.successful(outcomes)

        logger.debug(
            "Fetched stats for %d of %d commits in %s/%s",
            len(details),
            len(tasks),
            owner,
            repo,
        )
        return details
