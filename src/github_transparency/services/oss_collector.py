"""Merged-contribution tally for a list of open-source projects."""

import logging
from collections.abc import Sequence

from github_transparency.exceptions import GitHubTransparencyError
from github_transparency.metrics import repository_key
from github_transparency.models.activity import OSSProject
from github_transparency.services.github_rest_client import GitHubRestClient
from github_transparency.services.queries import merged_prs_query
from github_transparency.utils.decoding import decoding

logger = logging.getLogger(__name__)


class OSSContributionCollector:
    """Counts merged PRs by a user in each of several repositories.

    Projects are queried in batches with one combined search each. A batch
    whose ``total_count`` exceeds one result page is truncated, so its
    projects are re-counted one by one. A batch that fails is also counted
    one by one, and a project whose own query fails stays at 0.

    Callers that pass a ``failed`` list get the keys of projects left at 0
    because of an error, so they can be told apart from genuine zeros.
    """

    def __init__(
        self,
        rest_client: GitHubRestClient,
        batch_size: int = 5,
        page_cap: int = 100,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be a positive integer")
        self.rest_client = rest_client
        self.batch_size = batch_size
        self.page_cap = page_cap

    async def collect(
        self,
        username: str,
        projects: Sequence[OSSProject],
        failed: list[str] | None = None,
    ) -> dict[str, int]:
        """Tally merged PRs per project.

        Args:
            username: PR author
            projects: Repositories to count contributions to
            failed: Receives the keys of projects whose count fell back to 0

        Returns:
            Lowercase ``owner/repo`` -> merged PR count, with every requested
            project present
        """
        contributions = {project.key: 0 for project in projects}

        for i in range(0, len(projects), self.batch_size):
            batch = projects[i : i + self.batch_size]
            try:
                contributions.update(await self._count_batch(username, batch))
            except GitHubTransparencyError as e:
                logger.warning("Failed to fetch OSS contributions for batch %d: %s", i, e)
                contributions.update(await self._count_individually(username, batch, failed))

        return contributions

    async def _count_batch(
        self,
        username: str,
        batch: Sequence[OSSProject],
    ) -> dict[str, int]:
        result = await self.rest_client.search_issues(
            merged_prs_query(username, [(p.owner, p.repo) for p in batch]),
            per_page=self.page_cap,
        )

        counts = {project.key: 0 for project in batch}
        with decoding("search"):
            for item in result.get("items") or []:
                key = repository_key(item.get("repository_url", ""))
                if key in counts:
                    counts[key] += 1
            total_count = int(result.get("total_count", 0))

        if total_count > self.page_cap:
            logger.debug(
                "Batch total %d exceeds %d, counting projects individually",
                total_count,
                self.page_cap,
            )
            for project in batch:
                counts[project.key] = await self._count_project(username, project)

        return counts

    async def _count_individually(
        self,
        username: str,
        batch: Sequence[OSSProject],
        failed: list[str] | None = None,
    ) -> dict[str, int]:
        counts = {}
        for project in batch:
            try:
                counts[project.key] = await self._count_project(username, project)
            except GitHubTransparencyError as e:
                logger.warning("Failed to count contributions to %s: %s", project.key, e)
                counts[project.key] = 0
                if failed is not None:
                    failed.append(project.key)
        return counts

    async def _count_project(self, username: str, project: OSSProject) -> int:
        return await self.rest_client.search_count(
            merged_prs_query(username, [(project.owner, project.repo)])
        )
