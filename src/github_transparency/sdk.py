"""GitHub Transparency SDK - High-level API for collecting a developer's activity."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone
from typing import TypeVar

from github_transparency.config import Config
from github_transparency.exceptions import GitHubTransparencyError
from github_transparency.models.activity import (
    CommitDetail,
    IssueCounts,
    OSSProject,
    PullRequestCounts,
    PullRequestDetail,
    ReviewCounts,
    ReviewWithReactions,
    SearchIssue,
    TransparencyData,
)
from github_transparency.models.contribution import CommitTimestamp, ContributionStats
from github_transparency.models.repository import RepositorySummary
from github_transparency.models.user import UserProfile
from github_transparency.services.activity_collector import ActivityCollector
from github_transparency.services.commit_collector import CommitCollector
from github_transparency.services.contribution_collector import ContributionCollector
from github_transparency.services.github_graphql_client import GitHubGraphQLClient
from github_transparency.services.github_rest_client import GitHubRestClient
from github_transparency.services.oss_collector import OSSContributionCollector
from github_transparency.services.profile_collector import ProfileCollector
from github_transparency.services.queries import SearchQuery
from github_transparency.services.repo_collector import RepoCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GitHubTransparency:
    """High-level SDK for aggregating a developer's GitHub activity.

    Profile and repository list are required: their errors propagate.
    Everything else is enrichment: a failure is logged and the method returns
    an empty or zero default instead.

    Example usage:
        ```python
        from github_transparency import GitHubTransparency

        async with GitHubTransparency(token="ghp_xxx") as client:
            data = await client.collect(oss_projects=["python/cpython"])
            print(data.contributions.streak.current)
        ```

    Args:
        token: GitHub token of the developer being reported on
        api_url: GitHub API base URL (default: https://api.github.com)
        graphql_url: GitHub GraphQL API URL (default: https://api.github.com/graphql)
        config: Full configuration; overrides the other arguments
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = "https://api.github.com",
        graphql_url: str = "https://api.github.com/graphql",
        config: Config | None = None,
    ):
        self._config = config or Config(
            github_token=token,
            github_api_url=api_url,
            github_graphql_url=graphql_url,
        )
        self._rest_client: GitHubRestClient | None = None
        self._graphql_client: GitHubGraphQLClient | None = None
        self._initialized = False

    async def __aenter__(self) -> "GitHubTransparency":
        """Async context manager entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _initialize(self) -> None:
        """Initialize clients."""
        if self._initialized:
            return

        self._rest_client = GitHubRestClient(self._config)
        self._graphql_client = GitHubGraphQLClient(self._config)
        self._initialized = True
        logger.debug("GitHubTransparency initialized")

    async def close(self) -> None:
        """Close all HTTP connections."""
        if self._rest_client:
            await self._rest_client.close()
        if self._graphql_client:
            await self._graphql_client.close()
        self._initialized = False
        logger.debug("GitHubTransparency closed")

    def _ensure_initialized(self) -> None:
        """Ensure the client is initialized."""
        if not self._initialized:
            raise GitHubTransparencyError(
                "Client not initialized. Use 'async with GitHubTransparency(...) as client:'"
            )

    async def _best_effort(
        self,
        section: str,
        operation: Callable[[], Awaitable[T]],
        default: T,
        degraded: list[str] | None = None,
    ) -> T:
        """Run ``operation``, returning ``default`` if it fails."""
        try:
            return await operation()
        except GitHubTransparencyError as e:
            logger.warning("Failed to fetch %s: %s", section, e)
            if degraded is not None:
                degraded.append(section)
            return default

    # Primary data

    async def get_profile(self) -> UserProfile:
        """Get the authenticated user's profile.

        Raises:
            GitHubTransparencyError: On any failure
        """
        self._ensure_initialized()
        logger.info("Fetching profile")
        return await ProfileCollector(self._rest_client).collect_profile()

    async def get_repos(self) -> RepositorySummary:
        """Get all repositories accessible to the authenticated user.

        Raises:
            GitHubTransparencyError: On any failure, including mid-pagination
        """
        self._ensure_initialized()
        logger.info("Fetching repositories")
        return await RepoCollector(
            self._rest_client, per_page=self._config.default_per_page
        ).collect_repos()

    async def get_pull_request_counts(self, username: str) -> PullRequestCounts:
        """Get total and merged PR counts.

        Raises:
            GitHubTransparencyError: On any failure
        """
        self._ensure_initialized()
        return await self._activity().collect_pull_request_counts(username)

    # Enrichment

    async def get_contributions(self, username: str) -> ContributionStats | None:
        """Get contribution calendar, totals and streaks, or None on failure."""
        self._ensure_initialized()
        logger.info("Fetching contributions for %s", username)
        return await self._best_effort(
            "contributions",
            lambda: ContributionCollector(self._graphql_client).collect_contributions(username),
            None,
        )

    async def get_commit_timestamps(self, username: str) -> list[CommitTimestamp]:
        """Get UTC date/hour of commits over the last year, or [] on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            "commit timestamps",
            lambda: ContributionCollector(self._graphql_client).collect_commit_timestamps(
                username
            ),
            [],
        )

    async def get_commit_details(self, owner: str, repo: str, sha: str) -> CommitDetail | None:
        """Get one commit with diff stats, or None on failure."""
        self._ensure_initialized()
        return await self._commits().get_commit_details(owner, repo, sha)

    async def get_repo_commits_with_stats(
        self,
        owner: str,
        repo: str,
        author: str,
        limit: int = 100,
    ) -> list[CommitDetail]:
        """Get recent commits by ``author`` with stats, or [] on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            f"commits for {owner}/{repo}",
            lambda: self._commits().collect_commits_with_stats(owner, repo, author, limit),
            [],
        )

    async def get_pull_requests_detailed(
        self,
        username: str,
        limit: int = 50,
    ) -> list[PullRequestDetail]:
        """Get recent PRs with details and merge times, or [] on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            "pull requests",
            lambda: self._activity().collect_pull_requests_detailed(username, limit),
            [],
        )

    async def get_issues_created(self, username: str, limit: int = 100) -> list[SearchIssue]:
        """Get recent issues authored by ``username``, or [] on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            "issues",
            lambda: self._activity().collect_issues_created(username, limit),
            [],
        )

    async def get_issue_counts(self, username: str) -> IssueCounts:
        """Get opened/closed issue counts, or zeros on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            "issue counts",
            lambda: self._activity().collect_issue_counts(username),
            IssueCounts(),
        )

    async def get_reviews_with_reactions(
        self,
        username: str,
        limit: int = 50,
    ) -> list[ReviewWithReactions]:
        """Get recent code reviews with reactions, or [] on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            "reviews",
            lambda: self._activity().collect_reviews_with_reactions(username, limit),
            [],
        )

    async def get_review_counts(self, username: str) -> ReviewCounts:
        """Get review totals and measured approval rate, or zeros on failure."""
        self._ensure_initialized()
        return await self._best_effort(
            "review counts",
            lambda: self._activity().collect_review_counts(username),
            ReviewCounts(),
        )

    async def get_oss_contributions(
        self,
        username: str,
        projects: Sequence[OSSProject | str],
    ) -> dict[str, int]:
        """Get merged PR counts per OSS project; failed projects count 0."""
        self._ensure_initialized()
        return await self._oss().collect(username, _as_projects(projects))

    async def collect(
        self,
        username: str | None = None,
        oss_projects: Sequence[OSSProject | str] = (),
    ) -> TransparencyData:
        """Collect the full aggregate.

        Args:
            username: Login to search activity for (defaults to the token owner)
            oss_projects: Projects to tally merged contributions for

        Returns:
            TransparencyData; ``degraded`` names sections that fell back to
            their defaults

        Raises:
            InvalidQueryError: If ``username`` cannot be used in a search
            ValueError: If an OSS project is not ``owner/repo``
            GitHubTransparencyError: If the profile or repository list fails
        """
        self._ensure_initialized()
        if username:
            SearchQuery().author(username)
        projects = _as_projects(oss_projects)

        profile = await self.get_profile()
        repos = await self.get_repos()
        username = username or profile.username
        logger.info("Collecting activity for %s", username)

        degraded: list[str] = []
        oss_failed: list[str] = []
        contributions = ContributionCollector(self._graphql_client)
        activity = self._activity()

        data = TransparencyData(
            profile=profile,
            repositories=repos,
            contributions=await self._best_effort(
                "contributions",
                lambda: contributions.collect_contributions(username),
                None,
                degraded,
            ),
            commit_timestamps=await self._best_effort(
                "commit timestamps",
                lambda: contributions.collect_commit_timestamps(username),
                [],
                degraded,
            ),
            pull_request_counts=await self._best_effort(
                "pull request counts",
                lambda: activity.collect_pull_request_counts(username),
                PullRequestCounts(),
                degraded,
            ),
            pull_requests=await self._best_effort(
                "pull requests",
                lambda: activity.collect_pull_requests_detailed(username),
                [],
                degraded,
            ),
            issues_created=await self._best_effort(
                "issues",
                lambda: activity.collect_issues_created(username),
                [],
                degraded,
            ),
            issue_counts=await self._best_effort(
                "issue counts",
                lambda: activity.collect_issue_counts(username),
                IssueCounts(),
                degraded,
            ),
            reviews=await self._best_effort(
                "reviews",
                lambda: activity.collect_reviews_with_reactions(username),
                [],
                degraded,
            ),
            oss_contributions=await self._oss().collect(username, projects, failed=oss_failed),
            collected_at=datetime.now(timezone.utc),
        )
        data.review_counts = await self._best_effort(
            "review counts",
            lambda: activity.collect_review_counts(username, reviews=data.reviews),
            ReviewCounts(),
            degraded,
        )
        degraded.extend(f"oss contributions {key}" for key in oss_failed)
        data.degraded = degraded

        logger.info("Collection complete for %s (%d degraded sections)", username, len(degraded))
        return data

    def _activity(self) -> ActivityCollector:
        return ActivityCollector(
            self._rest_client,
            self._graphql_client,
            concurrency=self._config.detail_concurrency,
        )

    def _commits(self) -> CommitCollector:
        return CommitCollector(self._rest_client, concurrency=self._config.detail_concurrency)

    def _oss(self) -> OSSContributionCollector:
        return OSSContributionCollector(
            self._rest_client,
            batch_size=self._config.oss_batch_size,
            page_cap=self._config.search_page_cap,
        )


def _as_projects(projects: Sequence[OSSProject | str]) -> list[OSSProject]:
    return [p if isinstance(p, OSSProject) else OSSProject.parse(p) for p in projects]
