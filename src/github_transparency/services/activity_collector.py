"""Pull request, issue and review collector service."""

import logging

from github_transparency.metrics import calculate_merge_time_minutes, calculate_review_approval
from github_transparency.models.activity import (
    IssueCounts,
    PullRequestCounts,
    PullRequestDetail,
    ReviewCounts,
    ReviewWithReactions,
    SearchIssue,
    repository_from_url,
)
from github_transparency.services.github_graphql_client import GitHubGraphQLClient
from github_transparency.services.github_rest_client import GitHubRestClient
from github_transparency.services.queries import SearchQuery
from github_transparency.utils.batching import BoundedConcurrentBatcher, FetchTask
from github_transparency.utils.decoding import decoding

logger = logging.getLogger(__name__)


class ActivityCollector:
    """Collects PRs, issues and reviews from the Search and GraphQL APIs.

    Methods raise on failure of their primary request. Detail fetches for
    individual PRs are best effort.
    """

    def __init__(
        self,
        rest_client: GitHubRestClient,
        graphql_client: GitHubGraphQLClient,
        concurrency: int = 10,
    ):
        self.rest_client = rest_client
        self.graphql_client = graphql_client
        self.batcher: BoundedConcurrentBatcher[PullRequestDetail] = BoundedConcurrentBatcher(
            self._fetch_pull_request, concurrency=concurrency
        )

    async def _fetch_pull_request(self, task: FetchTask) -> PullRequestDetail:
        data = await self.rest_client.get(task.endpoint)
        with decoding("pull request"):
            pr = PullRequestDetail.from_api(data)
        pr.merge_time_minutes = calculate_merge_time_minutes(pr.created_at, pr.merged_at)
        return pr

    async def collect_pull_request_counts(self, username: str) -> PullRequestCounts:
        """Count all and merged PRs authored by ``username``."""
        total = await self.rest_client.search_count(
            str(SearchQuery().author(username).pull_requests())
        )
        merged = await self.rest_client.search_count(
            str(SearchQuery().author(username).pull_requests().merged())
        )
        return PullRequestCounts(total=total, merged=merged)

    async def collect_pull_requests_detailed(
        self,
        username: str,
        limit: int = 50,
    ) -> list[PullRequestDetail]:
        """Collect the most recent PRs by ``username`` with full details.

        Args:
            username: GitHub username
            limit: Maximum PRs to return (one search page, so at most 100)

        Returns:
            PullRequestDetail list with merge times; PRs whose detail request
            failed are omitted
        """
        logger.debug("Searching for pull requests by %s", username)

        result = await self.rest_client.search_issues(
            str(SearchQuery().author(username).pull_requests()),
            per_page=min(limit, 100),
            sort="created",
            order="desc",
        )

        tasks = []
        with decoding("pull request search"):
            for item in (result.get("items") or [])[:limit]:
                parsed = repository_from_url(item.get("repository_url", ""))
                if parsed is None:
                    continue
                owner, repo = parsed
                number = item.get("number")
                tasks.append(
                    FetchTask(
                        key=f"{owner}/{repo}#{number}",
                        endpoint=f"/repos/{owner}/{repo}/pulls/{number}",
                    )
                )

        outcomes = await self.batcher.run(tasks)
        prs = BoundedConcurrentBatcher.successful(outcomes)

        logger.debug("Fetched details for %d of %d pull requests", len(prs), len(tasks))
        return prs

    async def collect_issues_created(
        self,
        username: str,
        limit: int = 100,
    ) -> list[SearchIssue]:
        """Collect the most recent issues (not PRs) authored by ``username``."""
        logger.debug("Searching for issues by %s", username)

        result = await self.rest_client.search_issues(
            str(SearchQuery().author(username).issues()),
            per_page=min(limit, 100),
            sort="created",
            order="desc",
        )
        with decoding("issue search"):
            issues = [SearchIssue.from_api(i) for i in (result.get("items") or [])[:limit]]

        logger.debug("Found %d issues", len(issues))
        return issues

    async def collect_issue_counts(self, username: str) -> IssueCounts:
        """Count issues opened and closed among those authored by ``username``."""
        opened = await self.rest_client.search_count(
            str(SearchQuery().author(username).issues())
        )
        closed = await self.rest_client.search_count(
            str(SearchQuery().author(username).issues().closed())
        )
        return IssueCounts(opened=opened, closed=closed)

    async def collect_reviews_with_reactions(
        self,
        username: str,
        limit: int = 50,
    ) -> list[ReviewWithReactions]:
        """Collect recent code reviews by ``username`` with reaction counts."""
        logger.debug("Fetching reviews for %s", username)

        nodes = await self.graphql_client.get_review_contributions(username, first=limit)
        with decoding("review contributions"):
            reviews = [
                ReviewWithReactions.from_graphql(node["pullRequestReview"])
                for node in nodes
                if node.get("pullRequestReview")
            ]

        logger.debug("Found %d reviews", len(reviews))
        return reviews

    async def collect_review_counts(
        self,
        username: str,
        reviews: list[ReviewWithReactions] | None = None,
    ) -> ReviewCounts:
        """Count PRs reviewed and approvals among recent reviews.

        Args:
            username: GitHub username
            reviews: Already-fetched reviews to measure approvals on; fetched
                when omitted

        Returns:
            ReviewCounts where the approval rate is measured on the sample
        """
        total = await self.rest_client.search_count(
            str(SearchQuery().reviewed_by(username).pull_requests())
        )
        if reviews is None:
            reviews = await self.collect_reviews_with_reactions(username, limit=100)

        approved, sampled, rate = calculate_review_approval(reviews)
        return ReviewCounts(total=total, approved=approved, sampled=sampled, approval_rate=rate)
