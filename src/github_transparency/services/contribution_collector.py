"""Contribution calendar collector service."""

import logging
from datetime import datetime, timedelta, timezone

from github_transparency.metrics import calculate_streak
from github_transparency.models.contribution import CommitTimestamp, ContributionStats
from github_transparency.services.github_graphql_client import GitHubGraphQLClient
from github_transparency.utils.decoding import decoding

logger = logging.getLogger(__name__)


class ContributionCollector:
    """Collects contribution calendar and commit timing via GraphQL."""

    def __init__(self, graphql_client: GitHubGraphQLClient):
        self.graphql_client = graphql_client

    async def collect_contributions(self, username: str) -> ContributionStats | None:
        """Collect contribution statistics for a user.

        Args:
            username: GitHub username

        Returns:
            ContributionStats with calendar, totals and streaks, or None when
            the user does not exist
        """
        logger.debug("Fetching contribution calendar for %s", username)

        data = await self.graphql_client.get_contributions(username)
        if data is None:
            logger.debug("No contribution data for %s", username)
            return None

        with decoding("contribution calendar"):
            stats = ContributionStats.from_graphql(data)
        stats.streak = calculate_streak(stats.calendar.weeks)

        logger.debug(
            "Found %d contributions (current streak %d)",
            stats.total_contributions,
            stats.streak.current,
        )

        return stats

    async def collect_commit_timestamps(
        self,
        username: str,
        since: datetime | None = None,
    ) -> list[CommitTimestamp]:
        """Collect UTC date/hour for commit contributions.

        Args:
            username: GitHub username
            since: Start of the window (defaults to one year ago)

        Returns:
            One CommitTimestamp per commit contribution, up to 100 per repo
        """
        if since is None:
            since = datetime.now(timezone.utc) - timedelta(days=365)
        elif since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)

        by_repo = await self.graphql_client.get_commit_contributions(
            username, since.isoformat()
        )

        timestamps = []
        with decoding("commit contributions"):
            for repo in by_repo:
                nodes = (repo.get("contributions") or {}).get("nodes") or []
                for node in nodes:
                    occurred_at = node.get("occurredAt")
                    if occurred_at:
                        timestamps.append(CommitTimestamp.from_occurred_at(occurred_at))

        logger.debug("Found %d commit timestamps across %d repos", len(timestamps), len(by_repo))
        return timestamps
