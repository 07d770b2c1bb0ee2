"""Data models for GitHub Transparency."""

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
from github_transparency.models.contribution import (
    CommitTimestamp,
    ContributionCalendar,
    ContributionDay,
    ContributionStats,
    ContributionWeek,
    StreakStats,
)
from github_transparency.models.outcome import OutcomeKind, ResponseOutcome
from github_transparency.models.repository import Repository, RepositorySummary
from github_transparency.models.user import UserProfile

__all__ = [
    "UserProfile",
    "Repository",
    "RepositorySummary",
    "ContributionDay",
    "ContributionWeek",
    "ContributionCalendar",
    "ContributionStats",
    "StreakStats",
    "CommitTimestamp",
    "CommitDetail",
    "PullRequestDetail",
    "SearchIssue",
    "ReviewWithReactions",
    "OSSProject",
    "PullRequestCounts",
    "IssueCounts",
    "ReviewCounts",
    "TransparencyData",
    "OutcomeKind",
    "ResponseOutcome",
]
