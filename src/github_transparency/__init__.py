"""GitHub Transparency - Aggregate a developer's GitHub activity.

This SDK collects, for the owner of a GitHub token:
- Profile and repositories (including private ones the token can see)
- Contribution calendar with current/longest streaks
- Commit timestamps and commits with diff stats
- Pull requests with merge times, issues and code reviews
- Merged contribution counts to chosen open-source projects

Example usage:
    ```python
    from github_transparency import GitHubTransparency

    async with GitHubTransparency(token="ghp_xxx") as client:
        data = await client.collect()
        print(f"Current streak: {data.contributions.streak.current}")
    ```
"""

from github_transparency.config import Config
from github_transparency.exceptions import (
    AuthenticationError,
    DecodeError,
    GitHubAPIError,
    GitHubForbiddenError,
    GitHubGraphQLError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubTransparencyError,
    InvalidQueryError,
    NetworkError,
)
from github_transparency.metrics import calculate_merge_time_minutes, calculate_streak
from github_transparency.models import (
    CommitDetail,
    CommitTimestamp,
    ContributionCalendar,
    ContributionDay,
    ContributionStats,
    ContributionWeek,
    IssueCounts,
    OSSProject,
    PullRequestCounts,
    PullRequestDetail,
    Repository,
    RepositorySummary,
    ReviewCounts,
    ReviewWithReactions,
    SearchIssue,
    StreakStats,
    TransparencyData,
    UserProfile,
)
from github_transparency.sdk import GitHubTransparency
from github_transparency.services.profile_collector import avatar_url, check_user_exists

__version__ = "0.1.0"

__all__ = [
    # Main SDK class
    "GitHubTransparency",
    "check_user_exists",
    "avatar_url",
    # Configuration
    "Config",
    # Exceptions
    "GitHubTransparencyError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubForbiddenError",
    "GitHubNotFoundError",
    "GitHubGraphQLError",
    "NetworkError",
    "DecodeError",
    "InvalidQueryError",
    "AuthenticationError",
    # Metrics
    "calculate_streak",
    "calculate_merge_time_minutes",
    # Models - User and repositories
    "UserProfile",
    "Repository",
    "RepositorySummary",
    # Models - Contribution
    "ContributionDay",
    "ContributionWeek",
    "ContributionCalendar",
    "ContributionStats",
    "StreakStats",
    "CommitTimestamp",
    # Models - Activity
    "CommitDetail",
    "PullRequestDetail",
    "SearchIssue",
    "ReviewWithReactions",
    "OSSProject",
    "PullRequestCounts",
    "IssueCounts",
    "ReviewCounts",
    "TransparencyData",
]
