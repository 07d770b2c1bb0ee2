"""Commit, pull request, issue and review models."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from github_transparency.models.contribution import CommitTimestamp, ContributionStats
from github_transparency.models.repository import RepositorySummary
from github_transparency.models.user import UserProfile

_REPO_URL_PATTERN = re.compile(r"repos/([^/]+)/([^/]+)$")


def repository_from_url(repository_url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from an API ``repository_url``."""
    match = _REPO_URL_PATTERN.search(repository_url or "")
    if not match:
        return None
    return match.group(1), match.group(2)


class CommitDetail(BaseModel):
    """Single commit with diff stats."""

    sha: str
    message: str = ""
    date: datetime | None = None
    verified: bool = False
    additions: int = 0
    deletions: int = 0
    total: int = 0
    files: list[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommitDetail":
        """Create from GitHub single-commit API response."""
        commit_data = data.get("commit") or {}
        stats = data.get("stats") or {}
        return cls(
            sha=data.get("sha", ""),
            message=commit_data.get("message", ""),
            date=_parse_datetime((commit_data.get("author") or {}).get("date")),
            verified=(commit_data.get("verification") or {}).get("verified", False),
            additions=stats.get("additions", 0),
            deletions=stats.get("deletions", 0),
            total=stats.get("total", 0),
            files=[f.get("filename", "") for f in data.get("files") or []],
        )


class PullRequestDetail(BaseModel):
    """Pull request data from the single-PR endpoint."""

    number: int
    title: str = ""
    state: str = ""  # open, closed
    created_at: datetime | None = None
    merged_at: datetime | None = None
    closed_at: datetime | None = None
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    comments: int = 0
    review_comments: int = 0
    commits: int = 0
    head_repo: str | None = None  # None when the fork was deleted
    base_repo: str = ""
    merge_time_minutes: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PullRequestDetail":
        """Create from GitHub Pull Requests API response."""
        head_repo = (data.get("head") or {}).get("repo") or {}
        base_repo = (data.get("base") or {}).get("repo") or {}
        return cls(
            number=data.get("number", 0),
            title=data.get("title", ""),
            state=data.get("state", ""),
            created_at=_parse_datetime(data.get("created_at")),
            merged_at=_parse_datetime(data.get("merged_at")),
            closed_at=_parse_datetime(data.get("closed_at")),
            additions=data.get("additions", 0),
            deletions=data.get("deletions", 0),
            changed_files=data.get("changed_files", 0),
            comments=data.get("comments", 0),
            review_comments=data.get("review_comments", 0),
            commits=data.get("commits", 0),
            head_repo=head_repo.get("full_name"),
            base_repo=base_repo.get("full_name", ""),
        )

    @property
    def is_merged(self) -> bool:
        return self.merged_at is not None


class SearchIssue(BaseModel):
    """Issue or pull request as returned by the Search API."""

    number: int
    title: str = ""
    state: str = ""
    author: str = ""
    comments: int = 0
    reactions: int = 0
    created_at: datetime | None = None
    closed_at: datetime | None = None
    merged_at: datetime | None = None  # pull requests only
    repository_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SearchIssue":
        """Create from a Search API item."""
        return cls(
            number=data.get("number", 0),
            title=data.get("title", ""),
            state=data.get("state", ""),
            author=(data.get("user") or {}).get("login", ""),
            comments=data.get("comments", 0),
            reactions=(data.get("reactions") or {}).get("total_count", 0),
            created_at=_parse_datetime(data.get("created_at")),
            closed_at=_parse_datetime(data.get("closed_at")),
            merged_at=_parse_datetime((data.get("pull_request") or {}).get("merged_at")),
            repository_url=data.get("repository_url", ""),
        )

    @property
    def repo(self) -> str:
        parsed = repository_from_url(self.repository_url)
        return f"{parsed[0]}/{parsed[1]}" if parsed else ""


class ReviewWithReactions(BaseModel):
    """Pull request review with reaction counts, from GraphQL."""

    id: str
    state: str  # APPROVED, CHANGES_REQUESTED, COMMENTED, DISMISSED, PENDING
    body: str | None = None
    submitted_at: datetime | None = None
    reactions: dict[str, int] = Field(default_factory=dict)  # content -> count
    comment_count: int = 0
    pull_request_number: int = 0
    repository: str = ""

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ReviewWithReactions":
        """Create from a ``pullRequestReview`` node."""
        pull_request = data.get("pullRequest") or {}
        return cls(
            id=data.get("id", ""),
            state=data.get("state", ""),
            body=data.get("body"),
            submitted_at=_parse_datetime(data.get("submittedAt")),
            reactions={
                group.get("content", ""): (group.get("users") or {}).get("totalCount", 0)
                for group in data.get("reactionGroups") or []
            },
            comment_count=(data.get("comments") or {}).get("totalCount", 0),
            pull_request_number=pull_request.get("number", 0),
            repository=(pull_request.get("repository") or {}).get("nameWithOwner", ""),
        )

    @property
    def total_reactions(self) -> int:
        return sum(self.reactions.values())


class OSSProject(BaseModel):
    """An open-source repository to tally merged contributions for."""

    owner: str
    repo: str

    @classmethod
    def parse(cls, full_name: str) -> "OSSProject":
        """Create from ``owner/repo``."""
        owner, sep, repo = full_name.strip().partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError(f"Expected owner/repo, got {full_name!r}")
        return cls(owner=owner, repo=repo)

    @property
    def key(self) -> str:
        """Lowercase ``owner/repo``."""
        return f"{self.owner}/{self.repo}".lower()


class PullRequestCounts(BaseModel):
    """Authored pull request totals."""

    total: int = 0
    merged: int = 0


class IssueCounts(BaseModel):
    """Authored issue totals."""

    opened: int = 0
    closed: int = 0


class ReviewCounts(BaseModel):
    """Review totals.

    ``total`` counts PRs reviewed (Search API). ``approved`` and
    ``approval_rate`` come from the ``sampled`` most recent reviews whose state
    is known; they are not extrapolated to ``total``.
    """

    total: int = 0
    approved: int = 0
    sampled: int = 0
    approval_rate: float | None = None


class TransparencyData(BaseModel):
    """Everything collected for one user in one session."""

    profile: UserProfile
    repositories: RepositorySummary
    contributions: ContributionStats | None = None
    commit_timestamps: list[CommitTimestamp] = Field(default_factory=list)
    pull_request_counts: PullRequestCounts = Field(default_factory=PullRequestCounts)
    pull_requests: list[PullRequestDetail] = Field(default_factory=list)
    issues_created: list[SearchIssue] = Field(default_factory=list)
    issue_counts: IssueCounts = Field(default_factory=IssueCounts)
    reviews: list[ReviewWithReactions] = Field(default_factory=list)
    review_counts: ReviewCounts = Field(default_factory=ReviewCounts)
    oss_contributions: dict[str, int] = Field(default_factory=dict)
    degraded: list[str] = Field(default_factory=list)  # sections defaulted after a failure
    collected_at: datetime


def _parse_datetime(value: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not value:
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
