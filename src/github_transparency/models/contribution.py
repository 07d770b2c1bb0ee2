"""Contribution calendar and statistics models."""

from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ContributionDay(BaseModel):
    """Single day in contribution calendar."""

    date: date
    count: int = Field(default=0, ge=0)

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ContributionDay":
        """Create from GraphQL response."""
        return cls(
            date=date.fromisoformat(data["date"]),
            count=data.get("contributionCount", 0),
        )


class ContributionWeek(BaseModel):
    """Week of contributions (7 days, fewer at the calendar edges)."""

    days: list[ContributionDay] = Field(default_factory=list)

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ContributionWeek":
        """Create from GraphQL response."""
        days = [
            ContributionDay.from_graphql(day)
            for day in data.get("contributionDays", [])
        ]
        return cls(days=days)


class ContributionCalendar(BaseModel):
    """Full contribution calendar (the green squares mosaic)."""

    total_contributions: int = 0
    weeks: list[ContributionWeek] = Field(default_factory=list)

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ContributionCalendar":
        """Create from GraphQL response."""
        weeks = [
            ContributionWeek.from_graphql(week)
            for week in data.get("weeks", [])
        ]
        return cls(
            total_contributions=data.get("totalContributions", 0),
            weeks=weeks,
        )

    @property
    def days(self) -> list[ContributionDay]:
        return [day for week in self.weeks for day in week.days]

    def get_busiest_day(self) -> ContributionDay | None:
        """Find the day with most contributions."""
        return max(self.days, key=lambda d: d.count, default=None)


class StreakStats(BaseModel):
    """Current and longest contribution streak, in days."""

    current: int = 0
    longest: int = 0


class ContributionStats(BaseModel):
    """Contribution statistics from GraphQL API."""

    total_commits: int = 0
    total_pull_requests: int = 0
    total_reviews: int = 0
    calendar: ContributionCalendar = Field(default_factory=ContributionCalendar)
    streak: StreakStats = Field(default_factory=StreakStats)

    @classmethod
    def from_graphql(cls, data: dict[str, Any]) -> "ContributionStats":
        """Create from GraphQL contributionsCollection response."""
        return cls(
            total_commits=data.get("totalCommitContributions", 0),
            total_pull_requests=data.get("totalPullRequestContributions", 0),
            total_reviews=data.get("totalPullRequestReviewContributions", 0),
            calendar=ContributionCalendar.from_graphql(
                data.get("contributionCalendar") or {}
            ),
        )

    @property
    def total_contributions(self) -> int:
        """Total contributions shown on the calendar."""
        return self.calendar.total_contributions


class CommitTimestamp(BaseModel):
    """UTC date and hour of one commit contribution."""

    date: str  # YYYY-MM-DD
    hour: int = Field(ge=0, le=23)

    @classmethod
    def from_occurred_at(cls, occurred_at: str) -> "CommitTimestamp":
        """Create from a GraphQL ``occurredAt`` ISO timestamp."""
        if occurred_at.endswith("Z"):
            occurred_at = occurred_at[:-1] + "+00:00"
        moment = datetime.fromisoformat(occurred_at)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)
        return cls(date=moment.date().isoformat(), hour=moment.hour)
