"""Derived contribution metrics.

Pure functions over data that has already been fetched. Nothing here performs
I/O.
"""

import math
from collections.abc import Iterable
from datetime import datetime, timezone

from github_transparency.models.activity import ReviewWithReactions, repository_from_url
from github_transparency.models.contribution import (
    CommitTimestamp,
    ContributionWeek,
    StreakStats,
)


def calculate_streak(weeks: Iterable[ContributionWeek]) -> StreakStats:
    """Compute the current and longest streak from a contribution calendar.

    Days are re-sorted newest first, so input order does not matter. The scan
    walks back from the most recent day; leading zero days are skipped, and
    the first zero day after an active run ends the scan. ``longest`` is
    therefore the longest run seen up to that point, which is the most recent
    run.

    Args:
        weeks: Contribution weeks in any order

    Returns:
        StreakStats with ``current`` and ``longest`` in days
    """
    days = sorted(
        (day for week in weeks for day in week.days),
        key=lambda d: d.date,
        reverse=True,
    )

    current = 0
    longest = 0
    streak = 0
    found_active_streak = False

    for day in days:
        if day.count > 0:
            streak += 1
            found_active_streak = True
            current = streak
            longest = max(longest, streak)
        else:
            if found_active_streak:
                break
            streak = 0

    return StreakStats(current=current, longest=longest)


def calculate_merge_time_minutes(
    created_at: datetime | str | None,
    merged_at: datetime | str | None,
) -> int | None:
    """Minutes from creation to merge, or None when not merged.

    Rounds to the nearest minute with halves rounded up, so 89.5 minutes
    becomes 90 and -0.5 becomes 0.
    """
    if not merged_at or not created_at:
        return None

    created = _to_datetime(created_at)
    merged = _to_datetime(merged_at)
    minutes = (merged - created).total_seconds() / 60
    return math.floor(minutes + 0.5)


def repository_key(repository_url: str) -> str | None:
    """Lowercase ``owner/repo`` key for an API ``repository_url``."""
    parsed = repository_from_url(repository_url)
    if parsed is None:
        return None
    owner, repo = parsed
    return f"{owner}/{repo}".lower()


def calculate_review_approval(
    reviews: Iterable[ReviewWithReactions],
) -> tuple[int, int, float | None]:
    """Count approvals among reviews with a known state.

    Pending reviews are excluded since they have not been submitted.

    Returns:
        (approved, sampled, approval_rate); the rate is None with no sample
    """
    submitted = [r for r in reviews if r.state and r.state != "PENDING"]
    approved = sum(1 for r in submitted if r.state == "APPROVED")
    if not submitted:
        return approved, 0, None
    return approved, len(submitted), round(approved / len(submitted), 4)


def group_commit_hours(timestamps: Iterable[CommitTimestamp]) -> dict[int, int]:
    """Histogram of commits per UTC hour (0-23, every hour present)."""
    hours = {hour: 0 for hour in range(24)}
    for ts in timestamps:
        hours[ts.hour] += 1
    return hours


def _to_datetime(value: datetime | str) -> datetime:
    if isinstance(value, str):
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
