"""JSON output writer for collected transparency data."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from github_transparency.metrics import group_commit_hours
from github_transparency.models.activity import TransparencyData


def build_report(data: TransparencyData) -> dict[str, Any]:
    """Build a JSON-ready report from collected data.

    The raw collected sections are kept as-is; a ``summary`` section adds the
    derived numbers consumers usually want first.

    Args:
        data: Collected data for one user

    Returns:
        Dictionary ready for JSON serialization
    """
    report = data.model_dump(mode="json")

    contributions = data.contributions
    busiest = contributions.calendar.get_busiest_day() if contributions else None
    merge_times = [
        pr.merge_time_minutes for pr in data.pull_requests if pr.merge_time_minutes is not None
    ]

    report["summary"] = {
        "username": data.profile.username,
        "repositories": data.repositories.count,
        "total_stars": data.repositories.total_stars,
        "total_contributions": contributions.total_contributions if contributions else 0,
        "current_streak": contributions.streak.current if contributions else 0,
        "longest_streak": contributions.streak.longest if contributions else 0,
        "busiest_day": busiest.date.isoformat() if busiest else None,
        "busiest_day_count": busiest.count if busiest else 0,
        "pull_requests": data.pull_request_counts.total,
        "pull_requests_merged": data.pull_request_counts.merged,
        "median_merge_time_minutes": _median(merge_times),
        "issues_opened": data.issue_counts.opened,
        "issues_closed": data.issue_counts.closed,
        "reviews": data.review_counts.total,
        "review_approval_rate": data.review_counts.approval_rate,
        "commit_hours": group_commit_hours(data.commit_timestamps),
        "oss_contributions": sum(data.oss_contributions.values()),
        "degraded": data.degraded,
    }
    return report


def write_json_report(
    report: dict[str, Any],
    output_path: Optional[Path] = None,
    username: Optional[str] = None,
) -> Path:
    """Write report to JSON file.

    Args:
        report: Report dictionary
        output_path: Output file path (optional)
        username: Username for default filename

    Returns:
        Path to written file
    """
    if output_path is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        username = username or report.get("summary", {}).get("username", "unknown")
        output_path = Path("output") / f"{username}_transparency_{timestamp}.json"

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False, default=str)

    return output_path


def _median(values: list[int]) -> float | None:
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2
