"""Rate limit classification for GitHub API responses."""

from collections.abc import Mapping

import httpx

from github_transparency.models.outcome import ResponseOutcome

DEFAULT_RETRY_AFTER = 60


def format_time_remaining(seconds: float) -> str:
    """Format seconds into a human-friendly string."""
    if seconds <= 0:
        return "now"

    seconds = int(seconds)

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    elif seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        if secs > 0:
            return f"{minutes} min {secs} sec"
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        if minutes > 0:
            return f"{hours} hr {minutes} min"
        return f"{hours} hour{'s' if hours != 1 else ''}"


def parse_retry_after(headers: Mapping[str, str], default: int = DEFAULT_RETRY_AFTER) -> int:
    """Read the Retry-After header as whole seconds."""
    value = headers.get("retry-after")
    if value is None:
        return default
    try:
        return max(0, int(float(value)))
    except ValueError:
        return default


def is_quota_exhausted(headers: Mapping[str, str]) -> bool:
    """True when X-RateLimit-Remaining is exactly "0"."""
    return headers.get("x-ratelimit-remaining") == "0"


def classify_status(
    status_code: int,
    headers: Mapping[str, str],
    endpoint: str = "",
    default_retry_after: int = DEFAULT_RETRY_AFTER,
) -> ResponseOutcome | None:
    """Classify a non-2xx status, or return None for success.

    Priority: exhausted quota on 429/403, then 403 as forbidden, then any other
    error status.
    """
    if 200 <= status_code < 300:
        return None

    if status_code in (429, 403) and is_quota_exhausted(headers):
        return ResponseOutcome.rate_limited(
            parse_retry_after(headers, default_retry_after),
            status_code=status_code,
            endpoint=endpoint,
        )
    if status_code == 403:
        return ResponseOutcome.forbidden(endpoint=endpoint)

    return ResponseOutcome.error(status_code, endpoint=endpoint)


def classify_response(
    response: httpx.Response,
    endpoint: str = "",
    default_retry_after: int = DEFAULT_RETRY_AFTER,
) -> ResponseOutcome:
    """Classify an httpx response into a ResponseOutcome.

    Raises:
        ValueError: if a 2xx body is not valid JSON (callers wrap it).
    """
    failure = classify_status(
        response.status_code, response.headers, endpoint, default_retry_after
    )
    if failure is not None:
        return failure

    payload = response.json() if response.content else None
    return ResponseOutcome.success(
        payload, status_code=response.status_code, endpoint=endpoint
    )
