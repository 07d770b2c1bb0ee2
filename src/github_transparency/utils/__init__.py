"""Utility modules for GitHub Transparency."""

from github_transparency.utils.batching import BoundedConcurrentBatcher, FetchOutcome, FetchTask
from github_transparency.utils.decoding import decoding
from github_transparency.utils.pagination import build_page_params, fetch_all
from github_transparency.utils.rate_limit import (
    classify_response,
    classify_status,
    format_time_remaining,
    parse_retry_after,
)
from github_transparency.utils.retry import retry_after_rate_limit

__all__ = [
    "BoundedConcurrentBatcher",
    "FetchTask",
    "FetchOutcome",
    "decoding",
    "fetch_all",
    "build_page_params",
    "classify_response",
    "classify_status",
    "format_time_remaining",
    "parse_retry_after",
    "retry_after_rate_limit",
]
