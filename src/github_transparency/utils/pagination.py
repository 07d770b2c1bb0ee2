"""Pagination utilities for GitHub API."""

import logging
from typing import Any, Optional, Protocol

from github_transparency.exceptions import DecodeError
from github_transparency.models.outcome import ResponseOutcome

logger = logging.getLogger(__name__)


class PageSource(Protocol):
    async def call(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        include_topics: bool = False,
    ) -> ResponseOutcome: ...


def build_page_params(
    params: Optional[dict[str, Any]],
    page: int,
    per_page: int = 100,
) -> dict[str, Any]:
    """Merge ``page`` and ``per_page`` into a copy of ``params``.

    Args:
        params: Existing query parameters (not modified)
        page: Page number (1-indexed)
        per_page: Items per page (max 100 for most GitHub APIs)
    """
    merged = dict(params or {})
    merged["per_page"] = per_page
    merged["page"] = page
    return merged


async def fetch_all(
    client: PageSource,
    endpoint: str,
    per_page: int = 100,
    params: Optional[dict[str, Any]] = None,
    include_topics: bool = False,
    max_items: Optional[int] = None,
) -> list[dict[str, Any]]:
    """Fetch every page of a page-numbered list endpoint.

    Stops when a page comes back empty or shorter than ``per_page``. There is
    no page cap unless ``max_items`` is given, so an unbounded remote list is
    fetched in full.

    Any failed page raises and the pages already fetched are discarded. A
    page that is not a JSON array raises DecodeError.

    Args:
        client: Object with an async ``call`` returning ResponseOutcome
        endpoint: API endpoint without pagination parameters
        per_page: Items per page
        params: Extra query parameters
        include_topics: Passed through to the client
        max_items: Stop once at least this many items are collected

    Returns:
        List of all items across all pages (truncated to ``max_items``)
    """
    if per_page <= 0:
        raise ValueError("per_page must be positive")

    all_items: list[dict[str, Any]] = []
    page = 1

    while True:
        outcome = await client.call(
            endpoint,
            params=build_page_params(params, page, per_page),
            include_topics=include_topics,
        )
        items = outcome.unwrap()
        if items is None:
            items = []
        elif not isinstance(items, list):
            raise DecodeError(
                f"Expected a list from {endpoint}, got {type(items).__name__}"
            )

        all_items.extend(items)

        if max_items is not None and len(all_items) >= max_items:
            return all_items[:max_items]
        if len(items) < per_page:
            break
        page += 1

    logger.debug("Fetched %d items from %s over %d page(s)", len(all_items), endpoint, page)
    return all_items
