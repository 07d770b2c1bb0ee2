"""Classified outcome of a single API call."""

from enum import Enum
from typing import Any

from pydantic import BaseModel

from github_transparency.exceptions import (
    GitHubAPIError,
    GitHubForbiddenError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)


class OutcomeKind(str, Enum):
    """Response classification tags."""

    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    FORBIDDEN = "forbidden"
    ERROR = "error"


class ResponseOutcome(BaseModel):
    """Tagged result of one HTTP call.

    Exactly one tag is set. ``payload`` is only meaningful for SUCCESS,
    ``retry_after`` only for RATE_LIMITED.
    """

    kind: OutcomeKind
    status_code: int
    payload: Any = None
    retry_after: int | None = None
    endpoint: str = ""

    @classmethod
    def success(cls, payload: Any, status_code: int = 200, endpoint: str = "") -> "ResponseOutcome":
        return cls(
            kind=OutcomeKind.SUCCESS,
            status_code=status_code,
            payload=payload,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(
        cls, retry_after: int, status_code: int = 403, endpoint: str = ""
    ) -> "ResponseOutcome":
        return cls(
            kind=OutcomeKind.RATE_LIMITED,
            status_code=status_code,
            retry_after=retry_after,
            endpoint=endpoint,
        )

    @classmethod
    def forbidden(cls, endpoint: str = "") -> "ResponseOutcome":
        return cls(kind=OutcomeKind.FORBIDDEN, status_code=403, endpoint=endpoint)

    @classmethod
    def error(cls, status_code: int, endpoint: str = "") -> "ResponseOutcome":
        return cls(kind=OutcomeKind.ERROR, status_code=status_code, endpoint=endpoint)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def unwrap(self) -> Any:
        """Return the payload, or raise the exception matching the tag."""
        if self.kind is OutcomeKind.SUCCESS:
            return self.payload

        if self.kind is OutcomeKind.RATE_LIMITED:
            raise GitHubRateLimitError(
                f"GitHub API rate limited. Retry after {self.retry_after} seconds.",
                status_code=self.status_code,
                retry_after=self.retry_after or 0,
            )
        if self.kind is OutcomeKind.FORBIDDEN:
            raise GitHubForbiddenError(f"GitHub API forbidden: {self.endpoint}")
        if self.status_code == 404:
            raise GitHubNotFoundError(f"Resource not found: {self.endpoint}")
        raise GitHubAPIError(
            f"GitHub API error: {self.status_code}",
            status_code=self.status_code,
        )
