"""Exceptions for GitHub Transparency.

Exception Hierarchy:
    GitHubTransparencyError (base)
    ├── GitHubAPIError (HTTP API errors with status codes)
    │   ├── GitHubRateLimitError (429/403 with exhausted quota)
    │   ├── GitHubForbiddenError (403 with quota remaining)
    │   └── GitHubNotFoundError (404 not found)
    ├── GitHubGraphQLError (GraphQL errors array in a 200 response)
    ├── NetworkError (transport-level failure, no HTTP response)
    ├── DecodeError (response body is not the expected JSON or shape)
    ├── InvalidQueryError (search qualifier value rejected; also a ValueError)
    └── AuthenticationError (token missing or invalid)

Usage:
    - GitHubRateLimitError carries the Retry-After hint in ``retry_after``.
      Nothing in the library sleeps on it; see ``utils.retry`` for an opt-in
      wrapper.
    - GitHubForbiddenError is never a quota problem and must not be retried.
"""

__all__ = [
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
]


class GitHubTransparencyError(Exception):
    """Base exception for all GitHub Transparency errors."""

    pass


class GitHubAPIError(GitHubTransparencyError):
    """Base exception for GitHub API errors (HTTP responses with error status codes)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub reports the request quota as exhausted."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        response_body: dict | None = None,
        retry_after: int = 60,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.retry_after = retry_after


class GitHubForbiddenError(GitHubAPIError):
    """Raised on HTTP 403 when quota remains (access denied)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        response_body: dict | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)


class GitHubNotFoundError(GitHubAPIError):
    """Raised when a GitHub resource is not found (HTTP 404)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 404,
        response_body: dict | None = None,
    ):
        super().__init__(message, status_code=status_code, response_body=response_body)


class GitHubGraphQLError(GitHubTransparencyError):
    """Exception for GraphQL API errors."""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class NetworkError(GitHubTransparencyError):
    """Raised when the request never produced an HTTP response."""

    pass


class DecodeError(GitHubTransparencyError):
    """Raised when a response body is not JSON or lacks an expected field."""

    pass


class InvalidQueryError(GitHubTransparencyError, ValueError):
    """Raised when a value cannot be used as a search qualifier."""

    pass


class AuthenticationError(GitHubTransparencyError):
    """Raised when authentication fails or token is missing."""

    pass
