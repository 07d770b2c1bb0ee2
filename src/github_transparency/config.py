"""Configuration management for GitHub Transparency."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


@dataclass
class Config:
    """Application configuration."""

    github_token: str | None = field(default=None, repr=False)
    github_api_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"
    avatar_base_url: str = "https://github.com"

    # Pagination and search
    default_per_page: int = 100
    search_page_cap: int = 100  # Search API returns at most 100 items per page

    # Fan-out
    detail_concurrency: int = 10  # detail fetches in flight per wave
    oss_batch_size: int = 5  # repo: filters per combined search query

    # Timeouts
    request_timeout: float = 30.0
    default_retry_after: int = 60  # seconds, when Retry-After is absent

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        # override=False ensures environment variables take precedence over .env
        load_dotenv(override=False)

        # Support both GITHUB_TRANSPARENCY_TOKEN (preferred) and GITHUB_TOKEN (fallback)
        token = os.getenv("GITHUB_TRANSPARENCY_TOKEN") or os.getenv("GITHUB_TOKEN")

        return cls(
            github_token=token,
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            github_graphql_url=os.getenv(
                "GITHUB_GRAPHQL_URL", "https://api.github.com/graphql"
            ),
            avatar_base_url=os.getenv("GITHUB_AVATAR_URL", "https://github.com"),
        )

    @property
    def is_authenticated(self) -> bool:
        """Check if a GitHub token is configured."""
        return bool(self.github_token)
