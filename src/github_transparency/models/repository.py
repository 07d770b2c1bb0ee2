"""Repository data models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class RepositoryLicense(BaseModel):
    """License attached to a repository."""

    key: str
    name: str


class Repository(BaseModel):
    """GitHub repository data."""

    id: int = 0
    name: str
    full_name: str
    owner: str = ""
    private: bool = False
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    topics: list[str] = Field(default_factory=list)
    license: RepositoryLicense | None = None
    is_fork: bool = False
    has_wiki: bool = False
    created_at: datetime | None = None
    pushed_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        """Create from GitHub REST API response."""
        license_data = data.get("license")
        return cls(
            id=data.get("id") or 0,
            name=data.get("name", ""),
            full_name=data.get("full_name", ""),
            owner=(data.get("owner") or {}).get("login", ""),
            private=data.get("private", False),
            description=data.get("description"),
            language=data.get("language"),
            stargazers_count=data.get("stargazers_count", 0),
            forks_count=data.get("forks_count", 0),
            watchers_count=data.get("watchers_count", 0),
            topics=data.get("topics") or [],
            license=RepositoryLicense(
                key=license_data.get("key", ""), name=license_data.get("name", "")
            )
            if license_data
            else None,
            is_fork=data.get("fork", False),
            has_wiki=data.get("has_wiki", False),
            created_at=_parse_datetime(data.get("created_at")),
            pushed_at=_parse_datetime(data.get("pushed_at")),
        )


class RepositorySummary(BaseModel):
    """Summary of the user's repositories."""

    count: int = 0
    public_count: int = 0
    private_count: int = 0
    fork_count: int = 0
    total_stars: int = 0
    total_forks: int = 0
    languages: dict[str, int] = Field(default_factory=dict)  # language -> repo count
    topics: dict[str, int] = Field(default_factory=dict)  # topic -> repo count
    repos: list[Repository] = Field(default_factory=list)

    @classmethod
    def from_repos(cls, repos: list[Repository]) -> "RepositorySummary":
        """Create summary from list of repositories."""
        summary = cls(count=len(repos), repos=repos)

        for repo in repos:
            if repo.private:
                summary.private_count += 1
            else:
                summary.public_count += 1
            if repo.is_fork:
                summary.fork_count += 1
            summary.total_stars += repo.stargazers_count
            summary.total_forks += repo.forks_count

            if repo.language:
                summary.languages[repo.language] = summary.languages.get(repo.language, 0) + 1
            for topic in repo.topics:
                summary.topics[topic] = summary.topics.get(topic, 0) + 1

        return summary


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
