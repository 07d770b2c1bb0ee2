"""User profile model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class UserProfile(BaseModel):
    """Profile of the authenticated GitHub user."""

    id: int = 0
    username: str
    name: str | None = None
    avatar_url: str = ""
    bio: str | None = None
    company: str | None = None
    location: str | None = None
    email: str | None = None
    blog: str | None = None
    twitter_username: str | None = None
    hireable: bool | None = None
    public_repos: int = 0
    public_gists: int = 0
    followers: int = 0
    following: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "UserProfile":
        """Create from GitHub REST API response."""
        return cls(
            id=data.get("id") or 0,
            username=data.get("login", ""),
            name=data.get("name"),
            avatar_url=data.get("avatar_url") or "",
            bio=data.get("bio"),
            company=data.get("company"),
            location=data.get("location"),
            email=data.get("email"),
            blog=data.get("blog") or None,
            twitter_username=data.get("twitter_username"),
            hireable=data.get("hireable"),
            public_repos=data.get("public_repos", 0),
            public_gists=data.get("public_gists", 0),
            followers=data.get("followers", 0),
            following=data.get("following", 0),
            created_at=_parse_datetime(data.get("created_at")),
        )


def _parse_datetime(value: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    if not value:
        return None
    try:
        # Handle ISO format with or without Z suffix
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
