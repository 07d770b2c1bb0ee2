"""Profile collector service and the public user existence check."""

import logging

import httpx

from github_transparency.models.user import UserProfile
from github_transparency.services.github_rest_client import GitHubRestClient
from github_transparency.utils.decoding import decoding

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_BASE_URL = "https://github.com"


class ProfileCollector:
    """Collects the authenticated user's profile."""

    def __init__(self, rest_client: GitHubRestClient):
        self.rest_client = rest_client

    async def collect_profile(self) -> UserProfile:
        """Collect the token owner's profile.

        Errors propagate: the profile is required for a usable report.
        """
        logger.debug("Fetching authenticated user profile")

        data = await self.rest_client.get_authenticated_user()
        with decoding("user"):
            return UserProfile.from_api(data)


def avatar_url(username: str, base_url: str = DEFAULT_AVATAR_BASE_URL) -> str:
    """Public avatar URL for a username; works without authentication."""
    return f"{base_url.rstrip('/')}/{username}.png"


async def check_user_exists(
    username: str,
    base_url: str = DEFAULT_AVATAR_BASE_URL,
    timeout: float = 10.0,
) -> bool:
    """Best-effort check that a GitHub user exists, via their public avatar.

    Any successful response means the user exists. Any failure, including
    network errors, is reported as "does not exist". This is not
    authoritative.
    """
    if not username or "/" in username:
        return False

    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.head(avatar_url(username, base_url))
    except httpx.HTTPError as e:
        logger.debug("Avatar check for %s failed: %s", username, e)
        return False

    return response.is_success
