"""Test configuration and fixtures."""

import logfire

from jamvote.domain.model import Theme
from jamvote.domain.repository import ThemeRepository

# Keep spans local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)

AUTH_A = {"Authorization": "Bearer test-token:user-a"}
AUTH_B = {"Authorization": "Bearer test-token:user-b"}


async def seed_themes(repo: ThemeRepository, *contents: str) -> list[Theme]:
    """Create themes in order and return them."""
    return [await repo.create(content) for content in contents]
