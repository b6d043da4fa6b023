"""In-memory theme repository for testing."""

import asyncio
import random
from typing import List, Optional

from jamvote.domain.model import Theme
from jamvote.domain.repository import ThemeRepository
from jamvote.domain.value import ThemeId, UserId

from .store import InMemoryStore


class InMemoryThemeRepository(ThemeRepository):
    """In-memory implementation of ThemeRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, theme_id: ThemeId) -> Optional[Theme]:
        """Find a theme by ID."""
        # Suspend like a real driver so concurrent callers interleave
        await asyncio.sleep(0)
        return self._store.themes.get(theme_id)

    async def find_by_content(self, content: str) -> Optional[Theme]:
        """Find a theme by its exact content."""
        for theme in await self.find_all():
            if theme.content == content:
                return theme
        return None

    async def find_all(self) -> List[Theme]:
        """Return every theme in creation order."""
        return sorted(self._store.themes.values(), key=lambda t: t.id)

    async def count(self) -> int:
        """Count all themes."""
        return len(self._store.themes)

    async def pick_unvoted(self, user_id: UserId) -> Optional[Theme]:
        """Pick a random theme the user has not voted on."""
        candidates = [
            theme
            for theme in self._store.themes.values()
            if (user_id, theme.id) not in self._store.vote_index
        ]
        return random.choice(candidates) if candidates else None

    async def create(self, content: str) -> Theme:
        """Insert a new theme."""
        theme = Theme(
            id=ThemeId(self._store.next_theme_id()),
            content=content,
            created_at=self._store.now(),
        )
        self._store.themes[theme.id] = theme
        return theme
