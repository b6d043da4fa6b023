"""Theme repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from jamvote.domain.model.theme import Theme
from jamvote.domain.value import ThemeId, UserId


class ThemeRepository(ABC):
    """Repository for Theme entity.

    Themes are written only by the import process and never modified.
    """

    @abstractmethod
    async def find_by_id(self, theme_id: ThemeId) -> Optional[Theme]:
        """Find a theme by ID.

        Args:
            theme_id: The theme's identifier

        Returns:
            The theme if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_content(self, content: str) -> Optional[Theme]:
        """Find a theme by its exact content.

        Args:
            content: Theme text

        Returns:
            The first matching theme, or None
        """
        pass

    @abstractmethod
    async def find_all(self) -> List[Theme]:
        """Return every theme in creation order (ascending id)."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all themes."""
        pass

    @abstractmethod
    async def pick_unvoted(self, user_id: UserId) -> Optional[Theme]:
        """Pick a random theme the user has not voted on.

        Args:
            user_id: The user's ID

        Returns:
            A theme without a vote from this user, or None if none remain
        """
        pass

    @abstractmethod
    async def create(self, content: str) -> Theme:
        """Insert a new theme.

        The id and creation timestamp are assigned by storage.

        Args:
            content: Theme text

        Returns:
            The persisted theme
        """
        pass
