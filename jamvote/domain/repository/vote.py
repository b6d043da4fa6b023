"""Vote repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from jamvote.domain.model.theme import ThemeTally
from jamvote.domain.model.vote import Vote
from jamvote.domain.value import ThemeId, UserId, VoteType


class VoteRepository(ABC):
    """Repository for Vote entity.

    Defines the contract for vote persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_user_and_theme(
        self, user_id: UserId, theme_id: ThemeId
    ) -> Optional[Vote]:
        """Find a user's vote on a theme.

        Args:
            user_id: The user's ID
            theme_id: The theme's ID

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> List[Vote]:
        """Find all votes by a user.

        Args:
            user_id: The user's ID

        Returns:
            List of votes by the user
        """
        pass

    @abstractmethod
    async def count_by_user(self, user_id: UserId) -> int:
        """Count the themes a user has voted on.

        Args:
            user_id: The user's ID

        Returns:
            Number of votes
        """
        pass

    @abstractmethod
    async def create(
        self, user_id: UserId, theme_id: ThemeId, vote_type: VoteType
    ) -> Vote:
        """Insert a vote as a single row.

        Implementations must not look for an existing vote first: the
        (user_id, theme_id) uniqueness is enforced by storage and surfaces
        as an IntegrityError.

        Args:
            user_id: The voting user
            theme_id: The theme voted on
            vote_type: yes, no or skip

        Returns:
            The persisted vote with its assigned id and timestamp

        Raises:
            IntegrityError: If the vote already exists or the theme is unknown
        """
        pass

    @abstractmethod
    async def tally_by_theme(self) -> List[ThemeTally]:
        """Count votes of each kind for every theme.

        Themes without votes are included with zero counts.

        Returns:
            Tallies ordered by yes votes (descending), then theme id
        """
        pass
