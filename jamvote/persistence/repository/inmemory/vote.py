"""In-memory vote repository for testing."""

import asyncio
from collections import Counter
from typing import Optional

from jamvote.domain.model import ThemeTally, Vote
from jamvote.domain.repository import VoteRepository
from jamvote.domain.service.base import FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION
from jamvote.domain.value import ThemeId, UserId, VoteId, VoteType

from .store import InMemoryStore, integrity_error


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_user_and_theme(
        self, user_id: UserId, theme_id: ThemeId
    ) -> Optional[Vote]:
        """Find a user's vote on a theme."""
        return self._store.vote_index.get((user_id, theme_id))

    async def find_by_user(self, user_id: UserId) -> list[Vote]:
        """Find all votes by a user."""
        return [v for v in self._store.votes if v.user_id == user_id]

    async def count_by_user(self, user_id: UserId) -> int:
        """Count the themes a user has voted on."""
        return len(await self.find_by_user(user_id))

    async def create(
        self, user_id: UserId, theme_id: ThemeId, vote_type: VoteType
    ) -> Vote:
        """Insert a vote.

        Raises:
            IntegrityError: On a unique index or foreign key violation
        """
        await asyncio.sleep(0)

        # Constraint checks and the insert run without suspending, which makes
        # them atomic with respect to other coroutines
        if theme_id not in self._store.themes:
            raise integrity_error(
                "INSERT INTO votes", FOREIGN_KEY_VIOLATION, "votes_theme_id_fkey"
            )
        key = (user_id, theme_id)
        if key in self._store.vote_index:
            raise integrity_error(
                "INSERT INTO votes", UNIQUE_VIOLATION, "unique_vote_per_user_theme"
            )

        vote = Vote(
            id=VoteId(self._store.next_vote_id()),
            user_id=user_id,
            theme_id=theme_id,
            vote_type=vote_type,
            created_at=self._store.now(),
        )
        self._store.vote_index[key] = vote
        self._store.votes.append(vote)
        return vote

    async def tally_by_theme(self) -> list[ThemeTally]:
        """Count votes of each kind for every theme."""
        counts: dict[ThemeId, Counter] = {
            theme_id: Counter() for theme_id in self._store.themes
        }
        for vote in self._store.votes:
            counts[vote.theme_id][vote.vote_type] += 1

        tallies = [
            ThemeTally(
                theme_id=theme.id,
                content=theme.content,
                yes_votes=counts[theme.id][VoteType.YES],
                no_votes=counts[theme.id][VoteType.NO],
                skip_votes=counts[theme.id][VoteType.SKIP],
                total_votes=sum(counts[theme.id].values()),
            )
            for theme in self._store.themes.values()
        ]
        return sorted(tallies, key=lambda t: (-t.yes_votes, t.theme_id))
