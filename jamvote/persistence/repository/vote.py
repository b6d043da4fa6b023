"""PostgreSQL implementation of Vote repository."""

from typing import List, Optional

from sqlalchemy import case, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jamvote.domain.model import ThemeTally, Vote
from jamvote.domain.repository import VoteRepository
from jamvote.domain.value import ThemeId, UserId, VoteType
from jamvote.persistence.mappers import row_to_tally, row_to_vote
from jamvote.persistence.tables import themes_table, votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_user_and_theme(
        self, user_id: UserId, theme_id: ThemeId
    ) -> Optional[Vote]:
        """Find a user's vote on a theme."""
        stmt = select(votes_table).where(
            votes_table.c.user_id == user_id,
            votes_table.c.theme_id == theme_id,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_vote(row) if row else None

    async def find_by_user(self, user_id: UserId) -> List[Vote]:
        """Find all votes by a user."""
        stmt = (
            select(votes_table)
            .where(votes_table.c.user_id == user_id)
            .order_by(votes_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_vote(row) for row in result.mappings().all()]

    async def count_by_user(self, user_id: UserId) -> int:
        """Count the themes a user has voted on."""
        stmt = (
            select(func.count())
            .select_from(votes_table)
            .where(votes_table.c.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def create(
        self, user_id: UserId, theme_id: ThemeId, vote_type: VoteType
    ) -> Vote:
        """Insert a vote and commit it.

        The vote is committed here rather than at the end of the request so
        that success is only reported for a durable row. On a constraint
        violation the session is rolled back to stay usable.
        """
        stmt = (
            insert(votes_table)
            .values(user_id=user_id, theme_id=theme_id, vote_type=vote_type.value)
            .returning(votes_table)
        )
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().one()
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        return row_to_vote(row)

    async def tally_by_theme(self) -> List[ThemeTally]:
        """Count votes of each kind for every theme."""

        def count_kind(kind: VoteType):
            return func.count(case((votes_table.c.vote_type == kind.value, 1)))

        yes_votes = count_kind(VoteType.YES).label("yes_votes")
        stmt = (
            select(
                themes_table.c.id.label("theme_id"),
                themes_table.c.content,
                yes_votes,
                count_kind(VoteType.NO).label("no_votes"),
                count_kind(VoteType.SKIP).label("skip_votes"),
                func.count(votes_table.c.id).label("total_votes"),
            )
            .select_from(
                themes_table.outerjoin(
                    votes_table, votes_table.c.theme_id == themes_table.c.id
                )
            )
            .group_by(themes_table.c.id, themes_table.c.content)
            .order_by(yes_votes.desc(), themes_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_tally(row) for row in result.mappings().all()]
