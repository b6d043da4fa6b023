"""PostgreSQL implementation of Theme repository."""

from typing import List, Optional

from sqlalchemy import exists, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from jamvote.domain.model import Theme
from jamvote.domain.repository import ThemeRepository
from jamvote.domain.value import ThemeId, UserId, is_valid_serial_id
from jamvote.persistence.mappers import row_to_theme
from jamvote.persistence.tables import themes_table, votes_table


class PostgresThemeRepository(ThemeRepository):
    """PostgreSQL implementation of ThemeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, theme_id: ThemeId) -> Optional[Theme]:
        """Find a theme by ID."""
        if not is_valid_serial_id(theme_id):
            return None
        stmt = select(themes_table).where(themes_table.c.id == theme_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_theme(row) if row else None

    async def find_by_content(self, content: str) -> Optional[Theme]:
        """Find a theme by its exact content."""
        stmt = (
            select(themes_table)
            .where(themes_table.c.content == content)
            .order_by(themes_table.c.id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_theme(row) if row else None

    async def find_all(self) -> List[Theme]:
        """Return every theme in creation order."""
        stmt = select(themes_table).order_by(themes_table.c.id)
        result = await self.session.execute(stmt)
        return [row_to_theme(row) for row in result.mappings().all()]

    async def count(self) -> int:
        """Count all themes."""
        stmt = select(func.count()).select_from(themes_table)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def pick_unvoted(self, user_id: UserId) -> Optional[Theme]:
        """Pick a random theme the user has not voted on."""
        already_voted = exists().where(
            votes_table.c.theme_id == themes_table.c.id,
            votes_table.c.user_id == user_id,
        )
        stmt = (
            select(themes_table)
            .where(~already_voted)
            .order_by(func.random())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_theme(row) if row else None

    async def create(self, content: str) -> Theme:
        """Insert a new theme."""
        stmt = insert(themes_table).values(content=content).returning(themes_table)
        result = await self.session.execute(stmt)
        row = result.mappings().one()
        await self.session.flush()
        return row_to_theme(row)
