"""Shared in-memory storage for testing.

Mirrors the database schema: serial ids, server timestamps, the theme
foreign key and the (user_id, theme_id) unique index.
"""

from datetime import datetime, timezone
from itertools import count

from sqlalchemy.exc import IntegrityError

from jamvote.domain.model import Theme, Vote
from jamvote.domain.value import ThemeId, UserId


class ConstraintViolation(Exception):
    """Driver-level constraint error carrying a PostgreSQL SQLSTATE."""

    def __init__(self, sqlstate: str, constraint: str) -> None:
        self.sqlstate = sqlstate
        self.constraint = constraint
        super().__init__(f"violates constraint {constraint}")


def integrity_error(statement: str, sqlstate: str, constraint: str) -> IntegrityError:
    """Build the IntegrityError SQLAlchemy raises for a violated constraint."""
    return IntegrityError(statement, None, ConstraintViolation(sqlstate, constraint))


class InMemoryStore:
    """Tables shared by the in-memory repositories of one container."""

    def __init__(self) -> None:
        self.themes: dict[ThemeId, Theme] = {}
        self.votes: list[Vote] = []
        # Unique index on (user_id, theme_id)
        self.vote_index: dict[tuple[UserId, ThemeId], Vote] = {}
        self._theme_ids = count(1)
        self._vote_ids = count(1)

    def next_theme_id(self) -> int:
        return next(self._theme_ids)

    def next_vote_id(self) -> int:
        return next(self._vote_ids)

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)
