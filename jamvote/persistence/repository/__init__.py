"""PostgreSQL repository implementations."""

from jamvote.persistence.repository.theme import PostgresThemeRepository
from jamvote.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresThemeRepository",
    "PostgresVoteRepository",
]
