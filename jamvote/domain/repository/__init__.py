"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from jamvote.domain.repository.theme import ThemeRepository
from jamvote.domain.repository.vote import VoteRepository

__all__ = [
    "ThemeRepository",
    "VoteRepository",
]
