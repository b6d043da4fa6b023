"""In-memory repository implementations for testing."""

from .store import InMemoryStore
from .theme import InMemoryThemeRepository
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryStore",
    "InMemoryThemeRepository",
    "InMemoryVoteRepository",
]
