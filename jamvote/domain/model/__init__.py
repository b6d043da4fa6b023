"""Domain model entities."""

from jamvote.domain.model.theme import Theme, ThemeTally
from jamvote.domain.model.vote import Vote

__all__ = [
    "Theme",
    "ThemeTally",
    "Vote",
]
