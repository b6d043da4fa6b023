"""Domain value objects."""

from jamvote.domain.value.identifiers import (
    MAX_SERIAL_ID,
    ThemeId,
    UserId,
    VoteId,
    is_valid_serial_id,
)
from jamvote.domain.value.types import ResolvedIdentity, VoteType

__all__ = [
    # Identifiers
    "MAX_SERIAL_ID",
    "ThemeId",
    "UserId",
    "VoteId",
    "is_valid_serial_id",
    # Types
    "ResolvedIdentity",
    "VoteType",
]
