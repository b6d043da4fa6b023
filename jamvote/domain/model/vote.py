"""Vote entity.

Each user casts at most one yes/no/skip vote per theme.
"""

from datetime import datetime

from jamvote.domain.model.common import DomainModel
from jamvote.domain.value import ThemeId, UserId, VoteId, VoteType


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per user per theme (enforced by database unique constraint)
    - Votes are never changed or retracted once recorded
    """

    id: VoteId
    user_id: UserId
    theme_id: ThemeId
    vote_type: VoteType
    created_at: datetime
