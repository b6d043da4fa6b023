"""Theme entity.

Themes are candidate jam themes loaded by the import process.
"""

from datetime import datetime

from pydantic import Field

from jamvote.domain.model.common import DomainModel
from jamvote.domain.value import ThemeId


class Theme(DomainModel):
    """Theme entity.

    Business rules:
    - Ids are assigned by the database and increase with creation order
    - Immutable once created and never deleted
    """

    id: ThemeId
    content: str = Field(min_length=1)
    created_at: datetime


class ThemeTally(DomainModel):
    """Vote counts for one theme.

    Themes nobody has voted on yet have all counts at zero.
    """

    theme_id: ThemeId
    content: str
    yes_votes: int = 0
    no_votes: int = 0
    skip_votes: int = 0
    total_votes: int = 0
