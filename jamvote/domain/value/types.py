"""Domain value objects.

Value objects are immutable and defined by their values, not identity.
"""

from datetime import datetime
from enum import Enum

from jamvote.domain.value.common import ValueObject
from jamvote.domain.value.identifiers import UserId


class VoteType(str, Enum):
    """A user's decision on a theme."""

    YES = "yes"
    NO = "no"
    SKIP = "skip"

    @classmethod
    def values(cls) -> list[str]:
        """Return the accepted wire values."""
        return [member.value for member in cls]


class ResolvedIdentity(ValueObject):
    """User identity resolved from a bearer credential.

    Attributes:
        user_id: Stable subject identifier issued by the identity provider
        expires_at: When the credential stops being valid, if known
    """

    user_id: UserId
    expires_at: datetime | None = None
