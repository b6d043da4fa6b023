"""Strongly typed identifiers for domain entities.

Themes and votes use database-assigned serial ids; users are identified by
the opaque subject string issued by the identity provider.
"""

from typing import NewType

ThemeId = NewType("ThemeId", int)
VoteId = NewType("VoteId", int)
UserId = NewType("UserId", str)

# Serial ids are PostgreSQL INTEGERs, so no stored row has an id outside this range
MIN_SERIAL_ID = 1
MAX_SERIAL_ID = 2**31 - 1


def is_valid_serial_id(value: int) -> bool:
    """Whether the id could belong to a stored theme or vote."""
    return MIN_SERIAL_ID <= value <= MAX_SERIAL_ID
