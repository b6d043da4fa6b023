"""Mappers for converting database rows into domain models."""

from typing import Any, Mapping

from jamvote.domain.model import Theme, ThemeTally, Vote
from jamvote.domain.value import ThemeId, UserId, VoteId, VoteType


def row_to_theme(row: Mapping[str, Any]) -> Theme:
    """Convert database row to Theme domain model.

    Args:
        row: Database row mapping

    Returns:
        Theme domain model
    """
    return Theme(
        id=ThemeId(row["id"]),
        content=row["content"],
        created_at=row["created_at"],
    )


def row_to_vote(row: Mapping[str, Any]) -> Vote:
    """Convert database row to Vote domain model.

    Args:
        row: Database row mapping

    Returns:
        Vote domain model
    """
    return Vote(
        id=VoteId(row["id"]),
        user_id=UserId(row["user_id"]),
        theme_id=ThemeId(row["theme_id"]),
        vote_type=VoteType(row["vote_type"]),
        created_at=row["created_at"],
    )


def row_to_tally(row: Mapping[str, Any]) -> ThemeTally:
    """Convert an aggregate row to a ThemeTally."""
    return ThemeTally(
        theme_id=ThemeId(row["theme_id"]),
        content=row["content"],
        yes_votes=row["yes_votes"],
        no_votes=row["no_votes"],
        skip_votes=row["skip_votes"],
        total_votes=row["total_votes"],
    )
