"""create_themes_and_votes

Create the voting schema:
- Themes (candidate jam themes, loaded from a text file)
- Votes (one yes/no/skip vote per user per theme)

Revision ID: 3c5e1f0a9b27
Revises:
Create Date: 2026-01-27 14:05:07.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c5e1f0a9b27"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # THEMES
    # ========================================================================
    op.create_table(
        "themes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    )

    # ========================================================================
    # VOTES
    # ========================================================================
    op.create_table(
        "votes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("theme_id", sa.Integer(), nullable=False),
        sa.Column("vote_type", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(
            ["theme_id"], ["themes.id"], name="votes_theme_id_fkey"
        ),
        sa.CheckConstraint(
            "vote_type IN ('yes', 'no', 'skip')", name="votes_vote_type_check"
        ),
        sa.UniqueConstraint(
            "user_id", "theme_id", name="unique_vote_per_user_theme"
        ),
    )

    op.create_index("idx_votes_user_id", "votes", ["user_id"])
    op.create_index("idx_votes_theme_id", "votes", ["theme_id"])
    op.create_index("idx_votes_vote_type", "votes", ["vote_type"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_votes_vote_type", table_name="votes")
    op.drop_index("idx_votes_theme_id", table_name="votes")
    op.drop_index("idx_votes_user_id", table_name="votes")
    op.drop_table("votes")
    op.drop_table("themes")
