"""SQLAlchemy table definitions.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# THEMES TABLE
# ============================================================================
themes_table = Table(
    "themes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("content", Text, nullable=False),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
)

# ============================================================================
# VOTES TABLE
# ============================================================================
votes_table = Table(
    "votes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Text, nullable=False),  # Identity provider subject
    Column(
        "theme_id",
        Integer,
        ForeignKey("themes.id", name="votes_theme_id_fkey"),
        nullable=False,
    ),
    Column("vote_type", Text, nullable=False),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
    CheckConstraint(
        "vote_type IN ('yes', 'no', 'skip')", name="votes_vote_type_check"
    ),
    # Load-bearing: the only guard against two votes by one user on one theme
    UniqueConstraint("user_id", "theme_id", name="unique_vote_per_user_theme"),
)

Index("idx_votes_user_id", votes_table.c.user_id)
Index("idx_votes_theme_id", votes_table.c.theme_id)
Index("idx_votes_vote_type", votes_table.c.vote_type)
