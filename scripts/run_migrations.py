#!/usr/bin/env python3
"""Apply the voting schema with Logfire error tracking."""

import sys
import logfire
from alembic import command
from alembic.config import Config

from jamvote.config import Settings
from jamvote.util.observability import configure_logfire


def main() -> int:
    """Upgrade the database to the latest revision."""
    settings = Settings()

    configure_logfire(settings)

    try:
        logfire.info("Starting database migrations", environment=settings.environment)

        # Connection URL comes from Settings (see migrations/env.py)
        command.upgrade(Config("alembic.ini"), "head")

        logfire.info("Database migrations completed successfully")
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the deploy fails instead of serving a broken schema
        raise


if __name__ == "__main__":
    sys.exit(main())
