#!/usr/bin/env python3
"""Start the voting API with Logfire error tracking for startup errors."""

import sys
import logfire
import uvicorn

from jamvote.config import Settings
from jamvote.util.logging import setup_logging
from jamvote.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early to catch startup errors
    configure_logfire(settings)
    setup_logging(settings)

    try:
        logfire.info("Starting voting API", port=settings.port)

        uvicorn.run(
            "jamvote.interface.api.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=settings.port,
            log_level="info",
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
