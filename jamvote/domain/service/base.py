"""Base service class for domain services."""

import asyncio

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

# Failures that mean storage could not be reached, as opposed to a rejected write
STORAGE_UNAVAILABLE_ERRORS = (
    OperationalError,
    InterfaceError,
    OSError,
    asyncio.TimeoutError,
)

# PostgreSQL SQLSTATE codes for constraint violations
FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def violation_sqlstate(error: IntegrityError) -> str | None:
    """SQLSTATE of the violated constraint, as reported by the driver."""
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None)
    if sqlstate is None:
        # Adapted DBAPI errors keep the driver exception as their cause
        sqlstate = getattr(getattr(orig, "__cause__", None), "sqlstate", None)
    return sqlstate


class Service:
    """Base class for all domain services.

    Domain services contain business logic that doesn't naturally belong
    to a single entity or spans multiple entities/aggregates.
    """

    pass
