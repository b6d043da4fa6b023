"""Logfire setup for the API, the login client and the import script.

Usage:
    import logfire

    logfire.info("Vote recorded", user_id=user_id, theme_id=theme_id)

    with logfire.span("record_vote", theme_id=theme_id):
        ...
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from jamvote.config import Settings

SERVICE_NAME = "jamvote"
SERVICE_VERSION = "0.1.0"

# Attribute names whose values are masked in every span and log
SECRET_ATTRIBUTE_PATTERNS = [
    "access_token",
    "refresh_token",
    "id_token",
    "code_verifier",
    "client_secret",
]


def _should_send(settings: Settings) -> bool:
    """Explicit setting wins, otherwise send only when a token is configured."""
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the current process.

    Set OBSERVABILITY__LOGFIRE_TOKEN to ship events to Logfire; without it
    they only go to the console. OBSERVABILITY__SEND_TO_LOGFIRE overrides
    either way.

    Args:
        settings: Application settings
    """
    send_to_logfire = _should_send(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SECRET_ATTRIBUTE_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace API requests, leaving out health checks.

    Args:
        app: FastAPI application instance
    """

    def _request_attributes(request, attributes):
        result = {**attributes, "path": request.url.path}
        if request.client:
            result["client_host"] = request.client.host
        return result

    # Bearer tokens must not end up in traces
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        excluded_urls="/health",
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace vote and theme queries on the given engine."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace calls to the identity provider's token and user-info endpoints."""
    logfire.instrument_httpx()
