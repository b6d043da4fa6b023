#!/usr/bin/env python3
"""Log in through the browser and print an access token for the voting API.

Starts a local listener for the OAuth redirect, opens the provider's login
page, and exchanges the returned code for a credential.

Usage:
    python scripts/login.py
"""

import asyncio
import sys

from jamvote.adapter.oauth import (
    AuthorizationFlow,
    CallbackError,
    CallbackServer,
    ExchangeError,
    OAuthTokenClient,
)
from jamvote.config import Settings
from jamvote.util.logging import setup_logging
from jamvote.util.observability import configure_logfire


def build_flow(settings: Settings) -> AuthorizationFlow:
    provider = settings.auth.provider
    callback = settings.callback

    token_client = OAuthTokenClient(
        authorize_url=provider.authorize_url,
        token_url=provider.token_url,
        client_id=provider.client_id,
        redirect_uri=callback.redirect_uri,
        client_secret=provider.client_secret,
        scope=provider.scope,
        timeout=settings.auth.http_timeout_seconds,
    )
    callback_server = CallbackServer(
        host=callback.host,
        port=callback.port,
        path=callback.path,
        shutdown_timeout=callback.shutdown_timeout_seconds,
    )
    return AuthorizationFlow(
        token_client=token_client,
        callback_server=callback_server,
        timeout=callback.timeout_seconds,
    )


def main() -> int:
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    try:
        credential = asyncio.run(build_flow(settings).run())
    except (CallbackError, ExchangeError) as e:
        print(f"Login failed: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Login cancelled", file=sys.stderr)
        return 130

    print("Login successful. Use this token as 'Authorization: Bearer <token>':")
    print(credential.access_token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
