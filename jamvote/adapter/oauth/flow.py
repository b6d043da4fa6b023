"""Interactive authorization code flow for the command-line client."""

import asyncio
import webbrowser
from collections.abc import Callable

import logfire

from jamvote.adapter.oauth.callback_server import CallbackServer
from jamvote.adapter.oauth.pkce import generate_pkce_pair, generate_state
from jamvote.adapter.oauth.token_exchange import Credential, OAuthTokenClient


class AuthorizationFlow:
    """Runs one login attempt end to end.

    Generates the state nonce and PKCE pair, starts the callback listener,
    sends the user's browser to the provider, waits for the redirect and
    exchanges the code for a credential.
    """

    def __init__(
        self,
        token_client: OAuthTokenClient,
        callback_server: CallbackServer,
        timeout: float = 120.0,
        open_browser: Callable[[str], bool] = webbrowser.open,
        notify: Callable[[str], None] = print,
    ) -> None:
        """Initialize flow.

        Args:
            token_client: Client for the provider's token endpoint
            callback_server: Fresh (IDLE) callback listener
            timeout: Seconds to wait for the redirect
            open_browser: Opens a URL, returning False if no browser was found;
                called in a worker thread
            notify: Shows a message to the user
        """
        self.token_client = token_client
        self.callback_server = callback_server
        self.timeout = timeout
        self.open_browser = open_browser
        self.notify = notify

    async def run(self) -> Credential:
        """Perform the login.

        Returns:
            Credential issued by the provider

        Raises:
            CallbackError: If the redirect fails, times out or cannot be bound
            ExchangeError: If the code cannot be exchanged
        """
        state = generate_state()
        verifier, challenge = generate_pkce_pair()
        url = self.token_client.build_authorization_url(state, challenge)

        with logfire.span("oauth_authorization_flow"):
            async with self.callback_server as server:
                await server.start(state)

                # Browser launchers block until the helper process returns
                opened = await asyncio.to_thread(self.open_browser, url)
                if not opened:
                    self.notify("Could not open a browser. Visit this URL to log in:")
                    self.notify(url)
                else:
                    self.notify("Opened your browser to log in...")

                code = await server.wait_for_code(self.timeout)

            return await self.token_client.exchange(code, code_verifier=verifier)
