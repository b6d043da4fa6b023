"""OAuth 2.0 token exchange client.

Exchanges the authorization code delivered to the local callback listener
for a credential at the provider's token endpoint.
"""

from urllib.parse import urlencode

import httpx
import logfire
from pydantic import BaseModel

from jamvote.adapter.error import ProviderError


class Credential(BaseModel):
    """Tokens obtained from the identity provider.

    Held by the client for the lifetime of a session, never persisted.
    """

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    scope: str | None = None

    def __repr__(self) -> str:
        return f"Credential(token_type={self.token_type!r}, expires_in={self.expires_in!r})"


class ExchangeError(ProviderError):
    """Token exchange failed."""

    pass


class CodeAlreadyUsedError(ExchangeError):
    """The authorization code was already redeemed."""

    def __init__(self, message: str = "Authorization code has already been used"):
        super().__init__(message)


class TokenProviderError(ExchangeError):
    """The token endpoint failed or could not be reached."""

    def __init__(self, detail: str, status_code: int | None = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class OAuthTokenClient:
    """OAuth 2.0 authorization code client with PKCE support.

    Each exchange is a single request: authorization codes are single-use,
    so failures are reported and never retried.
    """

    def __init__(
        self,
        authorize_url: str,
        token_url: str,
        client_id: str,
        redirect_uri: str,
        client_secret: str | None = None,
        scope: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize token client.

        Args:
            authorize_url: Provider authorization endpoint
            token_url: Provider token endpoint
            client_id: OAuth client ID
            redirect_uri: Callback URL registered with the provider
            client_secret: Client secret for confidential clients
            scope: Requested scopes
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.client_secret = client_secret
        self.scope = scope
        self.timeout = timeout
        self._transport = transport
        self._exchanged_codes: set[str] = set()

    def build_authorization_url(self, state: str, code_challenge: str) -> str:
        """Build the URL the user's browser is sent to.

        Args:
            state: State nonce for this attempt
            code_challenge: S256 PKCE challenge

        Returns:
            Authorization URL
        """
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        if self.scope:
            params["scope"] = self.scope
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange(self, code: str, code_verifier: str | None = None) -> Credential:
        """Exchange an authorization code for a credential.

        Args:
            code: Authorization code from the callback
            code_verifier: PKCE verifier matching the challenge sent earlier

        Returns:
            Credential issued by the provider

        Raises:
            ValueError: If code is empty
            CodeAlreadyUsedError: If the code was already redeemed
            TokenProviderError: If the provider fails or cannot be reached
        """
        if not code:
            raise ValueError("Authorization code must not be empty")
        if code in self._exchanged_codes:
            logfire.warn("Refusing to redeem authorization code twice")
            raise CodeAlreadyUsedError()
        # The provider consumes the code on any attempt, successful or not
        self._exchanged_codes.add(code)

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
        }
        if code_verifier:
            data["code_verifier"] = code_verifier

        auth = (self.client_id, self.client_secret) if self.client_secret else None

        with logfire.span("oauth_token_exchange", token_url=self.token_url):
            try:
                async with httpx.AsyncClient(
                    transport=self._transport, timeout=self.timeout
                ) as client:
                    response = await client.post(
                        self.token_url,
                        data=data,
                        auth=auth,
                        headers={"Accept": "application/json"},
                    )
            except httpx.HTTPError as e:
                logfire.error("Token exchange HTTP error", error=str(e))
                raise TokenProviderError(f"HTTP error during token exchange: {e}")

            if response.status_code != 200:
                error_code = _error_code(response)
                logfire.error(
                    "Token exchange failed",
                    status_code=response.status_code,
                    error=error_code,
                )
                if error_code == "invalid_grant":
                    raise CodeAlreadyUsedError(
                        "Authorization code was rejected as invalid or already used"
                    )
                raise TokenProviderError(
                    f"Token exchange failed: {response.status_code} {error_code or ''}".strip(),
                    status_code=response.status_code,
                )

            try:
                credential = Credential.model_validate(response.json())
            except ValueError as e:
                logfire.error("Token endpoint returned malformed body", error=str(e))
                raise TokenProviderError("Token endpoint returned a malformed response")

            logfire.info(
                "Token exchange completed",
                token_type=credential.token_type,
                has_refresh_token=credential.refresh_token is not None,
            )
            return credential


def _error_code(response: httpx.Response) -> str | None:
    """Extract the OAuth error code from an error response, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error")
        return error if isinstance(error, str) else None
    return None
