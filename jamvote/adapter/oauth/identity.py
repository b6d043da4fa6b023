"""Bearer credential resolution against the identity provider."""

import asyncio
import hashlib
import time
from collections.abc import Callable
from datetime import datetime, timezone

import httpx
import jwt
import logfire

from jamvote.domain.error import (
    IdentityProviderUnavailableError,
    InvalidCredentialError,
)
from jamvote.domain.service.identity_service import IdentityResolver
from jamvote.domain.value import ResolvedIdentity, UserId

MOCK_TOKEN_PREFIX = "test-token:"


class UserInfoIdentityResolver(IdentityResolver):
    """Resolves credentials by asking the provider's user-info endpoint."""

    def __init__(
        self,
        userinfo_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            userinfo_url: Provider user-info endpoint
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.userinfo_url = userinfo_url
        self.timeout = timeout
        self._transport = transport

    async def resolve(self, access_token: str) -> ResolvedIdentity:
        # HTTP header values must be ASCII; no provider issues anything else
        if not access_token.isascii():
            raise InvalidCredentialError("Credential contains non-ASCII characters")

        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.timeout
            ) as client:
                response = await client.get(
                    self.userinfo_url,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            logfire.error("User-info request failed", error=str(e))
            raise IdentityProviderUnavailableError(
                f"Identity provider unreachable: {e}"
            ) from e

        if response.status_code in (401, 403):
            raise InvalidCredentialError("Credential rejected by identity provider")
        if response.status_code != 200:
            logfire.error("User-info lookup failed", status_code=response.status_code)
            raise IdentityProviderUnavailableError(
                f"Identity provider returned {response.status_code}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise IdentityProviderUnavailableError(
                "Identity provider returned a malformed user-info response"
            ) from e

        subject = (body.get("sub") or body.get("id")) if isinstance(body, dict) else None
        if not subject:
            raise InvalidCredentialError("User-info response has no subject")

        return ResolvedIdentity(user_id=UserId(str(subject)))


class JWKSIdentityResolver(IdentityResolver):
    """Resolves credentials by verifying them as JWTs against the provider JWKS.

    Signing keys are fetched (and cached) by PyJWT's JWK client; the fetch is
    blocking, so it runs in a worker thread.
    """

    algorithms = ["RS256", "ES256"]

    def __init__(
        self,
        jwks_url: str,
        audience: str | None = None,
        issuer: str | None = None,
        timeout: float = 10.0,
        jwk_client: jwt.PyJWKClient | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            jwks_url: Provider JWKS endpoint
            audience: Required `aud` claim, if any
            issuer: Required `iss` claim, if any
            timeout: Key fetch timeout in seconds
            jwk_client: Pre-built JWK client (tests)
        """
        self.audience = audience
        self.issuer = issuer
        self._jwk_client = jwk_client or jwt.PyJWKClient(jwks_url, timeout=int(timeout))

    async def resolve(self, access_token: str) -> ResolvedIdentity:
        try:
            signing_key = await asyncio.to_thread(
                self._jwk_client.get_signing_key_from_jwt, access_token
            )
        except jwt.PyJWKClientConnectionError as e:
            logfire.error("JWKS fetch failed", error=str(e))
            raise IdentityProviderUnavailableError(
                f"Could not fetch signing keys: {e}"
            ) from e
        except (jwt.PyJWKClientError, jwt.InvalidTokenError) as e:
            raise InvalidCredentialError(f"No signing key for credential: {e}") from e

        try:
            claims = jwt.decode(
                access_token,
                signing_key.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require": ["exp", "sub"],
                    "verify_aud": self.audience is not None,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidCredentialError(f"Invalid credential: {e}") from e

        return ResolvedIdentity(
            user_id=UserId(str(claims["sub"])),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )


class CachingIdentityResolver(IdentityResolver):
    """Per-credential cache in front of another resolver.

    Entries are keyed by a SHA-256 digest of the token and live for the
    shorter of the configured TTL and the credential's own expiry. Only
    successful lookups are cached.
    """

    def __init__(
        self,
        inner: IdentityResolver,
        ttl_seconds: float = 300,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.inner = inner
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[ResolvedIdentity, float]] = {}

    async def resolve(self, access_token: str) -> ResolvedIdentity:
        key = hashlib.sha256(access_token.encode()).hexdigest()
        now = self._clock()

        cached = self._entries.get(key)
        if cached is not None:
            identity, expires = cached
            if expires > now:
                return identity
            del self._entries[key]

        identity = await self.inner.resolve(access_token)

        expires = now + self.ttl_seconds
        if identity.expires_at is not None:
            expires = min(expires, identity.expires_at.timestamp())
        if expires > now:
            self._store(key, identity, expires, now)
        return identity

    def _store(
        self, key: str, identity: ResolvedIdentity, expires: float, now: float
    ) -> None:
        if len(self._entries) >= self.max_entries:
            self._entries = {k: v for k, v in self._entries.items() if v[1] > now}
        while len(self._entries) >= self.max_entries:
            # Oldest insertion first
            del self._entries[next(iter(self._entries))]
        self._entries[key] = (identity, expires)


class MockIdentityResolver(IdentityResolver):
    """Resolver for tests: `test-token:<user>` resolves to `<user>`."""

    def __init__(self, unavailable: bool = False) -> None:
        self.unavailable = unavailable

    async def resolve(self, access_token: str) -> ResolvedIdentity:
        if self.unavailable:
            raise IdentityProviderUnavailableError("Mock identity provider is down")
        if not access_token.startswith(MOCK_TOKEN_PREFIX):
            raise InvalidCredentialError("Unknown test token")
        user_id = access_token[len(MOCK_TOKEN_PREFIX) :]
        if not user_id:
            raise InvalidCredentialError("Empty test token subject")
        return ResolvedIdentity(user_id=UserId(user_id))
