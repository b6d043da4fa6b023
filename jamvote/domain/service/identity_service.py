"""Identity domain service."""

import logfire

from jamvote.domain.error import InvalidCredentialError
from jamvote.domain.value import ResolvedIdentity, UserId

from .base import Service


class IdentityResolver:
    """Generic interface for turning a bearer credential into a user identity."""

    async def resolve(self, access_token: str) -> ResolvedIdentity:
        """Resolve an access token to the identity it was issued for.

        Args:
            access_token: Bearer token issued by the identity provider

        Returns:
            Resolved identity

        Raises:
            InvalidCredentialError: If the token is not valid
            IdentityProviderUnavailableError: If the provider cannot be reached
        """
        raise NotImplementedError


class IdentityService(Service):
    """Domain service authenticating API callers."""

    def __init__(self, identity_resolver: IdentityResolver) -> None:
        """Initialize identity service.

        Args:
            identity_resolver: Resolver for bearer credentials
        """
        self.identity_resolver = identity_resolver

    async def get_user_id_from_token(self, token: str | None) -> UserId | None:
        """Extract the user ID behind a bearer token.

        Provider outages are not swallowed: only a missing or rejected token
        yields None.

        Args:
            token: Bearer token (optional)

        Returns:
            User ID if the token is valid, None if missing or invalid
        """
        if not token:
            return None

        try:
            identity = await self.identity_resolver.resolve(token)
        except InvalidCredentialError as e:
            logfire.debug("Credential rejected, treating as unauthenticated", error=str(e))
            return None

        return identity.user_id
