"""Identity provider infrastructure providers."""

from dishka import Scope, provide

from jamvote.adapter.oauth.identity import (
    CachingIdentityResolver,
    JWKSIdentityResolver,
    UserInfoIdentityResolver,
)
from jamvote.config import AuthSettings
from jamvote.domain.service import IdentityResolver
from jamvote.util.di.base import ProviderBase
from jamvote.util.error import ConfigurationError


class IdentityProvider(ProviderBase):
    """Identity component base."""

    __mock_component__ = "identity"


class ProdIdentityProvider(IdentityProvider):
    """Production identity provider talking to the OAuth provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_resolver(self, auth_settings: AuthSettings) -> IdentityResolver:
        """Provide the configured resolver behind a per-credential cache.

        APP-scoped so the cache outlives individual requests.

        Raises:
            ConfigurationError: If JWKS resolution is selected without a JWKS URL
        """
        provider = auth_settings.provider

        if auth_settings.resolver == "jwks":
            if not provider.jwks_url:
                raise ConfigurationError(
                    "AUTH__PROVIDER__JWKS_URL is required when AUTH__RESOLVER=jwks"
                )
            inner: IdentityResolver = JWKSIdentityResolver(
                jwks_url=provider.jwks_url,
                audience=provider.audience,
                issuer=provider.issuer,
                timeout=auth_settings.http_timeout_seconds,
            )
        else:
            inner = UserInfoIdentityResolver(
                userinfo_url=provider.userinfo_url,
                timeout=auth_settings.http_timeout_seconds,
            )

        return CachingIdentityResolver(
            inner,
            ttl_seconds=auth_settings.identity_cache_ttl_seconds,
            max_entries=auth_settings.identity_cache_max_entries,
        )
