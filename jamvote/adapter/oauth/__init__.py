"""OAuth adapter: local callback listener, token exchange and identity lookup."""

from .callback_server import (
    CallbackAbortedError,
    CallbackBindError,
    CallbackError,
    CallbackServer,
    CallbackState,
    CallbackTimeoutError,
    MissingCodeError,
    ProviderDeniedError,
    StateMismatchError,
)
from .flow import AuthorizationFlow
from .identity import (
    CachingIdentityResolver,
    JWKSIdentityResolver,
    MockIdentityResolver,
    UserInfoIdentityResolver,
)
from .pkce import generate_pkce_pair, generate_state
from .token_exchange import (
    CodeAlreadyUsedError,
    Credential,
    ExchangeError,
    OAuthTokenClient,
    TokenProviderError,
)

__all__ = [
    "AuthorizationFlow",
    "CachingIdentityResolver",
    "CallbackAbortedError",
    "CallbackBindError",
    "CallbackError",
    "CallbackServer",
    "CallbackState",
    "CallbackTimeoutError",
    "CodeAlreadyUsedError",
    "Credential",
    "ExchangeError",
    "JWKSIdentityResolver",
    "MissingCodeError",
    "MockIdentityResolver",
    "OAuthTokenClient",
    "ProviderDeniedError",
    "StateMismatchError",
    "TokenProviderError",
    "UserInfoIdentityResolver",
    "generate_pkce_pair",
    "generate_state",
]
