"""Random values bound to one authorization attempt."""

import secrets
from base64 import urlsafe_b64encode
from hashlib import sha256


def generate_state() -> str:
    """Generate the state nonce that ties a redirect to this attempt."""
    return secrets.token_urlsafe(32)


def code_challenge_for(verifier: str) -> str:
    """Compute the S256 code challenge for a PKCE verifier."""
    digest = sha256(verifier.encode("ascii")).digest()
    return urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_pkce_pair() -> tuple[str, str]:
    """Generate PKCE verifier and challenge.

    The challenge goes into the authorization URL; the verifier is only
    sent with the token exchange, so an intercepted code is useless alone.

    Returns:
        Tuple of (verifier, challenge), both unpadded base64url strings
    """
    verifier = urlsafe_b64encode(secrets.token_bytes(32)).rstrip(b"=").decode("ascii")
    return verifier, code_challenge_for(verifier)
