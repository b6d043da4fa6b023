"""Unit tests for OAuthTokenClient."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from jamvote.adapter.oauth.token_exchange import (
    CodeAlreadyUsedError,
    OAuthTokenClient,
    TokenProviderError,
)

TOKEN_URL = "https://auth.example.com/oauth/token"


def make_client(handler, **kwargs) -> OAuthTokenClient:
    return OAuthTokenClient(
        authorize_url="https://auth.example.com/oauth/authorize",
        token_url=TOKEN_URL,
        client_id="jamvote-cli",
        redirect_uri="http://localhost:8080/callback",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def token_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "access_token": "at-123",
            "refresh_token": "rt-456",
            "token_type": "bearer",
            "expires_in": 3600,
        },
    )


class TestBuildAuthorizationUrl:
    def test_includes_state_and_pkce_challenge(self):
        client = make_client(token_response, scope="openid")

        url = client.build_authorization_url("nonce-1", "challenge-1")

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert url.startswith("https://auth.example.com/oauth/authorize?")
        assert params["state"] == ["nonce-1"]
        assert params["code_challenge"] == ["challenge-1"]
        assert params["code_challenge_method"] == ["S256"]
        assert params["redirect_uri"] == ["http://localhost:8080/callback"]
        assert params["response_type"] == ["code"]
        assert params["scope"] == ["openid"]


class TestExchange:
    @pytest.mark.asyncio
    async def test_successful_exchange(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return token_response(request)

        client = make_client(handler)

        credential = await client.exchange("code-1", code_verifier="verifier-1")

        assert credential.access_token == "at-123"
        assert credential.refresh_token == "rt-456"
        assert credential.expires_in == 3600
        [request] = seen
        assert request.method == "POST"
        assert str(request.url) == TOKEN_URL
        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["authorization_code"]
        assert form["code"] == ["code-1"]
        assert form["code_verifier"] == ["verifier-1"]
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_confidential_client_uses_basic_auth(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return token_response(request)

        client = make_client(handler, client_secret="s3cret")

        await client.exchange("code-1")

        assert seen[0].headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_credential_repr_hides_tokens(self):
        credential = await make_client(token_response).exchange("code-1")

        assert "at-123" not in repr(credential)
        assert "rt-456" not in repr(credential)

    @pytest.mark.asyncio
    async def test_empty_code_is_rejected(self):
        with pytest.raises(ValueError):
            await make_client(token_response).exchange("")

    @pytest.mark.asyncio
    async def test_same_code_is_never_sent_twice(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return token_response(request)

        client = make_client(handler)
        await client.exchange("code-1")

        with pytest.raises(CodeAlreadyUsedError):
            await client.exchange("code-1")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failed_code_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"error": "server_error"})

        client = make_client(handler)
        with pytest.raises(TokenProviderError):
            await client.exchange("code-1")

        with pytest.raises(CodeAlreadyUsedError):
            await client.exchange("code-1")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_grant_means_code_already_used(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(CodeAlreadyUsedError):
            await make_client(handler).exchange("code-1")

    @pytest.mark.asyncio
    async def test_other_provider_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "invalid_client"})

        with pytest.raises(TokenProviderError) as exc_info:
            await make_client(handler).exchange("code-1")

        assert exc_info.value.status_code == 401
        assert "invalid_client" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(TokenProviderError):
            await make_client(handler).exchange("code-1")

    @pytest.mark.asyncio
    async def test_body_without_access_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"token_type": "bearer"})

        with pytest.raises(TokenProviderError):
            await make_client(handler).exchange("code-1")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TokenProviderError):
            await make_client(handler).exchange("code-1")
