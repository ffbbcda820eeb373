"""Unit tests for RealEmercoinIDClient."""

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from emcid.adapter.emercoin import RealEmercoinIDClient
from emcid.domain.error import (
    IdentityFetchFailedError,
    IdentityFetchTimeoutError,
    InvalidIdentityError,
    TokenExchangeFailedError,
    TokenExchangeTimeoutError,
)
from emcid.domain.value import AccessToken

RETURN_URL = "https://login.example.org/user/emercoin-id-login/return"


def make_client(handler) -> RealEmercoinIDClient:
    return RealEmercoinIDClient(
        client_id="app-id",
        client_secret="app-secret",
        auth_page="https://id.emercoin.test/oauth/v2/auth",
        token_page="https://id.emercoin.test/oauth/v2/token",
        infocard="https://id.emercoin.test/infocard",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestAuthorizationUrl:
    """Tests for the authorization request."""

    def test_url_carries_client_redirect_and_response_type(self):
        client = make_client(lambda request: httpx.Response(500))

        url = client.authorization_url(client.authorization_params(RETURN_URL))

        parts = urlsplit(url)
        query = parse_qs(parts.query)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "https://id.emercoin.test/oauth/v2/auth"
        )
        assert query == {
            "client_id": ["app-id"],
            "redirect_uri": [RETURN_URL],
            "response_type": ["code"],
        }


class TestExchangeCodeForToken:
    """Tests for exchange_code_for_token."""

    @pytest.mark.asyncio
    async def test_posts_form_and_returns_token(self):
        """The code should be posted as a form and the token returned."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "tok-123"})

        token = await make_client(handler).exchange_code_for_token("code-1", RETURN_URL)

        assert token == AccessToken("tok-123")
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://id.emercoin.test/oauth/v2/token"
        assert request.headers["content-type"].startswith(
            "application/x-www-form-urlencoded"
        )
        assert parse_qs(request.content.decode()) == {
            "code": ["code-1"],
            "client_id": ["app-id"],
            "client_secret": ["app-secret"],
            "grant_type": ["authorization_code"],
            "redirect_uri": [RETURN_URL],
        }

    @pytest.mark.asyncio
    async def test_provider_error_carries_description(self):
        """An error body should be parsed whatever the status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400,
                json={"error": "invalid_grant", "error_description": "Code expired"},
            )

        with pytest.raises(TokenExchangeFailedError) as exc_info:
            await make_client(handler).exchange_code_for_token("code-1", RETURN_URL)

        assert exc_info.value.description == "Code expired"

    @pytest.mark.asyncio
    async def test_missing_access_token_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"token_type": "bearer"})

        with pytest.raises(TokenExchangeFailedError, match="no access token"):
            await make_client(handler).exchange_code_for_token("code-1", RETURN_URL)

    @pytest.mark.asyncio
    async def test_non_json_body_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad gateway</html>")

        with pytest.raises(TokenExchangeFailedError, match="invalid response"):
            await make_client(handler).exchange_code_for_token("code-1", RETURN_URL)

    @pytest.mark.asyncio
    async def test_timeout_is_distinguished(self):
        """A timeout should raise the timeout-specific error."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TokenExchangeTimeoutError):
            await make_client(handler).exchange_code_for_token("code-1", RETURN_URL)

    @pytest.mark.asyncio
    async def test_connection_error_is_not_a_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TokenExchangeFailedError) as exc_info:
            await make_client(handler).exchange_code_for_token("code-1", RETURN_URL)

        assert not isinstance(exc_info.value, TokenExchangeTimeoutError)


class TestFetchIdentity:
    """Tests for fetch_identity."""

    @pytest.mark.asyncio
    async def test_reads_infocard_for_token(self):
        """The infocard should be fetched by token and mapped to an identity."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "SSL_CLIENT_M_SERIAL": "ABC123",
                    "infocard": {
                        "Email": "a@b.com",
                        "FirstName": "Jane",
                        "LastName": "Doe",
                        "Alias": "jd",
                    },
                },
            )

        identity = await make_client(handler).fetch_identity(AccessToken("tok-123"))

        assert seen[0].method == "GET"
        assert str(seen[0].url) == "https://id.emercoin.test/infocard/tok-123"
        assert identity.provider_user_id == "abc123"
        assert identity.email == "a@b.com"
        assert identity.first_name == "Jane"
        assert identity.last_name == "Doe"
        assert identity.alias == "jd"

    @pytest.mark.asyncio
    async def test_missing_infocard_fields_are_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"SSL_CLIENT_M_SERIAL": "FF01"})

        identity = await make_client(handler).fetch_identity(AccessToken("tok"))

        assert identity.provider_user_id == "ff01"
        assert identity.email == ""
        assert identity.alias == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"infocard": {"Email": "a@b.com"}},
            {"SSL_CLIENT_M_SERIAL": ""},
            {"error": "invalid_token", "error_description": "Token expired"},
        ],
    )
    async def test_missing_serial_is_invalid_identity(self, body):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        with pytest.raises(InvalidIdentityError):
            await make_client(handler).fetch_identity(AccessToken("tok"))

    @pytest.mark.asyncio
    async def test_timeout_is_distinguished(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(IdentityFetchTimeoutError):
            await make_client(handler).fetch_identity(AccessToken("tok"))

    @pytest.mark.asyncio
    async def test_non_json_body_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="oops")

        with pytest.raises(IdentityFetchFailedError) as exc_info:
            await make_client(handler).fetch_identity(AccessToken("tok"))

        assert not isinstance(exc_info.value, InvalidIdentityError)


class TestTlsVerification:
    """Tests for certificate verification settings."""

    def test_verification_is_on_by_default(self):
        client = make_client(lambda request: httpx.Response(200))

        assert client._verify() is True

    def test_verification_can_be_disabled_explicitly(self):
        client = RealEmercoinIDClient(
            client_id="app-id",
            client_secret="app-secret",
            auth_page="https://id.emercoin.test/oauth/v2/auth",
            token_page="https://id.emercoin.test/oauth/v2/token",
            infocard="https://id.emercoin.test/infocard",
            verify_tls=False,
        )

        assert client._verify() is False
