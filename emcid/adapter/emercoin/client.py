"""EmercoinID client implementation.

EmercoinID authenticates visitors with an X.509 client certificate and
exposes an OAuth-like code flow: the authorization code is exchanged for an
access token, and the token addresses the visitor's infocard.
"""

import ssl
from typing import Any
from urllib.parse import urlencode

import httpx
import logfire

from emcid.domain.error import (
    IdentityFetchFailedError,
    IdentityFetchTimeoutError,
    InvalidIdentityError,
    TokenExchangeFailedError,
    TokenExchangeTimeoutError,
)
from emcid.domain.service.identity_provider import IdentityProviderClient
from emcid.domain.value import AccessToken, ProviderIdentity

INFOCARD_FIELDS = {
    "email": "Email",
    "first_name": "FirstName",
    "last_name": "LastName",
    "alias": "Alias",
}


class EmercoinIDClient(IdentityProviderClient):
    """Base class for EmercoinID clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealEmercoinIDClient(EmercoinIDClient):
    """EmercoinID client talking to the configured endpoints over httpx."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        auth_page: str,
        token_page: str,
        infocard: str,
        timeout: float = 10.0,
        verify_tls: bool = True,
        ca_bundle: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize EmercoinID client.

        Args:
            client_id: App client ID
            client_secret: App secret key
            auth_page: Authorization endpoint
            token_page: Token endpoint
            infocard: Infocard endpoint (the token is appended as a path segment)
            timeout: Timeout for each outbound request in seconds
            verify_tls: Verify the provider's certificate
            ca_bundle: CA file used for verification instead of the system store
            transport: httpx transport override
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.auth_page = auth_page
        self.token_page = token_page
        self.infocard_url = infocard
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.ca_bundle = ca_bundle
        self._transport = transport

        if not verify_tls:
            logfire.warn(
                "TLS certificate verification is DISABLED for EmercoinID requests. "
                "Tokens and identities can be intercepted; enable emercoin.verify_tls",
                token_page=token_page,
                infocard=infocard,
            )

    def _verify(self) -> ssl.SSLContext | bool:
        if not self.verify_tls:
            return False
        if self.ca_bundle:
            return ssl.create_default_context(cafile=self.ca_bundle)
        return True

    def _http_client(self) -> httpx.AsyncClient:
        if not self.verify_tls:
            logfire.warn("Sending EmercoinID request without TLS verification")
        return httpx.AsyncClient(
            verify=self._verify(),
            timeout=self.timeout,
            transport=self._transport,
        )

    def authorization_params(self, redirect_uri: str) -> dict[str, str]:
        return {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
        }

    def authorization_url(self, params: dict[str, str]) -> str:
        return f"{self.auth_page}?{urlencode(params)}"

    async def exchange_code_for_token(
        self, code: str, redirect_uri: str
    ) -> AccessToken:
        """Exchange authorization code for access token.

        The body is parsed as JSON whatever the HTTP status: the provider
        reports failures as ``{"error", "error_description"}``.

        Args:
            code: Authorization code from the return request
            redirect_uri: Return URL used in the authorization request

        Returns:
            Access token

        Raises:
            TokenExchangeTimeoutError: If the token endpoint timed out
            TokenExchangeFailedError: If the exchange fails
        """
        data = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded; charset=utf-8",
            "Accept-Charset": "utf-8;q=0.7,*;q=0.7",
        }

        try:
            async with self._http_client() as client:
                response = await client.post(self.token_page, data=data, headers=headers)
        except httpx.TimeoutException as e:
            logfire.error("EmercoinID token exchange timed out", error=str(e))
            raise TokenExchangeTimeoutError(
                f"Token exchange timed out after {self.timeout}s"
            )
        except httpx.HTTPError as e:
            logfire.error("EmercoinID token exchange HTTP error", error=str(e))
            raise TokenExchangeFailedError(f"HTTP error during token exchange: {e}")

        result = self._parse_json(response)
        if result is None:
            logfire.error(
                "EmercoinID token endpoint returned a non-JSON body",
                status_code=response.status_code,
            )
            raise TokenExchangeFailedError(
                f"Token endpoint returned an invalid response: {response.status_code}"
            )

        if "error" in result:
            description = result.get("error_description") or str(result["error"])
            logfire.error(
                "EmercoinID token exchange failed",
                status_code=response.status_code,
                error=result["error"],
                error_description=description,
            )
            raise TokenExchangeFailedError(
                f"Token exchange failed: {result['error']}", description=description
            )

        access_token = result.get("access_token")
        if not access_token or not isinstance(access_token, str):
            logfire.error(
                "EmercoinID token response has no access token",
                status_code=response.status_code,
            )
            raise TokenExchangeFailedError("Token response has no access token")

        return AccessToken(access_token)

    async def fetch_identity(self, access_token: AccessToken) -> ProviderIdentity:
        """Get the visitor's infocard.

        Args:
            access_token: Token from the exchange

        Returns:
            Identity with lower-cased certificate serial

        Raises:
            IdentityFetchTimeoutError: If the infocard endpoint timed out
            IdentityFetchFailedError: If the infocard could not be read
            InvalidIdentityError: If the infocard carries no serial
        """
        url = f"{self.infocard_url}/{access_token.root}"

        try:
            async with self._http_client() as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            logfire.error("EmercoinID infocard request timed out", error=str(e))
            raise IdentityFetchTimeoutError(
                f"Infocard request timed out after {self.timeout}s"
            )
        except httpx.HTTPError as e:
            logfire.error("EmercoinID infocard HTTP error", error=str(e))
            raise IdentityFetchFailedError(f"HTTP error fetching infocard: {e}")

        info = self._parse_json(response)
        if info is None:
            logfire.error(
                "EmercoinID infocard endpoint returned a non-JSON body",
                status_code=response.status_code,
            )
            raise IdentityFetchFailedError(
                f"Infocard request returned an invalid response: {response.status_code}"
            )

        serial = info.get("SSL_CLIENT_M_SERIAL")
        if not isinstance(serial, str) or not serial.strip():
            logfire.error(
                "EmercoinID infocard has no certificate serial",
                status_code=response.status_code,
                error=info.get("error"),
            )
            raise InvalidIdentityError(
                "Infocard has no certificate serial",
                description=info.get("error_description"),
            )

        card = info.get("infocard")
        if not isinstance(card, dict):
            card = {}

        fields = {
            name: "" if card.get(key) is None else str(card[key])
            for name, key in INFOCARD_FIELDS.items()
        }

        identity = ProviderIdentity(provider_user_id=serial, **fields)
        logfire.info(
            "EmercoinID infocard fetched",
            provider_user_id=identity.provider_user_id,
            has_email=bool(identity.email),
        )
        return identity

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any] | None:
        try:
            result = response.json()
        except ValueError:
            return None
        return result if isinstance(result, dict) else None


class MockEmercoinIDClient(EmercoinIDClient):
    """Mock EmercoinID client for testing.

    Returns deterministic data without network calls. Assign ``identity``,
    ``token_error`` or ``identity_error`` to steer a test.
    """

    def __init__(
        self,
        identity: ProviderIdentity | None = None,
        access_token: str = "mock-access-token",
    ) -> None:
        self.identity = identity or ProviderIdentity(
            provider_user_id="abc123",
            email="jane@example.com",
            first_name="Jane",
            last_name="Doe",
            alias="jane",
        )
        self.access_token = access_token
        self.token_error: Exception | None = None
        self.identity_error: Exception | None = None
        self.exchanged_codes: list[str] = []

    def authorization_params(self, redirect_uri: str) -> dict[str, str]:
        return {
            "client_id": "mock-client",
            "redirect_uri": redirect_uri,
            "response_type": "code",
        }

    def authorization_url(self, params: dict[str, str]) -> str:
        return f"https://id.emercoin.test/oauth/v2/auth?{urlencode(params)}&mock=true"

    async def exchange_code_for_token(
        self, code: str, redirect_uri: str
    ) -> AccessToken:
        self.exchanged_codes.append(code)
        if self.token_error:
            raise self.token_error
        return AccessToken(self.access_token)

    async def fetch_identity(self, access_token: AccessToken) -> ProviderIdentity:
        if self.identity_error:
            raise self.identity_error
        return self.identity
