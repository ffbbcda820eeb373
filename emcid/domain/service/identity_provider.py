"""EmercoinID client interface."""

from emcid.domain.value import AccessToken, ProviderIdentity


class IdentityProviderClient:
    """Client for the two EmercoinID endpoints used during login."""

    def authorization_params(self, redirect_uri: str) -> dict[str, str]:
        """Build the query parameters of the authorization request.

        Args:
            redirect_uri: Return URL registered with the provider

        Returns:
            Query parameters (client_id, redirect_uri, response_type)
        """
        raise NotImplementedError

    def authorization_url(self, params: dict[str, str]) -> str:
        """Build the URL the visitor is redirected to.

        Args:
            params: Query parameters of the authorization request

        Returns:
            Absolute authorization URL
        """
        raise NotImplementedError

    async def exchange_code_for_token(
        self, code: str, redirect_uri: str
    ) -> AccessToken:
        """Exchange an authorization code for an access token.

        Args:
            code: Authorization code from the return request
            redirect_uri: Return URL used in the authorization request

        Returns:
            Access token

        Raises:
            TokenExchangeFailedError: If the exchange fails
            TokenExchangeTimeoutError: If the token endpoint timed out
        """
        raise NotImplementedError

    async def fetch_identity(self, access_token: AccessToken) -> ProviderIdentity:
        """Fetch the infocard for an access token.

        Args:
            access_token: Token from the exchange

        Returns:
            Verified provider identity

        Raises:
            IdentityFetchFailedError: If the infocard could not be read
            IdentityFetchTimeoutError: If the infocard endpoint timed out
            InvalidIdentityError: If the infocard has no certificate serial
        """
        raise NotImplementedError
