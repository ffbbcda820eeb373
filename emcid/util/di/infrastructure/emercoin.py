"""EmercoinID infrastructure providers."""

from pathlib import Path

from dishka import Scope, provide

from emcid.adapter.emercoin import EmercoinIDClient, RealEmercoinIDClient
from emcid.config import EmercoinIDSettings
from emcid.util.di.base import ProviderBase
from emcid.util.error import ConfigurationError


class EmercoinProvider(ProviderBase):
    """EmercoinID component base."""

    __mock_component__ = "emercoin"


class ProdEmercoinProvider(EmercoinProvider):
    """Production EmercoinID provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_emercoin_client(self, settings: EmercoinIDSettings) -> EmercoinIDClient:
        """Provide EmercoinID client.

        Incomplete provider settings are not an error here: the login
        routes report them to the visitor.

        Raises:
            ConfigurationError: If the configured CA bundle does not exist
        """
        if settings.ca_bundle and not Path(settings.ca_bundle).is_file():
            raise ConfigurationError(
                f"EmercoinID CA bundle not found: {settings.ca_bundle}"
            )

        return RealEmercoinIDClient(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            auth_page=settings.auth_page,
            token_page=settings.token_page,
            infocard=settings.infocard,
            timeout=settings.timeout,
            verify_tls=settings.verify_tls,
            ca_bundle=settings.ca_bundle,
        )
