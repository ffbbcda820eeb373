"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from emcid.config import (
    AccountSettings,
    EmercoinIDSettings,
    LoginSettings,
    Settings,
)
from emcid.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_emercoin_settings(self, settings: Settings) -> EmercoinIDSettings:
        return settings.emercoin

    @provide(scope=Scope.APP)
    def provide_login_settings(self, settings: Settings) -> LoginSettings:
        return settings.login

    @provide(scope=Scope.APP)
    def provide_account_settings(self, settings: Settings) -> AccountSettings:
        return settings.accounts
