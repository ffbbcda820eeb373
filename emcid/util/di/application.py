"""Application layer DI providers."""

from dishka import Scope, provide

from emcid.application.usecase.auth import CompleteLoginUseCase, InitiateLoginUseCase
from emcid.config import EmercoinIDSettings
from emcid.domain.service import (
    AccountLinker,
    IdentityProviderClient,
    LoginAuthorizer,
    LoginHooks,
    PersistentDataStore,
    PostLoginManager,
)
from emcid.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application provider - concrete, no mocks needed.

    Use cases are REQUEST-scoped to match the domain services they use.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.REQUEST)
    def get_initiate_login_use_case(
        self,
        identity_provider: IdentityProviderClient,
        post_login_manager: PostLoginManager,
        login_hooks: LoginHooks,
        emercoin_settings: EmercoinIDSettings,
    ) -> InitiateLoginUseCase:
        """Provide initiate login use case."""
        return InitiateLoginUseCase(
            identity_provider=identity_provider,
            post_login_manager=post_login_manager,
            login_hooks=login_hooks,
            emercoin_settings=emercoin_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_complete_login_use_case(
        self,
        identity_provider: IdentityProviderClient,
        account_linker: AccountLinker,
        login_authorizer: LoginAuthorizer,
        post_login_manager: PostLoginManager,
        store: PersistentDataStore,
        emercoin_settings: EmercoinIDSettings,
    ) -> CompleteLoginUseCase:
        """Provide complete login use case."""
        return CompleteLoginUseCase(
            identity_provider=identity_provider,
            account_linker=account_linker,
            login_authorizer=login_authorizer,
            post_login_manager=post_login_manager,
            store=store,
            emercoin_settings=emercoin_settings,
        )
