"""Domain layer DI providers."""

from dishka import Scope, provide

from emcid.adapter.emercoin import EmercoinIDClient
from emcid.config import AccountSettings, LoginSettings
from emcid.domain.repository import AccountRepository, IdentityBindingRepository
from emcid.domain.service import (
    AccountLinker,
    IdentityMapper,
    IdentityProviderClient,
    LoginAuthorizer,
    LoginHooks,
    PersistentDataStore,
    PostLoginManager,
    SessionEngine,
)
from emcid.persistence.session import (
    CookieSessionEngine,
    FlashMessageQueue,
    SessionDataStore,
    SessionState,
)
from emcid.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with the repository session
    and the visitor's cookie session.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_identity_provider(self, client: EmercoinIDClient) -> IdentityProviderClient:
        """Expose the EmercoinID client through the domain port."""
        return client

    @provide(scope=Scope.APP)
    def get_login_hooks(self) -> LoginHooks:
        """Provide the hook dispatcher.

        Register hooks on the instance obtained from the container at
        application startup.
        """
        return LoginHooks()

    @provide
    def get_persistent_data_store(self, session: SessionState) -> PersistentDataStore:
        return SessionDataStore(session)

    @provide
    def get_session_engine(self, session: SessionState) -> SessionEngine:
        return CookieSessionEngine(session)

    @provide
    def get_flash_messages(self, session: SessionState) -> FlashMessageQueue:
        return FlashMessageQueue(session)

    @provide
    def get_identity_mapper(
        self, account_repository: AccountRepository, account_settings: AccountSettings
    ) -> IdentityMapper:
        """Provide username/email derivation service."""
        return IdentityMapper(
            account_repository=account_repository, account_settings=account_settings
        )

    @provide
    def get_account_linker(
        self,
        account_repository: AccountRepository,
        identity_binding_repository: IdentityBindingRepository,
        identity_mapper: IdentityMapper,
        login_hooks: LoginHooks,
        account_settings: AccountSettings,
    ) -> AccountLinker:
        """Provide account linking service."""
        return AccountLinker(
            account_repository=account_repository,
            identity_binding_repository=identity_binding_repository,
            identity_mapper=identity_mapper,
            login_hooks=login_hooks,
            account_settings=account_settings,
        )

    @provide
    def get_login_authorizer(
        self,
        session_engine: SessionEngine,
        login_hooks: LoginHooks,
        login_settings: LoginSettings,
    ) -> LoginAuthorizer:
        """Provide login policy service."""
        return LoginAuthorizer(
            session_engine=session_engine,
            login_hooks=login_hooks,
            login_settings=login_settings,
        )

    @provide
    def get_post_login_manager(
        self, store: PersistentDataStore, login_settings: LoginSettings
    ) -> PostLoginManager:
        """Provide post-login path service."""
        return PostLoginManager(store=store, login_settings=login_settings)
