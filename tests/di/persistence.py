"""Mock persistence providers for testing."""

from dishka import Scope, provide

from emcid.domain.repository import AccountRepository, IdentityBindingRepository
from emcid.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryIdentityBindingRepository,
)
from emcid.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    APP scope keeps accounts across the requests of one container, so a
    flow spanning several HTTP requests sees its own writes. Each test
    builds its own container.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_account_repository(self) -> AccountRepository:
        """Provide in-memory account repository."""
        return InMemoryAccountRepository()

    @provide(scope=Scope.APP)
    def get_identity_binding_repository(self) -> IdentityBindingRepository:
        """Provide in-memory identity binding repository."""
        return InMemoryIdentityBindingRepository()
