"""PostgreSQL repository implementations."""

from emcid.persistence.repository.account import PostgresAccountRepository
from emcid.persistence.repository.identity_binding import (
    PostgresIdentityBindingRepository,
)

__all__ = [
    "PostgresAccountRepository",
    "PostgresIdentityBindingRepository",
]
