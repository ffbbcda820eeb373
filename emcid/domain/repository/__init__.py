"""Repository interfaces for the EmercoinID login domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from emcid.domain.repository.account import AccountRepository
from emcid.domain.repository.identity_binding import IdentityBindingRepository

__all__ = [
    "AccountRepository",
    "IdentityBindingRepository",
]
