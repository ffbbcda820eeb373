"""Domain model entities for EmercoinID login."""

from emcid.domain.model.account import AUTHENTICATED_ROLE, Account
from emcid.domain.model.identity_binding import IdentityBinding

__all__ = [
    "AUTHENTICATED_ROLE",
    "Account",
    "IdentityBinding",
]
