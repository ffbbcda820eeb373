"""Domain value objects for EmercoinID login."""

from emcid.domain.value.identifiers import AccountId, IdentityBindingId
from emcid.domain.value.types import (
    AccessToken,
    AccountStatus,
    DenialReason,
    Email,
    FlashMessage,
    MessageLevel,
    ProviderIdentity,
    Username,
)

__all__ = [
    # Identifiers
    "AccountId",
    "IdentityBindingId",
    # Types
    "AccessToken",
    "AccountStatus",
    "DenialReason",
    "Email",
    "FlashMessage",
    "MessageLevel",
    "ProviderIdentity",
    "Username",
]
