"""Identity binding entity.

Links an EmercoinID certificate serial to exactly one local account.
"""

from datetime import datetime

from pydantic import Field

from emcid.domain.model.common import DomainModel
from emcid.domain.value import AccountId, IdentityBindingId


class IdentityBinding(DomainModel):
    """Binding of a provider identity to a local account.

    Created once when the account is created and never updated.
    """

    id: IdentityBindingId
    provider_user_id: str  # Lower-cased certificate serial
    account_id: AccountId
    created_at: datetime = Field(default_factory=datetime.now)
