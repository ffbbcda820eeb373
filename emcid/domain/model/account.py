"""Account aggregate root.

A principal of this service. Accounts created through EmercoinID never
authenticate with their password.
"""

from datetime import datetime

from pydantic import Field, field_validator

from emcid.domain.model.common import DomainModel
from emcid.domain.value import AccountId, AccountStatus, Email, Username

AUTHENTICATED_ROLE = "authenticated"


class Account(DomainModel):
    """Local account."""

    id: AccountId
    username: Username
    email: Email
    status: AccountStatus = AccountStatus.BLOCKED
    roles: frozenset[str] = frozenset({AUTHENTICATED_ROLE})
    password_hash: str
    is_superuser: bool = False  # The distinguished first account
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("roles")
    @classmethod
    def include_authenticated_role(cls, v: frozenset[str]) -> frozenset[str]:
        """Every account carries the authenticated role."""
        return v | {AUTHENTICATED_ROLE}

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE
