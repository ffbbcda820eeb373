"""Mappers for converting between database rows and domain models.

Domain models are immutable Pydantic models, so rows are mapped by hand.
"""

from typing import Any, Dict
from uuid import UUID

from emcid.domain.model import Account, IdentityBinding
from emcid.domain.value import (
    AccountId,
    AccountStatus,
    Email,
    IdentityBindingId,
    Username,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict

    Returns:
        Account domain model
    """
    return Account(
        id=AccountId(_uuid(row["id"])),
        username=Username(row["username"]),
        email=Email(row["email"]),
        status=AccountStatus(row["status"]),
        roles=frozenset(row.get("roles") or ()),
        password_hash=row["password_hash"],
        is_superuser=row["is_superuser"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict.

    Args:
        account: Account domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": account.id,
        "username": account.username.root,
        "email": account.email.root,
        "status": account.status.value,
        "roles": sorted(account.roles),
        "password_hash": account.password_hash,
        "is_superuser": account.is_superuser,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
    }


def row_to_identity_binding(row: Dict[str, Any]) -> IdentityBinding:
    """Convert database row to IdentityBinding domain model."""
    return IdentityBinding(
        id=IdentityBindingId(_uuid(row["id"])),
        provider_user_id=row["provider_user_id"],
        account_id=AccountId(_uuid(row["account_id"])),
        created_at=row["created_at"],
    )


def identity_binding_to_dict(binding: IdentityBinding) -> Dict[str, Any]:
    """Convert IdentityBinding domain model to database dict."""
    return binding.model_dump()
