"""Linking of provider identities to local accounts."""

import secrets
from datetime import datetime, timezone
from uuid import uuid4

from argon2 import PasswordHasher
import logfire
from pydantic import ValidationError as PydanticValidationError

from emcid.config import AccountSettings
from emcid.domain.error import (
    AccountValidationError,
    PersistenceFailedError,
    RegistrationBlockedError,
)
from emcid.domain.model import Account, IdentityBinding
from emcid.domain.repository import AccountRepository, IdentityBindingRepository
from emcid.domain.value import (
    AccountId,
    AccountStatus,
    Email,
    IdentityBindingId,
    ProviderIdentity,
    Username,
)

from .base import Service
from .hooks import LoginHooks
from .identity_mapper import IdentityMapper

# Hashes the throwaway password given to new accounts
_PASSWORD_HASHER = PasswordHasher()


def _first_error_message(error: PydanticValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    return errors[0]["msg"].removeprefix("Value error, ")


class AccountLinker(Service):
    """Finds or creates the local account bound to a provider identity."""

    def __init__(
        self,
        account_repository: AccountRepository,
        identity_binding_repository: IdentityBindingRepository,
        identity_mapper: IdentityMapper,
        login_hooks: LoginHooks,
        account_settings: AccountSettings,
    ) -> None:
        """Initialize account linker.

        Args:
            account_repository: Account repository
            identity_binding_repository: Identity binding repository
            identity_mapper: Username/email generator
            login_hooks: Extension points
            account_settings: Account policy
        """
        self.account_repository = account_repository
        self.identity_binding_repository = identity_binding_repository
        self.identity_mapper = identity_mapper
        self.login_hooks = login_hooks
        self.account_settings = account_settings

    async def find_by_provider_id(self, provider_user_id: str) -> Account | None:
        """Load the account bound to a provider identity.

        Args:
            provider_user_id: Lower-cased certificate serial

        Returns:
            Bound account, or None if the identity was never seen
        """
        with logfire.span(
            "account_linker.find_by_provider_id", provider_user_id=provider_user_id
        ):
            binding = await self.identity_binding_repository.find_by_provider_user_id(
                provider_user_id
            )
            if not binding:
                logfire.info("No binding for identity", provider_user_id=provider_user_id)
                return None

            account = await self.account_repository.find_by_id(binding.account_id)
            if not account:
                logfire.warn(
                    "Binding points at a missing account",
                    provider_user_id=provider_user_id,
                    account_id=str(binding.account_id),
                )
                return None

            logfire.info(
                "Bound account found",
                provider_user_id=provider_user_id,
                account_id=str(account.id),
            )
            return account

    async def create_account(self, identity: ProviderIdentity) -> Account:
        """Create a local account for a never-seen provider identity.

        Args:
            identity: Identity from the infocard

        Returns:
            Account bound to the identity

        Raises:
            RegistrationBlockedError: If only administrators may create accounts
            AccountValidationError: If the derived fields are not acceptable
            PersistenceFailedError: If the account could not be stored
        """
        with logfire.span(
            "account_linker.create_account",
            provider_user_id=identity.provider_user_id,
        ):
            if self.account_settings.registration == "admin_only":
                logfire.warn(
                    "Failed to create account. Registration is restricted to administrators",
                    provider_user_id=identity.provider_user_id,
                )
                raise RegistrationBlockedError(
                    "Only existing users can log in with EmercoinID. "
                    "Contact system administrator."
                )

            username = await self.identity_mapper.derive_username(
                identity.first_name, identity.last_name
            )
            email = await self.identity_mapper.derive_email(identity.email, username)

            status = (
                AccountStatus.ACTIVE
                if self.account_settings.registration == "visitors"
                else AccountStatus.BLOCKED
            )
            password = secrets.token_urlsafe(self.account_settings.password_length)[
                : self.account_settings.password_length
            ]

            now = datetime.now(timezone.utc)
            try:
                account = Account(
                    id=AccountId(uuid4()),
                    username=Username(username),
                    email=Email(email),
                    status=status,
                    password_hash=_PASSWORD_HASHER.hash(password),
                    created_at=now,
                    updated_at=now,
                )
            except PydanticValidationError as e:
                message = _first_error_message(e)
                logfire.error("Could not create new account", error=message)
                raise AccountValidationError(message) from e

            saved = await self.account_repository.save(account)
            logfire.info(
                "New account created",
                username=saved.username.root,
                account_id=str(saved.id),
                status=saved.status.value,
            )

            binding = await self.identity_binding_repository.insert_if_absent(
                IdentityBinding(
                    id=IdentityBindingId(uuid4()),
                    provider_user_id=identity.provider_user_id,
                    account_id=saved.id,
                    created_at=now,
                )
            )

            if binding.account_id != saved.id:
                return await self._resolve_lost_race(saved, binding)

            await self.login_hooks.account_created(saved, identity.provider_user_id)
            return saved

    async def _resolve_lost_race(
        self, created: Account, binding: IdentityBinding
    ) -> Account:
        """Drop an account created by a login that lost the binding race.

        A concurrent first login for the same identity stored its binding
        first; the account it points at is the one to use.
        """
        logfire.warn(
            "Identity was bound concurrently, discarding duplicate account",
            provider_user_id=binding.provider_user_id,
            discarded_account_id=str(created.id),
            account_id=str(binding.account_id),
        )
        await self.account_repository.delete(created.id)

        winner = await self.account_repository.find_by_id(binding.account_id)
        if not winner:
            raise PersistenceFailedError(
                f"Account {binding.account_id} bound to the identity no longer exists"
            )
        return winner
