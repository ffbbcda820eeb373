"""In-memory account repository for testing."""

from typing import Optional

from emcid.domain.error import PersistenceFailedError
from emcid.domain.model.account import Account
from emcid.domain.repository.account import AccountRepository
from emcid.domain.value import AccountId


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing.

    Enforces the same username and case-insensitive email uniqueness as
    the database.
    """

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_username(self, username: str) -> Optional[Account]:
        """Find an account by its username."""
        for account in self._accounts.values():
            if account.username.root == username:
                return account
        return None

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by its email, ignoring case."""
        for account in self._accounts.values():
            if account.email.root.lower() == email.lower():
                return account
        return None

    async def save(self, account: Account) -> Account:
        """Save or update an account."""
        for other in self._accounts.values():
            if other.id == account.id:
                continue
            if (
                other.username == account.username
                or other.email.root.lower() == account.email.root.lower()
            ):
                raise PersistenceFailedError(
                    f"Account {account.username.root} could not be stored"
                )
        self._accounts[account.id] = account
        return account

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account."""
        self._accounts.pop(account_id, None)
