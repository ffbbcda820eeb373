"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from emcid.domain.model.account import Account
from emcid.domain.value import AccountId


class AccountRepository(ABC):
    """Repository for Account aggregate.

    Defines the contract for account persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[Account]:
        """Find an account by its username.

        Args:
            username: The account name

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by its email, ignoring case.

        Args:
            email: The email address

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        Args:
            account: The account to save

        Returns:
            The saved account

        Raises:
            PersistenceFailedError: If the account could not be stored,
                e.g. username or email already taken
        """
        pass

    @abstractmethod
    async def delete(self, account_id: AccountId) -> None:
        """Delete an account.

        Args:
            account_id: The account to delete
        """
        pass
