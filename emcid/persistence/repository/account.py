"""PostgreSQL implementation of Account repository."""

from typing import Optional

import logfire
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from emcid.domain.error import PersistenceFailedError
from emcid.domain.model import Account
from emcid.domain.repository import AccountRepository
from emcid.domain.value import AccountId
from emcid.persistence.mappers import account_to_dict, row_to_account
from emcid.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_username(self, username: str) -> Optional[Account]:
        stmt = select(accounts_table).where(accounts_table.c.username == username)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        stmt = select(accounts_table).where(
            func.lower(accounts_table.c.email) == email.lower()
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        The write runs in a savepoint so a constraint violation leaves the
        surrounding transaction usable.

        Args:
            account: Account to save

        Returns:
            Saved account

        Raises:
            PersistenceFailedError: If the row could not be written
        """
        account_dict = account_to_dict(account)

        try:
            async with self.session.begin_nested():
                existing = await self.find_by_id(account.id)
                if existing:
                    stmt = (
                        accounts_table.update()
                        .where(accounts_table.c.id == account.id)
                        .values(**account_dict)
                    )
                else:
                    stmt = accounts_table.insert().values(**account_dict)
                await self.session.execute(stmt)
        except IntegrityError as e:
            logfire.error(
                "Account violates a uniqueness constraint",
                account_id=str(account.id),
                error=str(e.orig),
            )
            raise PersistenceFailedError(
                f"Account {account.username.root} could not be stored"
            ) from e
        except SQLAlchemyError as e:
            logfire.error(
                "Account could not be stored", account_id=str(account.id), error=str(e)
            )
            raise PersistenceFailedError(
                f"Account {account.username.root} could not be stored"
            ) from e

        return account

    async def delete(self, account_id: AccountId) -> None:
        stmt = accounts_table.delete().where(accounts_table.c.id == account_id)
        await self.session.execute(stmt)
        await self.session.flush()
