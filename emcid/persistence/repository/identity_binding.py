"""IdentityBinding repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from emcid.domain.error import PersistenceFailedError
from emcid.domain.model import IdentityBinding
from emcid.domain.repository import IdentityBindingRepository
from emcid.persistence.mappers import identity_binding_to_dict, row_to_identity_binding
from emcid.persistence.tables import identity_bindings_table


class PostgresIdentityBindingRepository(IdentityBindingRepository):
    """PostgreSQL implementation of IdentityBindingRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_provider_user_id(
        self, provider_user_id: str
    ) -> Optional[IdentityBinding]:
        """Get binding by certificate serial.

        Args:
            provider_user_id: Lower-cased certificate serial

        Returns:
            IdentityBinding if found, None otherwise
        """
        stmt = select(identity_bindings_table).where(
            identity_bindings_table.c.provider_user_id == provider_user_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity_binding(dict(row))

    async def insert_if_absent(self, binding: IdentityBinding) -> IdentityBinding:
        """Insert the binding, keeping any binding stored concurrently.

        Args:
            binding: Candidate binding

        Returns:
            The binding stored for the provider user ID

        Raises:
            PersistenceFailedError: If no binding could be read back
        """
        stmt = (
            insert(identity_bindings_table)
            .values(**identity_binding_to_dict(binding))
            .on_conflict_do_nothing(index_elements=["provider_user_id"])
        )
        await self.session.execute(stmt)
        await self.session.flush()

        stored = await self.find_by_provider_user_id(binding.provider_user_id)
        if not stored:
            raise PersistenceFailedError(
                f"Binding for {binding.provider_user_id} could not be stored"
            )
        return stored
