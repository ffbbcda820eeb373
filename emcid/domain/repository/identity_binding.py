"""Identity binding repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from emcid.domain.model.identity_binding import IdentityBinding


class IdentityBindingRepository(ABC):
    """Repository for IdentityBinding entity.

    There is at most one binding per provider user ID and a stored binding
    is never overwritten.
    """

    @abstractmethod
    async def find_by_provider_user_id(
        self, provider_user_id: str
    ) -> Optional[IdentityBinding]:
        """Find the binding for a provider identity.

        Args:
            provider_user_id: Lower-cased certificate serial

        Returns:
            The binding if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert_if_absent(self, binding: IdentityBinding) -> IdentityBinding:
        """Atomically store a binding unless one exists for its provider user ID.

        Args:
            binding: The candidate binding

        Returns:
            The stored binding: the candidate when it was inserted, the
            pre-existing binding otherwise
        """
        pass
