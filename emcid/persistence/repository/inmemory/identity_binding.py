"""In-memory identity binding repository for testing."""

from typing import Optional

from emcid.domain.model.identity_binding import IdentityBinding
from emcid.domain.repository.identity_binding import IdentityBindingRepository


class InMemoryIdentityBindingRepository(IdentityBindingRepository):
    """In-memory implementation of IdentityBindingRepository for testing."""

    def __init__(self) -> None:
        self._bindings: dict[str, IdentityBinding] = {}

    async def find_by_provider_user_id(
        self, provider_user_id: str
    ) -> Optional[IdentityBinding]:
        """Find binding by certificate serial."""
        return self._bindings.get(provider_user_id)

    async def insert_if_absent(self, binding: IdentityBinding) -> IdentityBinding:
        """Store the binding unless the serial is already bound."""
        return self._bindings.setdefault(binding.provider_user_id, binding)
