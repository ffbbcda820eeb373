"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .identity_binding import InMemoryIdentityBindingRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryIdentityBindingRepository",
]
