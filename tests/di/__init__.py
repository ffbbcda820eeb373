"""Mock providers for testing."""

from .emercoin import MockEmercoinProvider
from .persistence import MockPersistenceProvider
from .session import MockSessionProvider
from .container import build_test_container

__all__ = [
    "MockEmercoinProvider",
    "MockPersistenceProvider",
    "MockSessionProvider",
    "build_test_container",
]
