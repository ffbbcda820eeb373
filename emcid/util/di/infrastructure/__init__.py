"""Infrastructure providers."""

# Import bases
from .emercoin import EmercoinProvider
from .persistence import PersistenceProvider
from .session import SessionProvider

# Import implementations (needed for __subclasses__())
from .emercoin import ProdEmercoinProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401
from .session import ProdSessionProvider  # noqa: F401

__all__ = [
    "EmercoinProvider",
    "PersistenceProvider",
    "ProdEmercoinProvider",
    "ProdPersistenceProvider",
    "ProdSessionProvider",
    "SessionProvider",
]
