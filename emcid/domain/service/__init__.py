"""Domain services."""

from .account_linker import AccountLinker
from .base import Service
from .hooks import LoginHook, LoginHooks
from .identity_mapper import IdentityMapper
from .identity_provider import IdentityProviderClient
from .login_authorizer import LoginAuthorizer, LoginDecision
from .persistent_data import (
    ACCESS_TOKEN_KEY,
    AccessTokenLease,
    PersistentDataStore,
    access_token_lease,
)
from .post_login import PostLoginManager
from .session_engine import SessionEngine

__all__ = [
    "ACCESS_TOKEN_KEY",
    "AccessTokenLease",
    "AccountLinker",
    "IdentityMapper",
    "IdentityProviderClient",
    "LoginAuthorizer",
    "LoginDecision",
    "LoginHook",
    "LoginHooks",
    "PersistentDataStore",
    "PostLoginManager",
    "Service",
    "SessionEngine",
    "access_token_lease",
]
