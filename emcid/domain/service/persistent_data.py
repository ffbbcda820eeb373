"""Session-scoped key/value storage used during a login transaction."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import logfire

from emcid.domain.value import AccessToken

ACCESS_TOKEN_KEY = "emc_access_token"
POST_LOGIN_PATH_KEY = "post_login_path"


class PersistentDataStore:
    """Key/value store bound to the visitor's session.

    Implementations namespace keys so they cannot collide with unrelated
    session data. Setting a key to None removes it.
    """

    def get(self, key: str) -> Any:
        """Read a value.

        Args:
            key: Unprefixed key

        Returns:
            Stored value, or None when absent
        """
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        """Write a value, or clear it when value is None.

        Args:
            key: Unprefixed key
            value: Value to store
        """
        raise NotImplementedError


class AccessTokenLease:
    """The access token held by one login attempt."""

    def __init__(self, store: PersistentDataStore) -> None:
        self._store = store
        self._held = False
        self._retained = False

    def hold(self, token: AccessToken) -> None:
        """Store the token so hooks running later in the request can use it."""
        self._store.set(ACCESS_TOKEN_KEY, token.root)
        self._held = True

    def retain(self) -> None:
        """Keep the token in the session after the attempt ends."""
        self._retained = True

    def release(self) -> None:
        """Clear the token from the session."""
        self._store.set(ACCESS_TOKEN_KEY, None)
        if self._held:
            logfire.debug("Access token cleared")
        self._held = False

    @property
    def retained(self) -> bool:
        return self._retained


@contextmanager
def access_token_lease(store: PersistentDataStore) -> Iterator[AccessTokenLease]:
    """Own the access token for the duration of a login attempt.

    The token is cleared on every exit unless ``retain()`` was called,
    including when the block raises.

    Args:
        store: Session store holding the token

    Yields:
        Lease for the attempt
    """
    lease = AccessTokenLease(store)
    try:
        yield lease
    finally:
        if not lease.retained:
            lease.release()
