"""Login session interface."""

from emcid.domain.model import Account


class SessionEngine:
    """Establishes the authenticated session for an account."""

    def finalize(self, account: Account) -> None:
        """Mark the current session as logged in as ``account``.

        Args:
            account: Account that passed authorization
        """
        raise NotImplementedError

    def revoke(self) -> None:
        """Undo ``finalize``, leaving the session anonymous."""
        raise NotImplementedError
