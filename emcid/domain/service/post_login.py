"""Post-login destination handling."""

from urllib.parse import urlsplit

import logfire

from emcid.config import LoginSettings
from emcid.domain.model import Account

from .base import Service
from .persistent_data import POST_LOGIN_PATH_KEY, PersistentDataStore


def is_local_path(path: str) -> bool:
    """Whether ``path`` stays on this site.

    Only absolute paths are accepted; scheme-relative ("//host") and
    absolute URLs are rejected.
    """
    if not path.startswith("/") or path.startswith("//") or "\\" in path:
        return False
    parts = urlsplit(path)
    return not parts.scheme and not parts.netloc


class PostLoginManager(Service):
    """Remembers where a visitor wanted to go before the provider round trip."""

    def __init__(self, store: PersistentDataStore, login_settings: LoginSettings) -> None:
        """Initialize post-login manager.

        Args:
            store: Session store
            login_settings: Login settings with default paths
        """
        self.store = store
        self.login_settings = login_settings

    def save_post_login_path(self, destination: str | None) -> bool:
        """Store the requested destination if it is a local path.

        Args:
            destination: Value of the ``destination`` query parameter

        Returns:
            True if the destination was stored
        """
        if not destination:
            return False
        if not is_local_path(destination):
            logfire.warn("Ignoring non-local post login path", destination=destination)
            return False
        self.store.set(POST_LOGIN_PATH_KEY, destination)
        return True

    def get_post_login_path(self) -> str:
        """Consume the stored destination, falling back to the configured path."""
        path = self.store.get(POST_LOGIN_PATH_KEY)
        if path:
            self.store.set(POST_LOGIN_PATH_KEY, None)
            return path
        return self.login_settings.post_login_path

    @property
    def redirect_new_users_to_form(self) -> bool:
        return self.login_settings.redirect_new_users_to_form

    def get_path_to_user_form(self, account: Account) -> str:
        return self.login_settings.user_form_path.format(account_id=account.id)

    @property
    def login_path(self) -> str:
        return self.login_settings.login_path
