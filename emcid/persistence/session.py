"""Cookie-session backed storage for the login flow.

The session mapping is Starlette's ``request.session`` (signed cookie via
``SessionMiddleware``) in production and a plain dict in tests.
"""

from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any, NewType

import logfire

from emcid.domain.model import Account
from emcid.domain.service import PersistentDataStore, SessionEngine
from emcid.domain.value import FlashMessage, MessageLevel

# The visitor's session dict for the current request
SessionState = NewType("SessionState", dict)

SESSION_PREFIX = "emercoin_id_"
ACCOUNT_ID_KEY = "account_id"
LOGGED_IN_AT_KEY = "logged_in_at"
MESSAGES_KEY = "messages"


class SessionDataStore(PersistentDataStore):
    """PersistentDataStore over the visitor's session, with prefixed keys."""

    def __init__(
        self, session: MutableMapping[str, Any], prefix: str = SESSION_PREFIX
    ) -> None:
        self.session = session
        self.prefix = prefix

    def get(self, key: str) -> Any:
        return self.session.get(self.prefix + key)

    def set(self, key: str, value: Any) -> None:
        if value is None:
            self.session.pop(self.prefix + key, None)
        else:
            self.session[self.prefix + key] = value


class CookieSessionEngine(SessionEngine):
    """Logs the visitor in by writing the account into the session."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self.session = session

    def finalize(self, account: Account) -> None:
        self.session[ACCOUNT_ID_KEY] = str(account.id)
        self.session[LOGGED_IN_AT_KEY] = datetime.now(timezone.utc).isoformat()
        logfire.info("Session finalized", account_id=str(account.id))

    def revoke(self) -> None:
        self.session.pop(ACCOUNT_ID_KEY, None)
        self.session.pop(LOGGED_IN_AT_KEY, None)
        logfire.info("Session login revoked")


class FlashMessageQueue:
    """Messages carried across the redirect to the next page."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self.session = session

    def add(self, message: FlashMessage) -> None:
        queued = list(self.session.get(MESSAGES_KEY, []))
        queued.append({"level": message.level.value, "text": message.text})
        self.session[MESSAGES_KEY] = queued

    def extend(self, messages: list[FlashMessage]) -> None:
        for message in messages:
            self.add(message)

    def pop_all(self) -> list[FlashMessage]:
        """Return and clear every queued message, oldest first."""
        queued = self.session.pop(MESSAGES_KEY, [])
        return [
            FlashMessage(level=MessageLevel(item["level"]), text=item["text"])
            for item in queued
        ]
