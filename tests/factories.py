"""Builders shared by the tests."""

from datetime import datetime, timezone
from uuid import uuid4

from emcid.domain.model import Account
from emcid.domain.value import AccountId, AccountStatus, Email, Username


def make_account(
    username: str = "jane-doe",
    email: str | None = None,
    status: AccountStatus = AccountStatus.ACTIVE,
    roles: frozenset[str] = frozenset(),
    is_superuser: bool = False,
) -> Account:
    """Helper function to build accounts for tests."""
    now = datetime.now(timezone.utc)
    return Account(
        id=AccountId(uuid4()),
        username=Username(username),
        email=Email(email or f"{username}@example.com"),
        status=status,
        roles=roles,
        password_hash="$argon2id$v=19$m=65536,t=3,p=4$c2FsdA$aGFzaA",
        is_superuser=is_superuser,
        created_at=now,
        updated_at=now,
    )


class ScriptedRandom:
    """Stand-in for random.Random returning scripted characters from choice()."""

    def __init__(self, *suffixes: str) -> None:
        self._chars = list("".join(suffixes))

    def choice(self, seq):
        return self._chars.pop(0)
