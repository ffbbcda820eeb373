"""Domain value objects.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules.
"""

import re
from enum import Enum

from pydantic import field_validator

from emcid.domain.value.common import RootValueObject, ValueObject

USERNAME_MAX_LENGTH = 60
EMAIL_MAX_LENGTH = 254

_USERNAME_PATTERN = re.compile(r"^[\w.@+'-]+$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AccountStatus(str, Enum):
    """Status of a local account."""

    ACTIVE = "active"
    BLOCKED = "blocked"


class DenialReason(str, Enum):
    """Why a login attempt was refused for an existing account."""

    ADMIN_LOGIN_DISABLED = "admin_login_disabled"
    ROLE_DISABLED = "role_disabled"
    ACCOUNT_BLOCKED = "account_blocked"


class MessageLevel(str, Enum):
    """Severity of a user-facing message."""

    STATUS = "status"
    WARNING = "warning"
    ERROR = "error"


class Username(RootValueObject[str]):
    """Local account name.

    No spaces, at most 60 characters, letters, digits and ``. @ + ' _ -``.
    Examples: 'jane-doe', 'emcid_4k2x9'
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        if not v:
            raise ValueError("You must enter a username.")
        if len(v) > USERNAME_MAX_LENGTH:
            raise ValueError(
                f"The username {v} is too long: it must be "
                f"{USERNAME_MAX_LENGTH} characters or less."
            )
        if not _USERNAME_PATTERN.match(v):
            raise ValueError(f"The username {v} contains an illegal character.")
        return v


class Email(RootValueObject[str]):
    """Account email address."""

    @field_validator("root")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        if len(v) > EMAIL_MAX_LENGTH:
            raise ValueError(
                f"The email address {v} is too long: it must be "
                f"{EMAIL_MAX_LENGTH} characters or less."
            )
        if not _EMAIL_PATTERN.match(v):
            raise ValueError(f"The email address {v} is not valid.")
        return v


class AccessToken(RootValueObject[str]):
    """Opaque EmercoinID bearer token."""

    @field_validator("root")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate token is not empty."""
        if not v:
            raise ValueError("Access token must not be empty")
        return v


class ProviderIdentity(ValueObject):
    """Identity returned by the EmercoinID infocard.

    ``provider_user_id`` is the lower-cased serial number of the client
    certificate and is the only attribute that identifies the person.
    """

    provider_user_id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    alias: str = ""

    @field_validator("provider_user_id")
    @classmethod
    def validate_provider_user_id(cls, v: str) -> str:
        """Normalize and require the certificate serial."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Provider user ID must not be empty")
        return v


class FlashMessage(ValueObject):
    """Message shown to the user after a redirect."""

    level: MessageLevel
    text: str

    @classmethod
    def status(cls, text: str) -> "FlashMessage":
        return cls(level=MessageLevel.STATUS, text=text)

    @classmethod
    def warning(cls, text: str) -> "FlashMessage":
        return cls(level=MessageLevel.WARNING, text=text)

    @classmethod
    def error(cls, text: str) -> "FlashMessage":
        return cls(level=MessageLevel.ERROR, text=text)
