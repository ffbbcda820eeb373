"""Result of the login use cases."""

from enum import Enum

from pydantic import BaseModel

from emcid.domain.value import FlashMessage


class LoginOutcome(str, Enum):
    """Terminal state of one login request."""

    AWAITING_PROVIDER = "awaiting_provider"
    AUTHORIZED = "authorized"
    AUTHORIZED_NEW_ACCOUNT = "authorized_new_account"
    CONFIGURATION_INVALID = "configuration_invalid"
    PROVIDER_REQUEST_DENIED = "provider_request_denied"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    IDENTITY_FETCH_FAILED = "identity_fetch_failed"
    INVALID_IDENTITY = "invalid_identity"
    REGISTRATION_BLOCKED = "registration_blocked"
    VALIDATION_FAILED = "validation_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    ADMIN_LOGIN_DISABLED = "admin_login_disabled"
    ROLE_DISABLED = "role_disabled"
    ACCOUNT_BLOCKED = "account_blocked"
    UNREACHABLE_STATE = "unreachable_state"

    @property
    def authorized(self) -> bool:
        return self in (LoginOutcome.AUTHORIZED, LoginOutcome.AUTHORIZED_NEW_ACCOUNT)


class LoginRedirect(BaseModel):
    """Where to send the browser, and what to tell the user."""

    url: str
    outcome: LoginOutcome
    messages: list[FlashMessage] = []
