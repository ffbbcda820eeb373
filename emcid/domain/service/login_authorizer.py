"""Decision whether an account may log in through EmercoinID."""

import logfire

from emcid.config import LoginSettings
from emcid.domain.model import Account
from emcid.domain.value import DenialReason, FlashMessage
from emcid.domain.value.common import ValueObject

from .base import Service
from .hooks import LoginHooks
from .session_engine import SessionEngine


class LoginDecision(ValueObject):
    """Outcome of one authorization attempt."""

    authorized: bool
    reason: DenialReason | None = None
    message: FlashMessage

    @classmethod
    def allow(cls, message: FlashMessage) -> "LoginDecision":
        return cls(authorized=True, message=message)

    @classmethod
    def deny(cls, reason: DenialReason, message: FlashMessage) -> "LoginDecision":
        return cls(authorized=False, reason=reason, message=message)


class LoginAuthorizer(Service):
    """Checks an account against login policy and finalizes the session.

    Checks run in order: superuser, roles, account status. A denied
    account never reaches the session engine.
    """

    def __init__(
        self,
        session_engine: SessionEngine,
        login_hooks: LoginHooks,
        login_settings: LoginSettings,
    ) -> None:
        """Initialize login authorizer.

        Args:
            session_engine: Session finalizer
            login_hooks: Extension points
            login_settings: Login policy
        """
        self.session_engine = session_engine
        self.login_hooks = login_hooks
        self.login_settings = login_settings

    async def authorize(self, account: Account) -> LoginDecision:
        """Log the account in if policy allows it.

        Args:
            account: Account bound to the provider identity

        Returns:
            Decision carrying the user-facing message
        """
        username = account.username.root

        with logfire.span(
            "login_authorizer.authorize", account_id=str(account.id), username=username
        ):
            if account.is_superuser and self.login_settings.disable_admin_login:
                logfire.warn(
                    "EmercoinID login prevented. Login for the superuser is disabled",
                    username=username,
                )
                return LoginDecision.deny(
                    DenialReason.ADMIN_LOGIN_DISABLED,
                    FlashMessage.error(
                        "EmercoinID login is disabled for site administrator. "
                        "Login with your local user account."
                    ),
                )

            disabled_role = self._disabled_role(account)
            if disabled_role:
                logfire.warn(
                    "EmercoinID login prevented. Login is disabled for role",
                    username=username,
                    role=disabled_role,
                )
                return LoginDecision.deny(
                    DenialReason.ROLE_DISABLED,
                    FlashMessage.error(
                        "EmercoinID login is disabled for your role. "
                        "Please login with your local user account."
                    ),
                )

            if not account.is_active:
                logfire.warn(
                    "EmercoinID login prevented. Account is blocked", username=username
                )
                return LoginDecision.deny(
                    DenialReason.ACCOUNT_BLOCKED,
                    FlashMessage.warning(
                        f"You could not be logged in because your user account "
                        f"{username} is not active."
                    ),
                )

            self.session_engine.finalize(account)
            try:
                await self.login_hooks.user_logged_in(account)
            except Exception:
                logfire.error(
                    "Login hook failed, session login revoked",
                    account_id=str(account.id),
                )
                self.session_engine.revoke()
                raise

            logfire.info("Account logged in", account_id=str(account.id))
            return LoginDecision.allow(
                FlashMessage.status(f"You are now logged in as {username}.")
            )

    def _disabled_role(self, account: Account) -> str | None:
        disabled = account.roles & self.login_settings.disabled_roles
        return min(disabled) if disabled else None
