"""Complete login use case."""

import logfire
from pydantic import BaseModel

from emcid.application.usecase.base import BaseUseCase
from emcid.config import EmercoinIDSettings
from emcid.domain.error import (
    AccountValidationError,
    DomainError,
    IdentityFetchFailedError,
    InvalidIdentityError,
    PersistenceFailedError,
    RegistrationBlockedError,
    TokenExchangeFailedError,
)
from emcid.domain.model import Account
from emcid.domain.service import (
    AccessTokenLease,
    AccountLinker,
    IdentityProviderClient,
    LoginAuthorizer,
    LoginDecision,
    PersistentDataStore,
    PostLoginManager,
    access_token_lease,
)
from emcid.domain.value import DenialReason, FlashMessage, ProviderIdentity

from .initiate_login import NOT_CONFIGURED_MESSAGE
from .redirect import LoginOutcome, LoginRedirect

PROVIDER_FAILURE_MESSAGE = "Login with EmercoinID failed. Please try again."
INVALID_USER_MESSAGE = "Invalid User"
LOGIN_FAILED_MESSAGE = "Login process with this EmercoinID certificate wasn't successful."
AWAITING_ACTIVATION_MESSAGE = (
    "You will receive an email when site administrator activates your account."
)
CREATION_FAILED_MESSAGE = (
    "Creation of user account failed. Please contact site administrator."
)
CHECK_DETAILS_MESSAGE = (
    "Please check your account details. Since you logged in with Emercoin ID, "
    "you don't need to update your password."
)

DENIAL_OUTCOMES = {
    DenialReason.ADMIN_LOGIN_DISABLED: LoginOutcome.ADMIN_LOGIN_DISABLED,
    DenialReason.ROLE_DISABLED: LoginOutcome.ROLE_DISABLED,
    DenialReason.ACCOUNT_BLOCKED: LoginOutcome.ACCOUNT_BLOCKED,
}


class CompleteLoginRequest(BaseModel):
    """Return request from EmercoinID.

    These parameters come from the provider in the return URL.
    """

    code: str | None = None  # Authorization code
    state: str | None = None
    error: str | None = None  # e.g. access_denied
    error_description: str | None = None


class CompleteLoginUseCase(BaseUseCase):
    """Use case for finishing an EmercoinID login.

    Every failure becomes a redirect to the login page with a message; no
    error reaches the caller. The access token stays in the session only
    when the visitor ends up logged in.
    """

    def __init__(
        self,
        identity_provider: IdentityProviderClient,
        account_linker: AccountLinker,
        login_authorizer: LoginAuthorizer,
        post_login_manager: PostLoginManager,
        store: PersistentDataStore,
        emercoin_settings: EmercoinIDSettings,
    ) -> None:
        """Initialize complete login use case.

        Args:
            identity_provider: EmercoinID client
            account_linker: Identity to account linking
            login_authorizer: Login policy and session finalizer
            post_login_manager: Post-login path store
            store: Session store holding the access token
            emercoin_settings: Provider configuration
        """
        self.identity_provider = identity_provider
        self.account_linker = account_linker
        self.login_authorizer = login_authorizer
        self.post_login_manager = post_login_manager
        self.store = store
        self.emercoin_settings = emercoin_settings

    async def execute(self, request: CompleteLoginRequest) -> LoginRedirect:
        """Execute the return leg of the login flow.

        Steps:
        1. Check the provider configuration
        2. Reject provider errors and incomplete return requests
        3. Exchange the code for an access token and hold it
        4. Fetch the identity
        5. Log in the bound account, or create one and log it in

        Args:
            request: Return request parameters

        Returns:
            Redirect with outcome and user messages
        """
        with logfire.span("complete_login") as span:
            result = await self._complete(request)
            span.set_attribute("outcome", result.outcome.value)
            return result

    async def _complete(self, request: CompleteLoginRequest) -> LoginRedirect:
        if not self.emercoin_settings.is_configured:
            logfire.error("EmercoinID settings are incomplete")
            return self._fail(
                LoginOutcome.CONFIGURATION_INVALID,
                FlashMessage.error(NOT_CONFIGURED_MESSAGE),
            )

        if request.error or not request.code or not request.state:
            logfire.warn(
                "EmercoinID login request denied",
                error=request.error,
                error_description=request.error_description,
            )
            return self._fail(
                LoginOutcome.PROVIDER_REQUEST_DENIED,
                FlashMessage.error(request.error_description or PROVIDER_FAILURE_MESSAGE),
            )

        with access_token_lease(self.store) as lease:
            try:
                return await self._login(request.code, lease)
            except DomainError as e:
                logfire.error(
                    "EmercoinID login reached an unexpected state",
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return self._fail(
                    LoginOutcome.UNREACHABLE_STATE,
                    FlashMessage.error("Access denied."),
                )

    async def _login(self, code: str, lease: AccessTokenLease) -> LoginRedirect:
        try:
            token = await self.identity_provider.exchange_code_for_token(
                code, self.emercoin_settings.return_url
            )
        except TokenExchangeFailedError as e:
            return self._fail(
                LoginOutcome.TOKEN_EXCHANGE_FAILED,
                FlashMessage.error(e.description or PROVIDER_FAILURE_MESSAGE),
            )

        lease.hold(token)

        try:
            identity = await self.identity_provider.fetch_identity(token)
        except InvalidIdentityError:
            return self._fail(
                LoginOutcome.INVALID_IDENTITY, FlashMessage.error(INVALID_USER_MESSAGE)
            )
        except IdentityFetchFailedError:
            return self._fail(
                LoginOutcome.IDENTITY_FETCH_FAILED,
                FlashMessage.error(INVALID_USER_MESSAGE),
            )

        account = await self.account_linker.find_by_provider_id(
            identity.provider_user_id
        )
        if account:
            return await self._login_existing(account, lease)
        return await self._register(identity, lease)

    async def _login_existing(
        self, account: Account, lease: AccessTokenLease
    ) -> LoginRedirect:
        decision = await self.login_authorizer.authorize(account)
        if not decision.authorized:
            return self._deny(decision, FlashMessage.error(LOGIN_FAILED_MESSAGE))

        lease.retain()
        return LoginRedirect(
            url=self.post_login_manager.get_post_login_path(),
            outcome=LoginOutcome.AUTHORIZED,
            messages=[decision.message],
        )

    async def _register(
        self, identity: ProviderIdentity, lease: AccessTokenLease
    ) -> LoginRedirect:
        try:
            account = await self.account_linker.create_account(identity)
        except RegistrationBlockedError as e:
            return self._fail(LoginOutcome.REGISTRATION_BLOCKED, FlashMessage.error(str(e)))
        except AccountValidationError as e:
            return self._fail(
                LoginOutcome.VALIDATION_FAILED,
                FlashMessage.error(f"Creation of user account failed: {e.message}"),
            )
        except PersistenceFailedError as e:
            logfire.error("New account could not be stored", error=str(e))
            return self._fail(
                LoginOutcome.PERSISTENCE_FAILED, FlashMessage.error(CREATION_FAILED_MESSAGE)
            )

        decision = await self.login_authorizer.authorize(account)
        if not decision.authorized:
            return self._deny(decision, FlashMessage.warning(AWAITING_ACTIVATION_MESSAGE))

        lease.retain()
        if self.post_login_manager.redirect_new_users_to_form:
            return LoginRedirect(
                url=self.post_login_manager.get_path_to_user_form(account),
                outcome=LoginOutcome.AUTHORIZED_NEW_ACCOUNT,
                messages=[decision.message, FlashMessage.status(CHECK_DETAILS_MESSAGE)],
            )

        return LoginRedirect(
            url=self.post_login_manager.get_post_login_path(),
            outcome=LoginOutcome.AUTHORIZED_NEW_ACCOUNT,
            messages=[decision.message],
        )

    def _deny(self, decision: LoginDecision, notice: FlashMessage) -> LoginRedirect:
        outcome = DENIAL_OUTCOMES.get(decision.reason, LoginOutcome.UNREACHABLE_STATE)
        return self._fail(outcome, decision.message, notice)

    def _fail(self, outcome: LoginOutcome, *messages: FlashMessage) -> LoginRedirect:
        logfire.info("EmercoinID login failed", outcome=outcome.value)
        return LoginRedirect(
            url=self.post_login_manager.login_path,
            outcome=outcome,
            messages=list(messages),
        )
