"""Initiate login use case."""

import logfire
from pydantic import BaseModel

from emcid.application.usecase.base import BaseUseCase
from emcid.config import EmercoinIDSettings
from emcid.domain.service import IdentityProviderClient, LoginHooks, PostLoginManager
from emcid.domain.value import FlashMessage

from .redirect import LoginOutcome, LoginRedirect

NOT_CONFIGURED_MESSAGE = (
    "Emercoin ID not configured properly. Contact site administrator."
)


class InitiateLoginRequest(BaseModel):
    """Login link click."""

    destination: str | None = None  # Path to return to after login


class InitiateLoginUseCase(BaseUseCase):
    """Use case for sending the visitor to EmercoinID."""

    def __init__(
        self,
        identity_provider: IdentityProviderClient,
        post_login_manager: PostLoginManager,
        login_hooks: LoginHooks,
        emercoin_settings: EmercoinIDSettings,
    ) -> None:
        """Initialize initiate login use case.

        Args:
            identity_provider: EmercoinID client
            post_login_manager: Post-login path store
            login_hooks: Extension points
            emercoin_settings: Provider configuration
        """
        self.identity_provider = identity_provider
        self.post_login_manager = post_login_manager
        self.login_hooks = login_hooks
        self.emercoin_settings = emercoin_settings

    async def execute(self, request: InitiateLoginRequest) -> LoginRedirect:
        """Build the authorization redirect.

        Args:
            request: Initiate request with optional destination

        Returns:
            Redirect to the provider, or to the login page when the
            provider is not configured
        """
        with logfire.span("initiate_login", has_destination=bool(request.destination)):
            if not self.emercoin_settings.is_configured:
                logfire.error("EmercoinID settings are incomplete")
                return LoginRedirect(
                    url=self.post_login_manager.login_path,
                    outcome=LoginOutcome.CONFIGURATION_INVALID,
                    messages=[FlashMessage.error(NOT_CONFIGURED_MESSAGE)],
                )

            self.post_login_manager.save_post_login_path(request.destination)

            params = self.identity_provider.authorization_params(
                self.emercoin_settings.return_url
            )
            params = await self.login_hooks.before_redirect(params)

            return LoginRedirect(
                url=self.identity_provider.authorization_url(params),
                outcome=LoginOutcome.AWAITING_PROVIDER,
            )
