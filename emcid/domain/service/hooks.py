"""Extension points of the login flow.

Hooks run synchronously, in registration order, inside the request that
triggered them. Subclass ``LoginHook`` and override what you need.
"""

import logfire

from emcid.domain.model import Account

from .base import Service


class LoginHook:
    """Callback contract for code that reacts to the login flow."""

    async def before_redirect(self, params: dict[str, str]) -> dict[str, str]:
        """Inspect or amend the authorization request parameters.

        Args:
            params: Query parameters sent to the provider

        Returns:
            Parameters to use
        """
        return params

    async def account_created(self, account: Account, provider_user_id: str) -> None:
        """React to a local account created from a provider identity."""
        return None

    async def user_logged_in(self, account: Account) -> None:
        """React to a finalized login."""
        return None


class LoginHooks(Service):
    """Dispatches login flow events to the registered hooks."""

    def __init__(self, hooks: list[LoginHook] | None = None) -> None:
        """Initialize hook dispatcher.

        Args:
            hooks: Hooks to call, in order
        """
        self.hooks = list(hooks or [])

    def register(self, hook: LoginHook) -> None:
        self.hooks.append(hook)

    async def before_redirect(self, params: dict[str, str]) -> dict[str, str]:
        for hook in self.hooks:
            params = await hook.before_redirect(dict(params))
        return params

    async def account_created(self, account: Account, provider_user_id: str) -> None:
        with logfire.span(
            "login_hooks.account_created",
            account_id=str(account.id),
            hook_count=len(self.hooks),
        ):
            for hook in self.hooks:
                await hook.account_created(account, provider_user_id)

    async def user_logged_in(self, account: Account) -> None:
        with logfire.span(
            "login_hooks.user_logged_in",
            account_id=str(account.id),
            hook_count=len(self.hooks),
        ):
            for hook in self.hooks:
                await hook.user_logged_in(account)
