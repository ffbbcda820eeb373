"""Unit tests for CompleteLoginUseCase."""

from uuid import uuid4

from dishka import AsyncContainer
import pytest

from emcid.adapter.emercoin import EmercoinIDClient
from emcid.application.usecase.auth import (
    CompleteLoginRequest,
    CompleteLoginUseCase,
    LoginOutcome,
)
from emcid.config import Settings
from emcid.domain.error import (
    DomainError,
    IdentityFetchFailedError,
    InvalidIdentityError,
    TokenExchangeFailedError,
    TokenExchangeTimeoutError,
)
from emcid.domain.model import Account, IdentityBinding
from emcid.domain.repository import AccountRepository, IdentityBindingRepository
from emcid.domain.service import LoginHook, LoginHooks, PostLoginManager
from emcid.domain.value import (
    AccountStatus,
    IdentityBindingId,
    MessageLevel,
    ProviderIdentity,
)
from emcid.persistence.session import SessionState
from tests.factories import make_account
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

TOKEN_KEY = "emercoin_id_emc_access_token"
RETURN = CompleteLoginRequest(code="auth-code", state="state-1")


class FailingLoginHook(LoginHook):
    async def user_logged_in(self, account: Account) -> None:
        raise DomainError("hook failed")


async def bind(container: AsyncContainer, provider_user_id: str, **account_fields):
    """Store an account bound to the provider identity."""
    accounts = await container.get(AccountRepository)
    bindings = await container.get(IdentityBindingRepository)
    account = await accounts.save(make_account(**account_fields))
    await bindings.insert_if_absent(
        IdentityBinding(
            id=IdentityBindingId(uuid4()),
            provider_user_id=provider_user_id,
            account_id=account.id,
        )
    )
    return account


class TestNewIdentity:
    """Tests for identities seen for the first time."""

    @pytest.mark.asyncio
    async def test_open_registration_creates_and_logs_in(self, unit_env: AsyncContainer):
        """A new identity should get an active bound account and a session."""
        # Arrange
        settings = await unit_env.get(Settings)
        settings.accounts.registration = "visitors"
        client = await unit_env.get(EmercoinIDClient)
        client.identity = ProviderIdentity(
            provider_user_id="ABC123",
            email="a@b.com",
            first_name="Jane",
            last_name="Doe",
        )
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        # Act
        result = await use_case.execute(RETURN)

        # Assert
        assert result.outcome == LoginOutcome.AUTHORIZED_NEW_ACCOUNT
        assert result.url == "/user"
        assert result.messages[0].text == "You are now logged in as jane-doe."

        accounts = await unit_env.get(AccountRepository)
        account = await accounts.find_by_username("jane-doe")
        assert account is not None
        assert account.email.root == "a@b.com"
        assert account.status == AccountStatus.ACTIVE

        bindings = await unit_env.get(IdentityBindingRepository)
        binding = await bindings.find_by_provider_user_id("abc123")
        assert binding is not None
        assert binding.account_id == account.id

        assert session["account_id"] == str(account.id)
        assert session[TOKEN_KEY] == "mock-access-token"
        assert client.exchanged_codes == ["auth-code"]

    @pytest.mark.asyncio
    async def test_pending_approval_reports_awaiting_activation(
        self, unit_env: AsyncContainer
    ):
        """A blocked new account should not be logged in."""
        settings = await unit_env.get(Settings)
        settings.accounts.registration = "visitors_admin_approval"
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.ACCOUNT_BLOCKED
        assert result.url == "/user/login"
        assert result.messages[-1].level == MessageLevel.WARNING
        assert result.messages[-1].text == (
            "You will receive an email when site administrator activates your account."
        )
        assert "account_id" not in session
        assert TOKEN_KEY not in session

        accounts = await unit_env.get(AccountRepository)
        account = await accounts.find_by_username("jane-doe")
        assert account is not None
        assert account.status == AccountStatus.BLOCKED

    @pytest.mark.asyncio
    async def test_admin_only_registration_is_blocked(self, unit_env: AsyncContainer):
        settings = await unit_env.get(Settings)
        settings.accounts.registration = "admin_only"
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.REGISTRATION_BLOCKED
        assert result.url == "/user/login"
        assert "Only existing users" in result.messages[0].text
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_invalid_username_reports_validation_failure(
        self, unit_env: AsyncContainer
    ):
        settings = await unit_env.get(Settings)
        settings.accounts.registration = "visitors"
        client = await unit_env.get(EmercoinIDClient)
        client.identity = ProviderIdentity(
            provider_user_id="abc123", first_name="Jane<", last_name="Doe"
        )
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.VALIDATION_FAILED
        assert result.messages[0].text.startswith("Creation of user account failed: ")
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_new_users_can_be_sent_to_account_form(
        self, unit_env: AsyncContainer
    ):
        """New users should land on their account form when configured."""
        settings = await unit_env.get(Settings)
        settings.accounts.registration = "visitors"
        settings.login.redirect_new_users_to_form = True
        use_case = await unit_env.get(CompleteLoginUseCase)

        result = await use_case.execute(RETURN)

        accounts = await unit_env.get(AccountRepository)
        account = await accounts.find_by_username("jane-doe")
        assert result.outcome == LoginOutcome.AUTHORIZED_NEW_ACCOUNT
        assert result.url == f"/user/{account.id}/edit"
        assert "you don't need to update your password" in result.messages[-1].text


class TestExistingIdentity:
    """Tests for identities already bound to an account."""

    @pytest.mark.asyncio
    async def test_bound_account_is_logged_in_to_saved_path(
        self, unit_env: AsyncContainer
    ):
        """A bound active account should return to the saved destination."""
        account = await bind(unit_env, "abc123", username="jane")
        post_login = await unit_env.get(PostLoginManager)
        post_login.save_post_login_path("/node/42")
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.AUTHORIZED
        assert result.url == "/node/42"
        assert session["account_id"] == str(account.id)
        assert session[TOKEN_KEY] == "mock-access-token"

        accounts = await unit_env.get(AccountRepository)
        assert await accounts.find_by_username("jane-doe") is None

    @pytest.mark.asyncio
    async def test_disabled_role_is_denied(self, unit_env: AsyncContainer):
        """A bound account with a disabled role should not get a session."""
        settings = await unit_env.get(Settings)
        settings.login.disabled_roles = {"editor"}
        await bind(unit_env, "abc123", username="jane", roles=frozenset({"editor"}))
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.ROLE_DISABLED
        assert result.url == "/user/login"
        assert [m.text for m in result.messages][-1] == (
            "Login process with this EmercoinID certificate wasn't successful."
        )
        assert "account_id" not in session
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_superuser_is_denied(self, unit_env: AsyncContainer):
        await bind(unit_env, "abc123", username="admin", is_superuser=True)
        use_case = await unit_env.get(CompleteLoginUseCase)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.ADMIN_LOGIN_DISABLED

    @pytest.mark.asyncio
    async def test_blocked_account_is_denied(self, unit_env: AsyncContainer):
        await bind(unit_env, "abc123", username="jane", status=AccountStatus.BLOCKED)
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.ACCOUNT_BLOCKED
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_failing_login_hook_leaves_visitor_logged_out(
        self, unit_env: AsyncContainer
    ):
        """A failing login hook should not leave a half logged-in session."""
        await bind(unit_env, "abc123", username="jane")
        hooks = await unit_env.get(LoginHooks)
        hooks.register(FailingLoginHook())
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.UNREACHABLE_STATE
        assert "account_id" not in session
        assert "logged_in_at" not in session
        assert TOKEN_KEY not in session


class TestProviderFailures:
    """Tests for failures before an identity is known."""

    @pytest.mark.asyncio
    async def test_provider_error_is_surfaced(self, unit_env: AsyncContainer):
        """An error return should show the provider's description."""
        use_case = await unit_env.get(CompleteLoginUseCase)
        client = await unit_env.get(EmercoinIDClient)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(
            CompleteLoginRequest(
                error="access_denied", error_description="The user denied access"
            )
        )

        assert result.outcome == LoginOutcome.PROVIDER_REQUEST_DENIED
        assert result.url == "/user/login"
        assert result.messages[0].level == MessageLevel.ERROR
        assert result.messages[0].text == "The user denied access"
        assert "account_id" not in session
        assert client.exchanged_codes == []

    @pytest.mark.asyncio
    async def test_error_wins_over_code(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(CompleteLoginUseCase)
        client = await unit_env.get(EmercoinIDClient)

        result = await use_case.execute(
            CompleteLoginRequest(code="auth-code", state="s", error="access_denied")
        )

        assert result.outcome == LoginOutcome.PROVIDER_REQUEST_DENIED
        assert client.exchanged_codes == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "request_",
        [CompleteLoginRequest(code="auth-code"), CompleteLoginRequest(state="s")],
    )
    async def test_incomplete_return_is_denied(self, unit_env: AsyncContainer, request_):
        use_case = await unit_env.get(CompleteLoginUseCase)

        result = await use_case.execute(request_)

        assert result.outcome == LoginOutcome.PROVIDER_REQUEST_DENIED
        assert result.messages[0].text

    @pytest.mark.asyncio
    async def test_missing_configuration_is_reported(self, unit_env: AsyncContainer):
        settings = await unit_env.get(Settings)
        settings.emercoin.infocard = ""
        use_case = await unit_env.get(CompleteLoginUseCase)
        client = await unit_env.get(EmercoinIDClient)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.CONFIGURATION_INVALID
        assert result.messages[0].text == (
            "Emercoin ID not configured properly. Contact site administrator."
        )
        assert client.exchanged_codes == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            TokenExchangeFailedError("bad code", description="Code expired"),
            TokenExchangeTimeoutError("timed out", description="Code expired"),
        ],
    )
    async def test_token_exchange_failure(self, unit_env: AsyncContainer, error):
        client = await unit_env.get(EmercoinIDClient)
        client.token_error = error
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.TOKEN_EXCHANGE_FAILED
        assert result.messages[0].text == "Code expired"
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_invalid_identity_clears_token(self, unit_env: AsyncContainer):
        """An infocard without serial should report an invalid user."""
        client = await unit_env.get(EmercoinIDClient)
        client.identity_error = InvalidIdentityError("no serial")
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.INVALID_IDENTITY
        assert result.messages[0].text == "Invalid User"
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_identity_fetch_failure_clears_token(self, unit_env: AsyncContainer):
        client = await unit_env.get(EmercoinIDClient)
        client.identity_error = IdentityFetchFailedError("HTTP error")
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.IDENTITY_FETCH_FAILED
        assert TOKEN_KEY not in session

    @pytest.mark.asyncio
    async def test_unexpected_domain_error_fails_closed(self, unit_env: AsyncContainer):
        """An unclassified failure should end in the access-denied state."""
        client = await unit_env.get(EmercoinIDClient)
        client.identity_error = DomainError("unexpected")
        use_case = await unit_env.get(CompleteLoginUseCase)
        session = await unit_env.get(SessionState)

        result = await use_case.execute(RETURN)

        assert result.outcome == LoginOutcome.UNREACHABLE_STATE
        assert "account_id" not in session
        assert TOKEN_KEY not in session
