"""EmercoinID login routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import RedirectResponse

from emcid.application.usecase.auth import (
    CompleteLoginRequest,
    CompleteLoginUseCase,
    InitiateLoginRequest,
    InitiateLoginUseCase,
    LoginOutcome,
)
from emcid.config import LoginSettings
from emcid.domain.value import FlashMessage
from emcid.persistence.session import FlashMessageQueue

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user/emercoin-id-login",
    tags=["authentication"],
    route_class=DishkaRoute,
)

UNEXPECTED_ERROR_MESSAGE = "Login with EmercoinID failed. Please try again."


@router.get("")
async def initiate_login(
    use_case: FromDishka[InitiateLoginUseCase],
    flash_messages: FromDishka[FlashMessageQueue],
    destination: str | None = None,
) -> RedirectResponse:
    """Send the visitor to EmercoinID.

    Args:
        use_case: Initiate login use case from DI
        flash_messages: Session message queue from DI
        destination: Local path to return to after login

    Returns:
        HTTP 302 redirect to the provider's authorization page

    Example:
        GET /user/emercoin-id-login?destination=/node/42

        Redirects to: https://id.emercoin.net/oauth/v2/auth?client_id=...
    """
    result = await use_case.execute(InitiateLoginRequest(destination=destination))
    flash_messages.extend(result.messages)
    return RedirectResponse(url=result.url, status_code=status.HTTP_302_FOUND)


@router.get("/return")
async def complete_login(
    use_case: FromDishka[CompleteLoginUseCase],
    flash_messages: FromDishka[FlashMessageQueue],
    login_settings: FromDishka[LoginSettings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
) -> RedirectResponse:
    """Handle the return from EmercoinID and log the visitor in.

    Args:
        use_case: Complete login use case from DI
        flash_messages: Session message queue from DI
        login_settings: Login settings from DI
        code: Authorization code
        state: State parameter
        error: Provider error code
        error_description: Provider error text

    Returns:
        HTTP 302 redirect to the post-login path, the account form, or
        the login page

    Raises:
        HTTPException: 403 if the flow ended in an unexpected state
    """
    try:
        result = await use_case.execute(
            CompleteLoginRequest(
                code=code,
                state=state,
                error=error,
                error_description=error_description,
            )
        )
    except Exception as e:
        logger.exception(f"Unexpected error during EmercoinID return: {str(e)}")
        flash_messages.add(FlashMessage.error(UNEXPECTED_ERROR_MESSAGE))
        return RedirectResponse(
            url=login_settings.login_path, status_code=status.HTTP_302_FOUND
        )

    flash_messages.extend(result.messages)

    if result.outcome == LoginOutcome.UNREACHABLE_STATE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    logger.info(f"EmercoinID login finished: outcome={result.outcome.value}")
    return RedirectResponse(url=result.url, status_code=status.HTTP_302_FOUND)
