"""Flash message routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from emcid.domain.value import FlashMessage
from emcid.persistence.session import FlashMessageQueue

router = APIRouter(prefix="/user", tags=["messages"], route_class=DishkaRoute)


class MessagesResponse(BaseModel):
    """Messages queued for the visitor."""

    messages: list[FlashMessage]


@router.get("/messages", response_model=MessagesResponse)
async def pop_messages(flash_messages: FromDishka[FlashMessageQueue]) -> MessagesResponse:
    """Return and clear the messages left by the last login attempt."""
    return MessagesResponse(messages=flash_messages.pop_all())
