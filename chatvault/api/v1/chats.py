"""Chat endpoints."""

from fastapi import APIRouter, status

from chatvault.api.deps import Registry
from chatvault.schemas.chat import ChatCreate, ChatFilter, ChatResponse
from chatvault.schemas.common import CreatedResponse

router = APIRouter()


@router.post("/add", response_model=CreatedResponse, status_code=status.HTTP_200_OK)
async def create_chat(chat_data: ChatCreate, registry: Registry) -> CreatedResponse:
    """Create a chat with a fixed set of members."""
    chat = await registry.create_chat(chat_data.name, chat_data.users)
    return CreatedResponse(id=chat.id)


@router.post("/get", response_model=list[ChatResponse])
async def list_user_chats(chat_filter: ChatFilter, registry: Registry) -> list[ChatResponse]:
    """List the chats of a user with their members, newest first."""
    chats = await registry.find_chats_for_user(chat_filter.user)
    return [ChatResponse.model_validate(chat) for chat in chats]
