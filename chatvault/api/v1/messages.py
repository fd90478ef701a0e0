"""Message endpoints."""

from fastapi import APIRouter, status

from chatvault.api.deps import Ledger
from chatvault.schemas.common import CreatedResponse
from chatvault.schemas.message import ChatIdFilter, MessageCreate, MessageResponse

router = APIRouter()


@router.post("/add", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_message(message_data: MessageCreate, ledger: Ledger) -> CreatedResponse:
    """Post an encrypted message to a chat the author belongs to."""
    message = await ledger.create_message(
        chat_id=message_data.chat,
        author_id=message_data.author,
        text=message_data.text,
    )
    return CreatedResponse(id=message.id)


@router.post("/get", response_model=list[MessageResponse])
async def list_chat_messages(chat_filter: ChatIdFilter, ledger: Ledger) -> list[MessageResponse]:
    """List the decrypted messages of a chat, oldest first."""
    messages = await ledger.list_messages(chat_filter.chat)
    return [MessageResponse.model_validate(message) for message in messages]
