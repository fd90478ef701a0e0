"""User endpoints."""

from fastapi import APIRouter, status

from chatvault.api.deps import Directory
from chatvault.schemas.common import CreatedResponse
from chatvault.schemas.user import UserCreate

router = APIRouter()


@router.post("/add", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, directory: Directory) -> CreatedResponse:
    """Register a new user."""
    user = await directory.create_user(user_data.username)
    return CreatedResponse(id=user.id)
