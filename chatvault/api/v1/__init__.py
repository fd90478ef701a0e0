"""API v1 module."""

from fastapi import APIRouter

from chatvault.api.v1 import chats, health, messages, users

router = APIRouter()

router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(chats.router, prefix="/chat", tags=["chats"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
