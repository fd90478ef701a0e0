"""Business logic services."""

from chatvault.services.chat_registry import ChatRegistry
from chatvault.services.directory import UserDirectory
from chatvault.services.message_ledger import MessageLedger

__all__ = [
    "UserDirectory",
    "ChatRegistry",
    "MessageLedger",
]
