"""SQLAlchemy models for the Mailroom package."""

from .message import Message, MessageState
from .message_recipient import MessageRecipient, RecipientKind, RecipientState
from .user import User

__all__ = [
    "Message", "MessageState",
    "MessageRecipient", "RecipientKind", "RecipientState",
    "User",
]
