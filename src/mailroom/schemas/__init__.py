"""
Pydantic schemas for message input and read models.

These schemas define the structure of message data for validation and serialization.
"""

from .message import MessageCreate, MessageResponse, RecipientResponse

__all__ = ["MessageCreate", "MessageResponse", "RecipientResponse"]
