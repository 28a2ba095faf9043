"""Message-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mailroom.models.message import MessageState
from mailroom.models.message_recipient import RecipientKind, RecipientState


class MessageCreate(BaseModel):
    """Fields a caller may supply when composing a message.

    Anything else (state, ids, timestamps, sender) is dropped silently.
    """

    subject: str | None = Field(None, description="Subject line")
    body: str | None = Field(None, description="Message body")

    model_config = ConfigDict(extra="ignore")


class RecipientResponse(BaseModel):
    """A receiver's copy of a message."""

    id: int | None
    receiver_id: int | None
    kind: RecipientKind
    state: RecipientState
    hidden_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Schema for message information returned to callers."""

    id: int | None
    sender_id: int | None
    subject: str | None
    body: str | None
    state: MessageState
    hidden_at: datetime | None
    deleted_at: datetime | None
    original_message_id: int | None
    recipients: list[RecipientResponse]

    model_config = ConfigDict(from_attributes=True)
