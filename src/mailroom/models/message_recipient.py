"""Models linking a message to each of its receivers."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mailroom.db.session import Base

if TYPE_CHECKING:
    from .message import Message
    from .user import User


class RecipientKind(str, Enum):
    """How a receiver is addressed on a message."""

    TO = "to"
    CC = "cc"
    BCC = "bcc"


class RecipientState(str, Enum):
    """Delivery state of a single receiver's copy of a message."""

    UNSENT = "unsent"
    UNREAD = "unread"
    READ = "read"
    DELETED = "deleted"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class MessageRecipient(Base):
    """A receiver's copy of a message, tagged with how it was addressed."""

    __tablename__ = "message_recipient"
    __table_args__ = (
        Index("ix_message_recipient_receiver_state", "receiver_id", "state"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    message_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("message.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    kind: Mapped[RecipientKind] = mapped_column(
        SAEnum(RecipientKind, native_enum=False, length=8, values_callable=_enum_values),
        nullable=False,
    )
    # Insertion order within the owning message; maintained by the collection.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    state: Mapped[RecipientState] = mapped_column(
        SAEnum(RecipientState, native_enum=False, length=16, values_callable=_enum_values),
        nullable=False,
        default=RecipientState.UNSENT,
    )
    hidden_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    message: Mapped[Message] = relationship("Message", back_populates="recipients")
    receiver: Mapped[User] = relationship("User")

    def __init__(self, receiver: User | None = None, kind: RecipientKind = RecipientKind.TO) -> None:
        self.receiver = receiver
        self.kind = RecipientKind(kind)
        self.state = RecipientState.UNSENT
        self.hidden_at = None

    @property
    def is_unsent(self) -> bool:
        return self.state == RecipientState.UNSENT

    @property
    def is_unread(self) -> bool:
        return self.state == RecipientState.UNREAD

    @property
    def is_read(self) -> bool:
        return self.state == RecipientState.READ

    @property
    def is_deleted(self) -> bool:
        return self.state == RecipientState.DELETED

    @property
    def is_hidden(self) -> bool:
        return self.hidden_at is not None

    def __repr__(self) -> str:
        return (
            f"<MessageRecipient(id={self.id}, kind={self.kind.value}, "
            f"receiver_id={self.receiver_id}, state={self.state.value})>"
        )
