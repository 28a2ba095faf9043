"""The message entity: addressing, lifecycle state and derived messages."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from mailroom.db.session import Base
from mailroom.db.time import utcnow

from .message_recipient import MessageRecipient, RecipientKind, RecipientState

if TYPE_CHECKING:
    from .user import User


class MessageState(str, Enum):
    """Lifecycle of a message; only ever advances left to right."""

    UNSENT = "unsent"
    QUEUED = "queued"
    SENT = "sent"


class Message(Base):
    """A message written by a sender and addressed to to/cc/bcc receivers.

    Deletion is tracked separately from ``state`` through ``deleted_at`` so a
    sent message can stay around for its receivers after the sender deletes
    it. Visibility (``hidden_at``) is independent of both.
    """

    __tablename__ = "message"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    subject: Mapped[str | None] = mapped_column(Text, nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[MessageState] = mapped_column(
        SAEnum(
            MessageState,
            native_enum=False,
            length=16,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=MessageState.UNSENT,
    )
    hidden_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Thread parent; replies point at the message they answer.
    original_message_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("message.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    sender: Mapped[User] = relationship("User")
    original_message: Mapped[Message | None] = relationship("Message", remote_side=[id])
    recipients: Mapped[list[MessageRecipient]] = relationship(
        "MessageRecipient",
        back_populates="message",
        cascade="all, delete-orphan",
        order_by="MessageRecipient.position",
        collection_class=ordering_list("position"),
    )

    def __init__(
        self,
        sender: User | None = None,
        subject: str | None = None,
        body: str | None = None,
        original_message: Message | None = None,
    ) -> None:
        self.sender = sender
        self.subject = subject
        self.body = body
        self.original_message = original_message
        self.state = MessageState.UNSENT
        self.hidden_at = None
        self.deleted_at = None

    @validates("sender")
    def _validate_sender(self, key: str, sender: User | None) -> User | None:
        # Clearing is allowed and reported by validate(); switching users is not.
        if sender is not None and self.id is not None and self.sender_id is not None:
            if sender.id != self.sender_id:
                raise ValueError("sender cannot be changed once the message is saved")
        return sender

    def validate(self) -> dict[str, list[str]]:
        """Return field errors keyed by field name; empty when valid."""
        errors: dict[str, list[str]] = {}
        if self.sender is None or (self.id is not None and self.sender_id is None):
            errors.setdefault("sender", []).append("is required")
        if self.state is None:
            errors.setdefault("state", []).append("is required")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    @property
    def is_unsent(self) -> bool:
        return self.state == MessageState.UNSENT

    @property
    def is_queued(self) -> bool:
        return self.state == MessageState.QUEUED

    @property
    def is_sent(self) -> bool:
        return self.state == MessageState.SENT

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_hidden(self) -> bool:
        return self.hidden_at is not None

    @property
    def can_queue(self) -> bool:
        """True when ``queue`` would succeed."""
        return (
            not self.is_deleted
            and self.is_unsent
            and self.is_valid
            and bool(self.all_recipients)
        )

    @property
    def can_deliver(self) -> bool:
        """True when ``deliver`` would succeed."""
        return (
            not self.is_deleted
            and self.state in (MessageState.UNSENT, MessageState.QUEUED)
            and self.is_valid
            and bool(self.all_recipients)
        )

    @property
    def can_destroy(self) -> bool:
        """True when deleting should remove the row rather than flag it.

        Sent messages are kept while any receiver still holds a copy.
        """
        if not self.is_sent:
            return True
        return all(recipient.state == RecipientState.DELETED for recipient in self.recipients)

    def _recipients_of(self, kind: RecipientKind) -> list[MessageRecipient]:
        return [recipient for recipient in self.recipients if recipient.kind == kind]

    def _address(self, kind: RecipientKind, receivers: Iterable[User]) -> list[MessageRecipient]:
        for receiver in receivers:
            self.recipients.append(MessageRecipient(receiver=receiver, kind=kind))
        return self._recipients_of(kind)

    def to(self, *receivers: User) -> list[MessageRecipient]:
        """Address the given users as primary receivers; return the to list."""
        return self._address(RecipientKind.TO, receivers)

    def cc(self, *receivers: User) -> list[MessageRecipient]:
        """Address the given users as carbon copies; return the cc list."""
        return self._address(RecipientKind.CC, receivers)

    def bcc(self, *receivers: User) -> list[MessageRecipient]:
        """Address the given users as blind copies; return the bcc list."""
        return self._address(RecipientKind.BCC, receivers)

    @property
    def all_recipients(self) -> list[MessageRecipient]:
        return self.to() + self.cc() + self.bcc()

    @property
    def to_receivers(self) -> list[User]:
        return [recipient.receiver for recipient in self.to()]

    @property
    def cc_receivers(self) -> list[User]:
        return [recipient.receiver for recipient in self.cc()]

    @property
    def bcc_receivers(self) -> list[User]:
        return [recipient.receiver for recipient in self.bcc()]

    @property
    def all_receivers(self) -> list[User]:
        return self.to_receivers + self.cc_receivers + self.bcc_receivers

    def _copy(self, original_message: Message | None = None) -> Message:
        return Message(
            sender=self.sender,
            subject=self.subject,
            body=self.body,
            original_message=original_message,
        )

    def reply(self) -> Message:
        """Build an unsaved reply addressed to this message's to receivers."""
        message = self._copy(original_message=self)
        message.to(*self.to_receivers)
        return message

    def reply_to_all(self) -> Message:
        """Build an unsaved reply keeping every to, cc and bcc receiver."""
        message = self._copy(original_message=self)
        message.to(*self.to_receivers)
        message.cc(*self.cc_receivers)
        message.bcc(*self.bcc_receivers)
        return message

    def forward(self) -> Message:
        """Build an unsaved, unaddressed copy outside this message's thread."""
        return self._copy()

    @property
    def thread(self) -> list[Message]:
        """Ancestors reached through ``original_message``, nearest first."""
        ancestors: list[Message] = []
        parent = self.original_message
        while parent is not None:
            ancestors.append(parent)
            parent = parent.original_message
        return ancestors

    def __repr__(self) -> str:
        state = self.state.value if self.state is not None else None
        return f"<Message(id={self.id}, sender_id={self.sender_id}, state={state})>"
