"""Message lifecycle: persistence, state transitions and visibility."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, inspect, select
from sqlalchemy.orm import Session

from mailroom.db.time import utcnow
from mailroom.models import Message, MessageState, RecipientState, User
from mailroom.schemas.message import MessageCreate, MessageResponse

logger = logging.getLogger(__name__)

__all__ = ["MessageService", "visible", "to_message_response"]


def visible(stmt: Select[Any]) -> Select[Any]:
    """Restrict a message query to rows that are not hidden."""
    return stmt.where(Message.hidden_at.is_(None))


def to_message_response(message: Message) -> MessageResponse:
    """Convert a Message ORM instance to its read schema."""
    return MessageResponse.model_validate(message)


class MessageService:
    """Service handling message persistence and lifecycle transitions.

    Every transition runs inside a SAVEPOINT, so the message and all of its
    recipient rows change together or not at all. Committing the enclosing
    transaction is left to the caller.
    """

    @staticmethod
    def compose(sender: User, data: Mapping[str, Any] | MessageCreate) -> Message:
        """Build an unsaved message from caller supplied fields.

        Args:
            sender: Author of the message
            data: Raw mapping or ``MessageCreate``; keys outside the
                whitelist are dropped

        Returns:
            A new unsent Message
        """
        payload = data if isinstance(data, MessageCreate) else MessageCreate.model_validate(dict(data))
        return Message(sender=sender, subject=payload.subject, body=payload.body)

    @staticmethod
    def save(db: Session, message: Message) -> bool:
        """Persist a message if it passes validation.

        Args:
            db: Database session
            message: Message to persist

        Returns:
            True if the message was flushed, False if it is invalid
        """
        errors = message.validate()
        if errors:
            logger.debug("Refusing to save invalid message: %s", errors)
            return False

        with db.begin_nested():
            db.add(message)
        return True

    @staticmethod
    def queue(db: Session, message: Message) -> bool:
        """Mark an unsent message as queued for delivery.

        Returns:
            True on success, False if the message is not unsent, has been
            deleted, is invalid or has no recipients
        """
        if not message.can_queue:
            logger.debug("Cannot queue message %s in state %s", message.id, message.state)
            return False

        with db.begin_nested():
            db.add(message)
            message.state = MessageState.QUEUED
            for recipient in message.all_recipients:
                recipient.state = RecipientState.UNSENT

        logger.info("Queued message %s for %d recipients", message.id, len(message.recipients))
        return True

    @staticmethod
    def deliver(db: Session, message: Message) -> bool:
        """Send an unsent or queued message to every recipient.

        Each recipient's copy becomes unread.

        Returns:
            True on success, False if the message was already sent, has been
            deleted, is invalid or has no recipients
        """
        if not message.can_deliver:
            logger.debug("Cannot deliver message %s in state %s", message.id, message.state)
            return False

        with db.begin_nested():
            db.add(message)
            message.state = MessageState.SENT
            for recipient in message.all_recipients:
                recipient.state = RecipientState.UNREAD

        logger.info("Delivered message %s to %d recipients", message.id, len(message.recipients))
        return True

    @staticmethod
    def delete(db: Session, message: Message) -> bool:
        """Delete a message on behalf of its sender.

        Unsent and queued messages are removed outright. A sent message is
        only flagged as deleted while any recipient still has a copy; once
        every copy is deleted the row is removed as well.

        Returns:
            True on success, False if the message was already deleted
        """
        if message.is_deleted:
            logger.debug("Message %s is already deleted", message.id)
            return False

        destroy = message.can_destroy
        state = inspect(message)
        with db.begin_nested():
            message.deleted_at = utcnow()
            if not destroy:
                db.add(message)
            elif state.persistent:
                MessageService.destroy(db, message)
            elif state.pending:
                db.expunge(message)

        if destroy:
            logger.info("Destroyed message %s", message.id)
        else:
            logger.info("Soft-deleted message %s", message.id)
        return True

    @staticmethod
    def destroy(db: Session, message: Message) -> None:
        """Remove a persisted message, its recipient rows and its thread links.

        Replies keep their own rows but lose the link to this message. Must
        be called inside an open transaction.
        """
        replies = set(
            db.scalars(select(Message).where(Message.original_message_id == message.id))
        )
        replies.update(
            obj for obj in db.new if isinstance(obj, Message) and obj.original_message is message
        )
        for reply in replies:
            reply.original_message = None
        db.delete(message)

    @staticmethod
    def hide(db: Session, message: Message) -> bool:
        """Hide a message from default listings."""
        message.hidden_at = utcnow()
        if inspect(message).persistent:
            db.flush()
        return True

    @staticmethod
    def unhide(db: Session, message: Message) -> bool:
        """Make a hidden message visible again."""
        message.hidden_at = None
        if inspect(message).persistent:
            db.flush()
        return True

    @staticmethod
    def exists(db: Session, message_id: int | None) -> bool:
        """Return True if a message row with this id is stored."""
        if message_id is None:
            return False
        return db.scalar(select(Message.id).where(Message.id == message_id)) is not None

    @staticmethod
    def visible_messages(db: Session, sender: User | None = None) -> list[Message]:
        """Return messages that are not hidden, oldest first.

        Args:
            sender: Optionally restrict to messages written by this user
        """
        stmt = visible(select(Message))
        if sender is not None:
            stmt = stmt.where(Message.sender_id == sender.id)
        return list(db.scalars(stmt.order_by(Message.id)))
