"""Per-recipient lifecycle: reading, deleting and hiding a received copy."""

from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from mailroom.db.time import utcnow
from mailroom.models import MessageRecipient, RecipientState
from mailroom.services.messages import MessageService

logger = logging.getLogger(__name__)

__all__ = ["RecipientService"]


class RecipientService:
    """Service handling state changes on a receiver's copy of a message."""

    @staticmethod
    def view(db: Session, recipient: MessageRecipient) -> bool:
        """Mark an unread copy as read.

        Returns:
            True if the copy moved from unread to read, False otherwise
        """
        if recipient.state != RecipientState.UNREAD:
            logger.debug("Cannot view recipient %s in state %s", recipient.id, recipient.state)
            return False

        with db.begin_nested():
            recipient.state = RecipientState.READ
        return True

    @staticmethod
    def delete(db: Session, recipient: MessageRecipient) -> bool:
        """Delete a delivered copy on behalf of its receiver.

        Copies of messages that were never delivered cannot be deleted by the
        receiver; they belong to the sender's draft. Deleting the last live
        copy of a message its sender already deleted removes the message.

        Returns:
            True on success, False if the copy is undelivered or already deleted
        """
        if recipient.state not in (RecipientState.UNREAD, RecipientState.READ):
            logger.debug("Cannot delete recipient %s in state %s", recipient.id, recipient.state)
            return False

        message = recipient.message
        with db.begin_nested():
            recipient.state = RecipientState.DELETED
            # The sender already deleted it and this was the last live copy.
            purge = message is not None and message.is_deleted and message.can_destroy
            if purge:
                MessageService.destroy(db, message)
        logger.info("Recipient %s deleted its copy of message %s", recipient.id, recipient.message_id)
        if purge:
            logger.info("Destroyed message %s after its last copy was deleted", message.id)
        return True

    @staticmethod
    def hide(db: Session, recipient: MessageRecipient) -> bool:
        """Hide a received copy from the receiver's inbox."""
        recipient.hidden_at = utcnow()
        if inspect(recipient).persistent:
            db.flush()
        return True

    @staticmethod
    def unhide(db: Session, recipient: MessageRecipient) -> bool:
        """Show a hidden copy in the receiver's inbox again."""
        recipient.hidden_at = None
        if inspect(recipient).persistent:
            db.flush()
        return True
