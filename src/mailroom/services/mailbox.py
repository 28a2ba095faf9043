"""Per-user listings of received and sent messages."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mailroom.models import Message, MessageRecipient, MessageState, RecipientState, User

__all__ = ["inbox", "unread_count", "drafts", "outbox", "sent"]

DELIVERED_STATES = (RecipientState.UNREAD, RecipientState.READ)


def inbox(db: Session, user: User, include_hidden: bool = False) -> list[MessageRecipient]:
    """Return the user's delivered copies, newest message first."""
    stmt = (
        select(MessageRecipient)
        .join(MessageRecipient.message)
        .where(
            MessageRecipient.receiver_id == user.id,
            MessageRecipient.state.in_(DELIVERED_STATES),
        )
        .order_by(Message.id.desc(), MessageRecipient.position)
    )
    if not include_hidden:
        stmt = stmt.where(MessageRecipient.hidden_at.is_(None))
    return list(db.scalars(stmt))


def unread_count(db: Session, user: User) -> int:
    """Return how many delivered copies the user has not read yet."""
    return db.scalar(
        select(func.count())
        .select_from(MessageRecipient)
        .where(
            MessageRecipient.receiver_id == user.id,
            MessageRecipient.state == RecipientState.UNREAD,
        )
    ) or 0


def _authored(
    db: Session,
    user: User,
    state: MessageState,
    include_hidden: bool,
) -> list[Message]:
    stmt = select(Message).where(
        Message.sender_id == user.id,
        Message.state == state,
        Message.deleted_at.is_(None),
    )
    if not include_hidden:
        stmt = stmt.where(Message.hidden_at.is_(None))
    return list(db.scalars(stmt.order_by(Message.id.desc())))


def drafts(db: Session, user: User, include_hidden: bool = False) -> list[Message]:
    """Return the user's unsent messages."""
    return _authored(db, user, MessageState.UNSENT, include_hidden)


def outbox(db: Session, user: User, include_hidden: bool = False) -> list[Message]:
    """Return the user's queued messages."""
    return _authored(db, user, MessageState.QUEUED, include_hidden)


def sent(db: Session, user: User, include_hidden: bool = False) -> list[Message]:
    """Return the user's sent messages that they have not deleted."""
    return _authored(db, user, MessageState.SENT, include_hidden)
