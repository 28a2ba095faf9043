"""SQLAlchemy model for the people who send and receive messages."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from mailroom.db.session import Base
from mailroom.db.time import utcnow


class User(Base):
    """Identity referenced as a message sender and as a receiver.

    Messages and recipient rows point at users one way only; per-user
    listings live in ``mailroom.services.mailbox``.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    login: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login={self.login!r})>"
