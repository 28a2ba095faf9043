from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from mailroom.db.session import Base, enable_sqlite_savepoints
from mailroom.models import Message, MessageState, RecipientState, User

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session whose work is rolled back after each test, commits included."""
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


def _make_user(db_session: Session, login: str) -> User:
    user = User(login=login, display_name=login.title())
    db_session.add(user)
    db_session.flush()
    return user


@pytest.fixture()
def bob(db_session: Session) -> User:
    return _make_user(db_session, "bob")


@pytest.fixture()
def john(db_session: Session) -> User:
    return _make_user(db_session, "john")


@pytest.fixture()
def mary(db_session: Session) -> User:
    return _make_user(db_session, "mary")


def _store(db_session: Session, message: Message, state: MessageState) -> Message:
    message.state = state
    if state == MessageState.SENT:
        for recipient in message.recipients:
            recipient.state = RecipientState.UNREAD
    db_session.add(message)
    db_session.flush()
    return message


@pytest.fixture()
def sent_from_bob(db_session: Session, bob: User, john: User, mary: User) -> Message:
    """Sent message from bob to john, copying mary."""
    message = Message(sender=bob, subject="Lunch", body="Are we still on for noon?")
    message.to(john)
    message.cc(mary)
    return _store(db_session, message, MessageState.SENT)


@pytest.fixture()
def sent_from_mary(db_session: Session, sent_from_bob: Message, mary: User, john: User) -> Message:
    """Sent message from mary, blind-copying john."""
    message = Message(sender=mary, subject="Re: Lunch", body="Count me in.")
    message.bcc(john)
    return _store(db_session, message, MessageState.SENT)


@pytest.fixture()
def unsent_from_bob(db_session: Session, sent_from_mary: Message, bob: User, mary: User) -> Message:
    """Draft from bob with mary on copy."""
    message = Message(sender=bob, subject="Agenda", body="Draft agenda attached.")
    message.cc(mary)
    return _store(db_session, message, MessageState.UNSENT)
