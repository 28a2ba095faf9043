"""Tests for message composition and read schemas."""

from mailroom.models import MessageState, RecipientKind
from mailroom.schemas import MessageCreate
from mailroom.services.messages import MessageService, to_message_response


def test_compose_drops_fields_outside_whitelist(bob) -> None:
    message = MessageService.compose(
        bob,
        {"subject": "Hi", "body": "There", "state": "sent", "sender_id": 99, "id": 7},
    )

    assert message.subject == "Hi"
    assert message.body == "There"
    assert message.sender is bob
    assert message.state == MessageState.UNSENT
    assert message.id is None


def test_compose_accepts_schema_instance(bob) -> None:
    message = MessageService.compose(bob, MessageCreate(subject="Only a subject"))

    assert message.subject == "Only a subject"
    assert message.body is None


def test_message_response_from_orm(sent_from_bob, bob) -> None:
    response = to_message_response(sent_from_bob)

    assert response.id == sent_from_bob.id
    assert response.sender_id == bob.id
    assert response.state == MessageState.SENT
    assert [recipient.kind for recipient in response.recipients] == [RecipientKind.TO, RecipientKind.CC]
    assert response.model_dump(mode="json")["state"] == "sent"
