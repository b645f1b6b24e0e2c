"""
Unit tests for the in-memory chat store.

This module covers conversation CRUD, message ordering, the conversation
touch performed by message creation, and cascade deletion.
"""

from datetime import UTC, datetime

import pytest

from app.storage import ChatRepository, InMemoryChatStore
from models import MessageCreate, MessageRole


def _message(conversation_id: str, content: str = "hi", role: MessageRole = MessageRole.USER, images=None):
    return MessageCreate(conversation_id=conversation_id, role=role, content=content, images=images or [])


class TestConversations:
    """Test cases for conversation operations."""

    def test_store_implements_repository(self, store):
        """Test the store satisfies the repository interface."""
        assert isinstance(store, ChatRepository)

    def test_create_conversation_sets_equal_timestamps(self, store):
        """Test createdAt equals updatedAt at creation time."""
        conversation = store.create_conversation("Trip planning")

        assert conversation.title == "Trip planning"
        assert conversation.id
        assert conversation.created_at == conversation.updated_at

    def test_create_conversation_generates_unique_ids(self, store):
        """Test every conversation receives a fresh id."""
        ids = {store.create_conversation(f"c{i}").id for i in range(10)}
        assert len(ids) == 10

    def test_default_clock_is_timezone_aware(self):
        """Test the default clock produces aware UTC timestamps."""
        conversation = InMemoryChatStore().create_conversation("x")
        assert conversation.created_at.tzinfo is not None
        assert conversation.created_at <= datetime.now(UTC)

    def test_list_conversations_empty(self, store):
        """Test listing an empty store."""
        assert store.list_conversations() == []

    def test_list_conversations_most_recent_first(self, store):
        """Test conversations are ordered by updatedAt descending."""
        first = store.create_conversation("first")
        second = store.create_conversation("second")
        third = store.create_conversation("third")

        assert [c.id for c in store.list_conversations()] == [third.id, second.id, first.id]

    def test_message_activity_reorders_conversations(self, store):
        """Test appending a message moves its conversation to the front."""
        older = store.create_conversation("older")
        store.create_conversation("newer")

        store.create_message(_message(older.id))

        assert store.list_conversations()[0].id == older.id

    def test_get_conversation(self, store, conversation):
        """Test fetching an existing conversation."""
        assert store.get_conversation(conversation.id) == conversation

    @pytest.mark.parametrize("conversation_id", ["missing", "", "not-a-uuid!!", "00000000-0000-0000-0000-000000000000"])
    def test_get_conversation_unknown_or_malformed(self, store, conversation_id):
        """Test unknown or malformed ids simply report absence."""
        assert store.get_conversation(conversation_id) is None

    def test_update_conversation_merges_and_touches(self, store, conversation):
        """Test update merges fields and forces updatedAt to now."""
        updated = store.update_conversation(conversation.id, title="Renamed")

        assert updated.title == "Renamed"
        assert updated.id == conversation.id
        assert updated.created_at == conversation.created_at
        assert updated.updated_at > conversation.updated_at
        assert store.get_conversation(conversation.id) == updated

    def test_update_conversation_ignores_supplied_updated_at(self, store, conversation):
        """Test updatedAt cannot be moved backwards by the caller."""
        updated = store.update_conversation(conversation.id, updated_at=datetime(2000, 1, 1, tzinfo=UTC))
        assert updated.updated_at > conversation.updated_at

    def test_update_conversation_unknown(self, store):
        """Test updating an unknown conversation reports not found."""
        assert store.update_conversation("missing", title="x") is None

    @pytest.mark.parametrize("field", ["id", "created_at", "colour"])
    def test_update_conversation_rejects_immutable_fields(self, store, conversation, field):
        """Test identity, creation time and unknown fields cannot be updated."""
        with pytest.raises(ValueError):
            store.update_conversation(conversation.id, **{field: "x"})

    def test_updated_at_is_monotonic(self, store, conversation):
        """Test updatedAt never decreases across updates and message appends."""
        seen = [conversation.updated_at]
        for i in range(3):
            store.update_conversation(conversation.id, title=f"t{i}")
            seen.append(store.get_conversation(conversation.id).updated_at)
            store.create_message(_message(conversation.id))
            seen.append(store.get_conversation(conversation.id).updated_at)

        assert seen == sorted(seen)
        assert all(ts >= conversation.created_at for ts in seen)

    def test_delete_conversation_cascades(self, store, conversation):
        """Test deleting a conversation removes it and its messages."""
        store.create_message(_message(conversation.id))
        store.create_message(_message(conversation.id, role=MessageRole.ASSISTANT))

        assert store.delete_conversation(conversation.id) is True
        assert store.get_conversation(conversation.id) is None
        assert conversation.id not in [c.id for c in store.list_conversations()]
        assert store.list_messages(conversation.id) == []

    def test_delete_conversation_unknown_has_no_side_effects(self, store, conversation):
        """Test deleting a nonexistent id reports not found and changes nothing."""
        store.create_message(_message(conversation.id))

        assert store.delete_conversation("missing") is False
        assert store.list_conversations() == [store.get_conversation(conversation.id)]
        assert len(store.list_messages(conversation.id)) == 1


class TestMessages:
    """Test cases for message operations."""

    def test_create_message(self, store, conversation):
        """Test a message receives id and timestamp."""
        message = store.create_message(_message(conversation.id, "Hello"))

        assert message.id
        assert message.conversation_id == conversation.id
        assert message.role == MessageRole.USER
        assert message.content == "Hello"
        assert message.images == ()
        assert message.timestamp is not None

    def test_create_message_copies_images(self, store, conversation):
        """Test later mutation of the caller's list does not reach the store."""
        images = ["data:image/png;base64,AAAA"]
        message = store.create_message(_message(conversation.id, images=images))

        images.append("data:image/png;base64,BBBB")
        images[0] = "tampered"

        assert message.images == ("data:image/png;base64,AAAA",)
        assert store.list_messages(conversation.id)[0].images == ("data:image/png;base64,AAAA",)

    def test_create_message_touches_conversation(self, store, conversation):
        """Test message creation bumps the owning conversation's updatedAt."""
        message = store.create_message(_message(conversation.id))

        touched = store.get_conversation(conversation.id)
        assert touched.updated_at > conversation.updated_at
        assert touched.updated_at > message.timestamp
        assert touched.title == conversation.title

    def test_create_message_for_unknown_conversation(self, store):
        """Test messages are stored even when the conversation is gone."""
        message = store.create_message(_message("ghost"))

        assert store.list_messages("ghost") == [message]
        assert store.list_conversations() == []

    def test_list_messages_chronological(self, store, conversation):
        """Test messages come back in non-decreasing timestamp order."""
        for i in range(5):
            store.create_message(_message(conversation.id, f"m{i}"))

        messages = store.list_messages(conversation.id)
        assert [m.content for m in messages] == [f"m{i}" for i in range(5)]
        assert [m.timestamp for m in messages] == sorted(m.timestamp for m in messages)

    def test_list_messages_equal_timestamps_keep_insertion_order(self):
        """Test ties on timestamp preserve the order messages were created in."""
        fixed = datetime(2024, 1, 1, tzinfo=UTC)
        store = InMemoryChatStore(clock=lambda: fixed)
        conversation = store.create_conversation("same instant")
        for i in range(4):
            store.create_message(_message(conversation.id, f"m{i}"))

        assert [m.content for m in store.list_messages(conversation.id)] == ["m0", "m1", "m2", "m3"]

    def test_list_messages_no_cross_conversation_leakage(self, store):
        """Test listing only returns the queried conversation's messages."""
        a = store.create_conversation("a")
        b = store.create_conversation("b")
        store.create_message(_message(a.id, "for a"))
        store.create_message(_message(b.id, "for b"))
        store.create_message(_message(a.id, "for a again"))

        messages = store.list_messages(a.id)
        assert len(messages) == 2
        assert all(m.conversation_id == a.id for m in messages)

    def test_list_messages_empty(self, store, conversation):
        """Test a conversation without messages lists nothing."""
        assert store.list_messages(conversation.id) == []
        assert store.list_messages("unknown") == []

    def test_delete_messages_by_conversation_is_idempotent(self, store, conversation):
        """Test bulk deletion always succeeds and only touches one conversation."""
        other = store.create_conversation("other")
        store.create_message(_message(conversation.id))
        store.create_message(_message(other.id))

        assert store.delete_messages_by_conversation(conversation.id) is True
        assert store.delete_messages_by_conversation(conversation.id) is True
        assert store.delete_messages_by_conversation("never-existed") is True

        assert store.list_messages(conversation.id) == []
        assert len(store.list_messages(other.id)) == 1
        assert store.get_conversation(conversation.id) is not None
