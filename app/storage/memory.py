"""In-memory chat store.

Volatile: everything lives in two dicts for the lifetime of the process.

Operations are plain read-modify-write on those dicts and are not
linearizable across concurrent callers. That is safe under a single asyncio
event loop because no operation awaits mid-mutation. Running the store from
several threads requires per-conversation locking around ``create_message``
and ``update_conversation``.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Any

from models import (
    MUTABLE_CONVERSATION_FIELDS,
    Conversation,
    Message,
    MessageCreate,
    new_id,
    utc_now,
)

from .base import ChatRepository


logger = logging.getLogger(__name__)


class InMemoryChatStore(ChatRepository):
    """Dict-backed implementation of :class:`ChatRepository`."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ):
        """Initialize an empty store.

        Args:
            clock: Source of timestamps, injectable for tests.
            id_factory: Source of entity identifiers.
        """
        self._clock = clock
        self._id_factory = id_factory
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, Message] = {}

    def create_conversation(self, title: str) -> Conversation:
        now = self._clock()
        conversation = Conversation(
            id=self._id_factory(),
            title=title,
            created_at=now,
            updated_at=now,
        )
        self._conversations[conversation.id] = conversation
        logger.debug("Created conversation %s", conversation.id)
        return conversation

    def list_conversations(self) -> list[Conversation]:
        return sorted(
            self._conversations.values(),
            key=lambda conversation: conversation.updated_at,
            reverse=True,
        )

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def update_conversation(self, conversation_id: str, **fields: Any) -> Conversation | None:
        unknown = set(fields) - MUTABLE_CONVERSATION_FIELDS
        if unknown:
            raise ValueError(f"Cannot update conversation fields: {', '.join(sorted(unknown))}")

        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return None

        # updated_at is always forced to now, whatever the caller passed.
        fields["updated_at"] = self._clock()
        updated = replace(conversation, **fields)
        self._conversations[conversation_id] = updated
        return updated

    def delete_conversation(self, conversation_id: str) -> bool:
        deleted = self._conversations.pop(conversation_id, None) is not None
        if deleted:
            self.delete_messages_by_conversation(conversation_id)
            logger.debug("Deleted conversation %s", conversation_id)
        return deleted

    def create_message(self, message: MessageCreate) -> Message:
        """Persist a message and bump its conversation's recency.

        Touching the conversation is part of the same logical operation:
        conversation ordering reflects the last message activity. Messages
        whose conversation no longer exists are still stored.
        """
        stored = Message(
            id=self._id_factory(),
            conversation_id=message.conversation_id,
            role=message.role,
            content=message.content,
            images=tuple(message.images or ()),
            timestamp=self._clock(),
        )
        self._messages[stored.id] = stored

        if message.conversation_id in self._conversations:
            self.update_conversation(message.conversation_id)

        return stored

    def list_messages(self, conversation_id: str) -> list[Message]:
        # sorted() is stable, so equal timestamps keep insertion order.
        return sorted(
            (m for m in self._messages.values() if m.conversation_id == conversation_id),
            key=lambda m: m.timestamp,
        )

    def delete_messages_by_conversation(self, conversation_id: str) -> bool:
        doomed = [
            message_id
            for message_id, message in self._messages.items()
            if message.conversation_id == conversation_id
        ]
        for message_id in doomed:
            del self._messages[message_id]
        return True
