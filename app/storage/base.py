"""Repository interface for conversations and messages."""

from abc import ABC, abstractmethod
from typing import Any

from models import Conversation, Message, MessageCreate


class ChatRepository(ABC):
    """Capability set the message pipeline and controllers depend on.

    Implementations own every entity instance. Returned entities are
    immutable; changes go through the update/create/delete operations.
    """

    # Conversations

    @abstractmethod
    def create_conversation(self, title: str) -> Conversation:
        """Create a conversation with ``created_at == updated_at == now``."""

    @abstractmethod
    def list_conversations(self) -> list[Conversation]:
        """Return all conversations, most recently updated first."""

    @abstractmethod
    def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Return the conversation or ``None``; never raises on a malformed id."""

    @abstractmethod
    def update_conversation(self, conversation_id: str, **fields: Any) -> Conversation | None:
        """Merge ``fields`` over the record and refresh ``updated_at``."""

    @abstractmethod
    def delete_conversation(self, conversation_id: str) -> bool:
        """Remove the conversation and its messages; report whether it existed."""

    # Messages

    @abstractmethod
    def create_message(self, message: MessageCreate) -> Message:
        """Persist a message and touch the owning conversation's ``updated_at``."""

    @abstractmethod
    def list_messages(self, conversation_id: str) -> list[Message]:
        """Return the conversation's messages in chronological order."""

    @abstractmethod
    def delete_messages_by_conversation(self, conversation_id: str) -> bool:
        """Remove every message of the conversation. Always succeeds."""
