"""
Message entity for conversation turns.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime


class MessageRole(str, enum.Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class MessageCreate:
    """Input for creating a message; the store assigns id and timestamp."""

    conversation_id: str
    role: MessageRole
    content: str
    images: list[str] | tuple[str, ...] = field(default_factory=list)


@dataclass(frozen=True)
class Message:
    """
    One turn in a conversation.

    ``images`` holds data-URI strings in upload order. It is a tuple so a
    persisted message cannot be changed through a reference held by a caller.
    """

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    images: tuple[str, ...]
    timestamp: datetime
