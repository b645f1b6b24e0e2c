"""
Models package initialization.
"""

from .base import new_id, utc_now
from .conversation import MUTABLE_CONVERSATION_FIELDS, Conversation
from .message import Message, MessageCreate, MessageRole

__all__ = [
    "new_id",
    "utc_now",
    "Conversation",
    "MUTABLE_CONVERSATION_FIELDS",
    "Message",
    "MessageCreate",
    "MessageRole",
]
