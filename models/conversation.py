"""
Conversation entity.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Conversation:
    """
    A titled thread grouping an ordered sequence of messages.

    :ivar id: Opaque identifier assigned at creation.
    :ivar title: Free-text label, retitled after the first exchange.
    :ivar created_at: Set once at creation.
    :ivar updated_at: Refreshed on every update and every message append.
    """

    id: str
    title: str
    created_at: datetime
    updated_at: datetime


# Fields callers may change through the store's update operation.
MUTABLE_CONVERSATION_FIELDS = frozenset({"title", "updated_at"})
