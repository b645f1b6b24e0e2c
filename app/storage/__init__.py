"""Conversation and message storage."""

from .base import ChatRepository
from .memory import InMemoryChatStore

__all__ = ["ChatRepository", "InMemoryChatStore"]
