# app/core/dependencies.py
"""FastAPI dependency providers.

The store and the inference client are built once per application by
``create_app`` and kept on ``app.state``; handlers receive them through
these providers instead of importing process-wide singletons.
"""
import logging

from fastapi import Depends, Path, Request

from app.core.config import settings
from app.domains.chat.service import ChatService
from app.exceptions.chat import ConversationNotFoundError
from app.services.inference_service import InferenceClient
from app.storage import ChatRepository
from models import Conversation

logger = logging.getLogger(__name__)


def get_store(request: Request) -> ChatRepository:
    """Return the application's conversation store."""
    return request.app.state.store


def get_inference_client(request: Request) -> InferenceClient:
    """Return the application's inference client."""
    return request.app.state.inference_client


def get_chat_service(
    store: ChatRepository = Depends(get_store),
    inference: InferenceClient = Depends(get_inference_client),
) -> ChatService:
    """Build the message pipeline for one request."""
    return ChatService(store, inference, settings)


def get_conversation_or_404(
    conversation_id: str = Path(..., description="Conversation ID"),
    store: ChatRepository = Depends(get_store),
) -> Conversation:
    """Resolve the path's conversation or raise a 404.

    Raises:
        ConversationNotFoundError: If the id is unknown or malformed.
    """
    conversation = store.get_conversation(conversation_id)
    if conversation is None:
        logger.info("Conversation %s not found", conversation_id)
        raise ConversationNotFoundError(conversation_id=conversation_id)
    return conversation
