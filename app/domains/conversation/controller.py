"""Conversation API controller with FastAPI endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.dependencies import get_chat_service, get_conversation_or_404, get_store
from app.domains.chat.service import AttachmentPayload, ChatService
from app.exceptions.attachment import AttachmentTooLargeError
from app.exceptions.base import BaseAppException, ValidationError
from app.exceptions.chat import ConversationNotFoundError, TooManyAttachmentsError
from app.schemas.base import SuccessResponse
from app.schemas.chat import (
    ConversationCreate,
    ConversationResponse,
    MessageExchangeResponse,
    MessageResponse,
)
from app.storage import ChatRepository
from models import Conversation


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/conversations",
    tags=["conversations"],
)


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(store: ChatRepository = Depends(get_store)):
    """List all conversations, most recently active first."""
    try:
        return store.list_conversations()
    except Exception as e:
        logger.error(f"Error retrieving conversations: {str(e)}")
        raise BaseAppException("Failed to fetch conversations") from e


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_200_OK)
async def create_conversation(
    payload: Any = Body(None),
    store: ChatRepository = Depends(get_store),
):
    """Create a new, empty conversation.

    Raises:
        ValidationError: If the body is not a valid conversation (400).
    """
    try:
        data = ConversationCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid conversation data",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e

    return store.create_conversation(data.title)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(conversation: Conversation = Depends(get_conversation_or_404)):
    """Get a single conversation."""
    return conversation


@router.delete("/{conversation_id}", response_model=SuccessResponse)
async def delete_conversation(conversation_id: str, store: ChatRepository = Depends(get_store)):
    """Delete a conversation together with its messages.

    Raises:
        ConversationNotFoundError: If nothing was deleted.
    """
    try:
        deleted = store.delete_conversation(conversation_id)
    except Exception as e:
        logger.error(f"Error deleting conversation: {str(e)}")
        raise BaseAppException("Failed to delete conversation") from e

    if not deleted:
        raise ConversationNotFoundError(conversation_id=conversation_id)
    return SuccessResponse(success=True)


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(conversation_id: str, store: ChatRepository = Depends(get_store)):
    """List a conversation's messages in chronological order.

    Unknown ids yield an empty list.
    """
    try:
        return store.list_messages(conversation_id)
    except Exception as e:
        logger.error(f"Error retrieving messages: {str(e)}")
        raise BaseAppException("Failed to fetch messages") from e


@router.post("/{conversation_id}/messages", response_model=MessageExchangeResponse)
async def send_message(
    conversation: Conversation = Depends(get_conversation_or_404),
    content: str = Form(""),
    images: list[UploadFile] | None = File(None, description="Attachments"),
    service: ChatService = Depends(get_chat_service),
):
    """Send a message and get the assistant's reply.

    Accepts multipart form data: ``content`` plus up to the configured number
    of ``images`` file parts.
    """
    attachments = await _read_attachments(images or [])

    exchange = await service.submit_message(conversation.id, content, attachments)

    return MessageExchangeResponse(
        user_message=MessageResponse.model_validate(exchange.user_message),
        ai_message=MessageResponse.model_validate(exchange.assistant_message),
    )


async def _read_attachments(files: list[UploadFile]) -> list[AttachmentPayload]:
    """Read uploaded parts, enforcing the count and per-file size limits."""
    limit = settings.max_attachments_per_message
    if len(files) > limit:
        raise TooManyAttachmentsError(limit=limit, received=len(files))

    attachments = []
    for upload in files:
        data = await upload.read()
        if len(data) > settings.max_attachment_size:
            raise AttachmentTooLargeError(
                filename=upload.filename or "attachment",
                size=len(data),
                limit=settings.max_attachment_size,
            )
        attachments.append(
            AttachmentPayload(
                filename=upload.filename or "attachment",
                content_type=upload.content_type,
                data=data,
            )
        )
    return attachments
