"""Chat schemas for request/response serialization."""

from datetime import datetime

from pydantic import Field

from models import MessageRole

from .base import BaseSchema


class ConversationCreate(BaseSchema):
    """Schema for creating a new conversation."""

    title: str = Field(..., description="Initial conversation title")


class ConversationResponse(BaseSchema):
    """Schema for conversation response."""

    id: str
    title: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseSchema):
    """Schema for chat message response."""

    id: str
    conversation_id: str
    role: MessageRole
    content: str
    images: list[str] = Field(default_factory=list, description="Attachments as data URIs")
    timestamp: datetime


class MessageExchangeResponse(BaseSchema):
    """Schema for the result of one submission."""

    user_message: MessageResponse
    ai_message: MessageResponse
