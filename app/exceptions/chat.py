"""Conversation and message pipeline exceptions."""

from typing import Any

from .base import BaseAppException, NotFoundError, ValidationError


class ConversationNotFoundError(NotFoundError):
    """Raised when a conversation id is unknown."""

    def __init__(self, message: str = "Conversation not found", conversation_id: str | None = None):
        details = {"conversation_id": conversation_id} if conversation_id else None
        super().__init__(message=message, error_code="CONVERSATION_NOT_FOUND", details=details)


class EmptySubmissionError(ValidationError):
    """Raised when a submission has neither text nor attachments."""

    def __init__(self, message: str = "A message or at least one attachment is required"):
        super().__init__(message=message, error_code="EMPTY_SUBMISSION")


class TooManyAttachmentsError(ValidationError):
    """Raised when a submission carries more attachments than allowed."""

    def __init__(self, limit: int, received: int):
        super().__init__(
            message=f"At most {limit} attachments are allowed per message",
            error_code="TOO_MANY_ATTACHMENTS",
            details={"limit": limit, "received": received},
        )


class ProcessingFailedError(BaseAppException):
    """Raised when the pipeline fails after validation.

    The message is generic. The underlying cause is chained and logged,
    never returned to the caller.
    """

    def __init__(
        self,
        message: str = "Failed to process message",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            error_code="PROCESSING_FAILED",
            details=details,
        )
