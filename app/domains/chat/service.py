"""Message pipeline: one user submission into a persisted user/assistant pair."""

import logging
from dataclasses import dataclass

from app.core.config import Settings, settings
from app.domains.chat.prompts import (
    DEFAULT_TITLE,
    FALLBACK_REPLY,
    SYSTEM_INSTRUCTION,
    attachments_note,
    attachments_only_text,
)
from app.exceptions.chat import EmptySubmissionError, ProcessingFailedError
from app.services.inference_service import InferenceClient
from app.shared.data_uri import encode_data_uri
from app.shared.text import truncate_title
from app.storage import ChatRepository
from models import Message, MessageCreate, MessageRole


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttachmentPayload:
    """Raw uploaded file as received by the HTTP layer."""

    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class MessageExchange:
    """Both messages persisted by one successful submission."""

    user_message: Message
    assistant_message: Message


class ChatService:
    """Orchestrates a single user-submission to assistant-reply exchange."""

    def __init__(self, store: ChatRepository, inference: InferenceClient, config: Settings = settings):
        """Initialize the pipeline with its collaborators.

        Args:
            store: Repository holding conversations and messages.
            inference: Client for the external completion service.
            config: Application settings (title length).
        """
        self.store = store
        self.inference = inference
        self.config = config

    async def submit_message(
        self,
        conversation_id: str,
        text_content: str | None,
        attachments: list[AttachmentPayload] | None = None,
    ) -> MessageExchange:
        """Run the full exchange for ``conversation_id``.

        The conversation must exist; the HTTP layer checks this before calling.
        Steps run strictly in order and nothing is rolled back: if inference
        fails, the user message stays stored without a reply.

        Args:
            conversation_id: Target conversation.
            text_content: What the user typed; may be empty when files are attached.
            attachments: Uploaded files, stored inline as data URIs.

        Returns:
            The persisted user and assistant messages.

        Raises:
            EmptySubmissionError: Neither text nor attachments were supplied.
            ProcessingFailedError: Anything failed after validation.
        """
        text = (text_content or "").strip()
        attachments = attachments or []

        if not text and not attachments:
            raise EmptySubmissionError()

        try:
            images = [encode_data_uri(a.data, a.content_type) for a in attachments]
            message_text = self._resolve_message_text(text, len(images))

            user_message = self.store.create_message(
                MessageCreate(
                    conversation_id=conversation_id,
                    role=MessageRole.USER,
                    content=message_text,
                    images=images,
                )
            )

            reply = await self.inference.complete(SYSTEM_INSTRUCTION, message_text)

            assistant_message = self.store.create_message(
                MessageCreate(
                    conversation_id=conversation_id,
                    role=MessageRole.ASSISTANT,
                    content=reply or FALLBACK_REPLY,
                )
            )

            # First exchange: user message + assistant reply.
            if len(self.store.list_messages(conversation_id)) <= 2:
                self.store.update_conversation(conversation_id, title=self._generate_conversation_title(text))

        except Exception as e:
            logger.exception(f"Error processing message for conversation {conversation_id}: {str(e)}")
            raise ProcessingFailedError() from e

        return MessageExchange(user_message=user_message, assistant_message=assistant_message)

    @staticmethod
    def _resolve_message_text(text: str, attachment_count: int) -> str:
        """Describe attachments in the stored and prompted text."""
        if not attachment_count:
            return text
        if not text:
            return attachments_only_text(attachment_count)
        return text + attachments_note(attachment_count)

    def _generate_conversation_title(self, first_message: str) -> str:
        """Generate conversation title from the user's own text."""
        if not first_message:
            return DEFAULT_TITLE
        return truncate_title(first_message, self.config.title_max_length)
