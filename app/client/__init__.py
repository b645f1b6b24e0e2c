"""Client-side session controller for the chat API."""

from .attachments import Attachment, AttachmentPolicy, Notification
from .cache import ViewCache
from .session import ChatSession

__all__ = ["Attachment", "AttachmentPolicy", "ChatSession", "Notification", "ViewCache"]
