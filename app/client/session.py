"""Browser-side chat session logic, driving the API over HTTP."""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from app.core.config import settings

from .attachments import Attachment, AttachmentPolicy, Notification
from .cache import ViewCache


logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = ("conversations",)


def messages_key(conversation_id: str) -> tuple[str, str, str]:
    return ("conversations", conversation_id, "messages")


class ChatSession:
    """Compose state, attachment staging and cached views for one user.

    Submissions clear the compose area optimistically and do not restore it
    when the request fails; the failure is reported through ``notifier``.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        policy: AttachmentPolicy | None = None,
        notifier: Callable[[Notification], None] | None = None,
        on_typing: Callable[[bool], None] | None = None,
        api_prefix: str = "/api",
    ):
        """Initialize the session.

        Args:
            http: Client pointed at the chat API's base URL.
            policy: Attachment gating rules.
            notifier: Receives transient notifications.
            on_typing: Told when a reply is being awaited and when it is done.
            api_prefix: Path prefix of the API routes.
        """
        self.http = http
        self.policy = policy or AttachmentPolicy()
        self.notifier = notifier
        self.on_typing = on_typing
        self.api_prefix = api_prefix.rstrip("/")
        self.cache = ViewCache()

        self.draft = ""
        self.staged: list[Attachment] = []
        self.active_conversation_id: str | None = None
        self.is_typing = False

    # Compose area

    def stage_files(self, files: list[Attachment]) -> list[Notification]:
        """Stage files that pass the attachment policy, notifying about the rest."""
        self.staged, notices = self.policy.stage(self.staged, files)
        for notice in notices:
            self._notify(notice)
        return notices

    def remove_file(self, index: int) -> None:
        self.staged = [a for i, a in enumerate(self.staged) if i != index]

    async def submit(self) -> dict[str, Any] | None:
        """Send the draft and staged files to the active conversation.

        Returns:
            The ``{"userMessage", "aiMessage"}`` payload, or ``None`` when
            nothing was sent or the request failed.
        """
        if not self.active_conversation_id:
            self._notify(
                Notification(
                    title="No conversation selected",
                    description="Please create a new chat or select an existing one.",
                    variant="destructive",
                )
            )
            return None

        text = self.draft.strip()
        files = list(self.staged)
        if not text and not files:
            return None

        conversation_id = self.active_conversation_id
        self.draft = ""
        self.staged = []

        self._set_typing(True)
        try:
            response = await self.http.post(
                f"{self._conversations_url()}/{conversation_id}/messages",
                data={"content": text},
                files=[("images", (a.filename, a.data, a.content_type)) for a in files] or None,
            )
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to send message to {conversation_id}: {str(e)}")
            self._notify(
                Notification(
                    title="Failed to send message",
                    description=self._error_message(e),
                    variant="destructive",
                )
            )
            return None
        finally:
            self._set_typing(False)

        self.cache.invalidate(messages_key(conversation_id))
        self.cache.invalidate(CONVERSATIONS_KEY)
        return result

    # Sidebar

    async def conversations(self) -> list[dict[str, Any]]:
        """Conversation list, newest activity first."""
        return await self.cache.get(CONVERSATIONS_KEY, lambda: self._get_json(self._conversations_url()))

    async def messages(self, conversation_id: str | None = None) -> list[dict[str, Any]]:
        """Messages of a conversation (the active one by default)."""
        conversation_id = conversation_id or self.active_conversation_id
        if not conversation_id:
            return []
        return await self.cache.get(
            messages_key(conversation_id),
            lambda: self._get_json(f"{self._conversations_url()}/{conversation_id}/messages"),
        )

    def select_conversation(self, conversation_id: str | None) -> None:
        self.active_conversation_id = conversation_id

    async def new_conversation(self, title: str = settings.default_conversation_title) -> dict[str, Any]:
        """Create a conversation and make it the active one."""
        response = await self.http.post(self._conversations_url(), json={"title": title})
        response.raise_for_status()
        conversation = response.json()

        self.cache.invalidate(CONVERSATIONS_KEY)
        self.select_conversation(conversation["id"])
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        response = await self.http.delete(f"{self._conversations_url()}/{conversation_id}")
        response.raise_for_status()

        self.cache.invalidate(CONVERSATIONS_KEY)
        if self.active_conversation_id == conversation_id:
            self.select_conversation(None)

    # Helpers

    def _conversations_url(self) -> str:
        return f"{self.api_prefix}/conversations"

    async def _get_json(self, url: str) -> Any:
        response = await self.http.get(url)
        response.raise_for_status()
        return response.json()

    def _notify(self, notification: Notification) -> None:
        if self.notifier:
            self.notifier(notification)

    def _set_typing(self, typing: bool) -> None:
        self.is_typing = typing
        if self.on_typing:
            self.on_typing(typing)

    @staticmethod
    def _error_message(error: Exception) -> str:
        if not isinstance(error, httpx.HTTPError):
            return "Invalid response from server"
        if isinstance(error, httpx.HTTPStatusError):
            try:
                body = error.response.json()
            except ValueError:
                return error.response.text or "Failed to send message"
            if isinstance(body, dict) and body.get("message"):
                return body["message"]
        return str(error) or "Failed to send message"
