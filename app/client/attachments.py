"""Attachment staging policy applied before anything reaches the network."""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from app.core.config import settings
from app.exceptions.attachment import AttachmentTooLargeError, UnsupportedAttachmentError
from app.shared.text import format_file_size

ACCEPTED_PREFIXES = ("image/", "video/", "audio/")
ACCEPTED_TYPES = frozenset({"application/pdf", "text/plain"})


@dataclass(frozen=True)
class Attachment:
    """A local file staged for upload."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "Attachment":
        """Load a file from disk, guessing its MIME type from the name."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content_type=content_type or guessed or "application/octet-stream",
            data=path.read_bytes(),
        )


@dataclass(frozen=True)
class Notification:
    """Transient user-facing notice."""

    title: str
    description: str
    variant: str = "default"


class AttachmentPolicy:
    """Type, size and count gating for staged attachments."""

    def __init__(
        self,
        max_size: int = settings.max_attachment_size,
        max_count: int = settings.max_attachments_per_message,
    ):
        self.max_size = max_size
        self.max_count = max_count

    @staticmethod
    def is_supported_type(content_type: str) -> bool:
        return (
            content_type.startswith(ACCEPTED_PREFIXES)
            or content_type in ACCEPTED_TYPES
            or "document" in content_type
        )

    def check(self, attachment: Attachment) -> list[UnsupportedAttachmentError | AttachmentTooLargeError]:
        """Return every policy violation; an empty list means the file is accepted."""
        problems = []
        if not self.is_supported_type(attachment.content_type):
            problems.append(UnsupportedAttachmentError(attachment.filename, attachment.content_type))
        if attachment.size > self.max_size:
            problems.append(AttachmentTooLargeError(attachment.filename, attachment.size, self.max_size))
        return problems

    def stage(
        self,
        staged: list[Attachment],
        incoming: list[Attachment],
    ) -> tuple[list[Attachment], list[Notification]]:
        """Merge accepted files into ``staged``.

        Rejected files produce a notification each. Files beyond
        ``max_count`` are dropped silently.
        """
        accepted = []
        notices = []
        for attachment in incoming:
            problems = self.check(attachment)
            notices.extend(self._notice(problem, attachment) for problem in problems)
            if not problems:
                accepted.append(attachment)

        return (staged + accepted)[: self.max_count], notices

    def _notice(self, problem: Exception, attachment: Attachment) -> Notification:
        if isinstance(problem, AttachmentTooLargeError):
            return Notification(
                title="File too large",
                description=(
                    f"{attachment.filename} ({format_file_size(attachment.size)}) "
                    f"is larger than {format_file_size(self.max_size)}."
                ),
                variant="destructive",
            )
        return Notification(
            title="Unsupported file type",
            description=str(problem),
            variant="destructive",
        )
