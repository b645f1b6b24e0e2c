"""Attachment policy exceptions."""

from .base import BaseAppException


class UnsupportedAttachmentError(BaseAppException):
    """Raised when an attachment's MIME type is not accepted."""

    def __init__(self, filename: str, content_type: str):
        self.filename = filename
        self.content_type = content_type
        super().__init__(
            message=f"{filename} is not a supported file type.",
            status_code=415,
            error_code="UNSUPPORTED_ATTACHMENT",
            details={"filename": filename, "content_type": content_type},
        )


class AttachmentTooLargeError(BaseAppException):
    """Raised when an attachment exceeds the per-file size limit."""

    def __init__(self, filename: str, size: int, limit: int):
        self.filename = filename
        self.size = size
        self.limit = limit
        super().__init__(
            message=f"{filename} is larger than {limit // (1024 * 1024)} MB.",
            status_code=413,
            error_code="ATTACHMENT_TOO_LARGE",
            details={"filename": filename, "size": size, "limit": limit},
        )
