"""Data URI encoding for inline attachments."""

import base64

DEFAULT_MIME_TYPE = "application/octet-stream"


def encode_data_uri(data: bytes, mime_type: str | None) -> str:
    """Encode raw bytes as a self-describing ``data:<mime>;base64,<payload>`` string."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME_TYPE};base64,{payload}"
