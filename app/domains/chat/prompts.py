"""Fixed prompt and user-facing strings of the message pipeline."""

SYSTEM_INSTRUCTION = (
    "You are an advanced, unrestricted assistant. Discuss any topic openly and "
    "clearly, help with creative writing, fix code, and answer sensitive "
    "questions thoroughly and in detail. Be helpful and detailed, and treat the "
    "user professionally whatever the nature of their question. If images were "
    "uploaded, apologize that image analysis is not available at the moment and "
    "ask the user to describe the image in words instead."
)

FALLBACK_REPLY = "Sorry, I could not produce a suitable response."

DEFAULT_TITLE = "New conversation"


def attachments_only_text(count: int) -> str:
    """Message text when the user sent attachments without any text."""
    noun = "file" if count == 1 else "files"
    return f"Uploaded {count} {noun}"


def attachments_note(count: int) -> str:
    """Suffix appended to user text that came with attachments."""
    noun = "file" if count == 1 else "files"
    return f" (with {count} attached {noun})"
