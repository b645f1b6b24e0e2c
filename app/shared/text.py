"""Text helpers shared by the server and the client."""

ELLIPSIS = "..."

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def truncate_title(text: str, max_length: int = 50) -> str:
    """Keep the first ``max_length`` characters, marking truncation with an ellipsis."""
    title = text[:max_length]
    if len(text) > max_length:
        title += ELLIPSIS
    return title


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``"0 Bytes"``, ``"512 Bytes"``, ``"1.5 MB"``."""
    if size <= 0:
        return "0 Bytes"

    value = float(size)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 1):g} {_SIZE_UNITS[index]}"
