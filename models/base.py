"""
Shared helpers for chat entities.

Entities are immutable dataclasses owned by the store. Identifiers are opaque
UUID4 strings and all timestamps are timezone-aware UTC datetimes.
"""

import uuid
from datetime import UTC, datetime


def new_id() -> str:
    """Generate a fresh opaque identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)
