"""
Naming Utilities

Identifiers and default display names for sessions and media items.
"""

import uuid
from datetime import datetime
from typing import Optional

from config.settings import SESSION_NAME_PREFIX


def generate_session_name(
    now: Optional[datetime] = None,
    prefix: str = SESSION_NAME_PREFIX,
) -> str:
    """
    Generate the default name for a new session.

    Args:
        now: Creation time (None = current time)
        prefix: Leading word

    Returns:
        Name like "Session Oct 18, 3:45 PM"

    Example:
        generate_session_name(datetime(2025, 1, 15, 14, 30))
        # Returns: "Session Jan 15, 2:30 PM"
    """
    now = now or datetime.now()
    hour = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    return f"{prefix} {now.strftime('%b')} {now.day}, {hour}:{now.minute:02d} {meridiem}"


def generate_media_id() -> str:
    """Fresh opaque identifier for a media item"""
    return str(uuid.uuid4())
