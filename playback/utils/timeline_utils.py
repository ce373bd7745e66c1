"""
Timeline Utilities

Pure functions deciding where a clip's playback ends. They take only the
observed position and the boundary, so the sequencer's transitions can be
tested without a real playback surface or clock.
"""

from typing import Optional

from config.settings import BOUNDARY_EPSILON_SECONDS


def effective_end(
    trim_end_time: Optional[float],
    duration: Optional[float],
) -> Optional[float]:
    """
    Offset (seconds) at which playback of a clip stops.

    Args:
        trim_end_time: Trim point, if the clip was trimmed
        duration: Recorded length, if known

    Returns:
        trim_end_time when set, else duration; None means
        "play to natural end"

    Example:
        effective_end(1.5, 3.0)   # 1.5
        effective_end(None, 5.0)  # 5.0
        effective_end(None, None) # None
    """
    if trim_end_time is not None:
        return trim_end_time
    return duration


def has_reached_boundary(
    position: float,
    boundary: Optional[float],
    epsilon: float = BOUNDARY_EPSILON_SECONDS,
) -> bool:
    """
    Check whether an observed playback position is at or past a boundary.

    Args:
        position: Current playback position (seconds)
        boundary: Effective end (None = no boundary, never reached)
        epsilon: Float tolerance

    Returns:
        True if playback must stop/advance
    """
    if boundary is None:
        return False
    return position >= boundary - epsilon


def is_skippable(boundary: Optional[float]) -> bool:
    """A clip whose effective end is <= 0 has nothing to play"""
    return boundary is not None and boundary <= 0


def format_clip_duration(seconds: Optional[float]) -> str:
    """
    Format a clip length as m:ss for clip lists.

    Args:
        seconds: Length in seconds (None or 0 renders as "")

    Returns:
        Formatted string

    Example:
        format_clip_duration(75.4)  # "1:15"
    """
    if not seconds:
        return ""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
