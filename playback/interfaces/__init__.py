"""
Playback Interfaces Package
"""

from playback.interfaces.playback_surface_interface import (
    PlaybackError,
    PlaybackSurfaceInterface,
)

__all__ = [
    "PlaybackError",
    "PlaybackSurfaceInterface",
]
