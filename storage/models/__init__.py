"""
Storage Models Package
"""

from storage.models.integrity import IntegrityIssue, IntegrityReport
from storage.models.media_item import CropRect, MediaItem
from storage.models.session import Session

__all__ = [
    "CropRect",
    "IntegrityIssue",
    "IntegrityReport",
    "MediaItem",
    "Session",
]
