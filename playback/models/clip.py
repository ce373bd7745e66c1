"""
Clip Model

A video clip as seen by the playback layer: identity, boundaries and a
reference to the stored payload.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from playback.utils.timeline_utils import effective_end, is_skippable

if TYPE_CHECKING:
    from storage.models.media_item import CropRect, MediaItem


@dataclass(frozen=True)
class Clip:
    """
    One entry of a playback sequence.

    The payload is the store's bytes object itself, handed over by
    reference, never copied.
    """

    media_id: str
    duration: Optional[float] = None
    trim_end_time: Optional[float] = None
    payload: bytes = b""
    crop: Optional["CropRect"] = None

    @classmethod
    def from_media_item(cls, item: "MediaItem") -> "Clip":
        return cls(
            media_id=item.id,
            duration=item.duration,
            trim_end_time=item.trim_end_time,
            payload=item.payload,
            crop=item.crop,
        )

    @property
    def effective_end(self) -> Optional[float]:
        """Trim point, else duration, else None (play to natural end)"""
        return effective_end(self.trim_end_time, self.duration)

    @property
    def is_skippable(self) -> bool:
        """True when the effective end is <= 0"""
        return is_skippable(self.effective_end)

    def __repr__(self) -> str:
        return f"Clip(media_id='{self.media_id}', end={self.effective_end})"
