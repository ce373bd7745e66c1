"""
Media Item Models

Data classes representing captured photos/videos and their edit metadata.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from storage.constants import MediaType
from storage.models.session import format_timestamp


@dataclass(frozen=True)
class CropRect:
    """
    Normalized crop rectangle.

    All values are fractions of the frame (0..1). Validity
    (x + width <= 1, y + height <= 1, width > 0, height > 0) is checked by
    storage.utils.validation_utils.validate_crop on every write.
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def full_frame(cls) -> "CropRect":
        """Crop covering the whole frame (the editor's reset value)"""
        return cls(x=0.0, y=0.0, width=1.0, height=1.0)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class MediaItem:
    """
    One captured photo or video clip belonging to exactly one session.

    The payload is owned by the store and never rewritten: trims and crops
    are kept as metadata next to it. `order` is assigned by the store on
    insert, so the value passed in by callers is ignored.
    """

    # Identification
    id: str
    session_id: str
    media_type: MediaType

    # Captured content (opaque bytes)
    payload: bytes = b""

    # Timestamps
    created_at: datetime = field(default_factory=datetime.now)

    # Video information (seconds)
    duration: Optional[float] = None

    # Review / edit metadata
    trim_needed: bool = False
    trim_end_time: Optional[float] = None
    crop: Optional[CropRect] = None

    # Position within the session (0-based, gap-free)
    order: int = 0

    @property
    def is_video(self) -> bool:
        return self.media_type == MediaType.VIDEO

    @property
    def is_photo(self) -> bool:
        return self.media_type == MediaType.PHOTO

    @property
    def display_duration(self) -> Optional[float]:
        """Length shown in clip lists: trim point if trimmed, else duration"""
        if not self.is_video:
            return None
        if self.trim_end_time is not None:
            return self.trim_end_time
        return self.duration

    def to_dict(self) -> dict:
        """Convert to dictionary for database storage"""
        crop = self.crop
        return {
            "id": self.id,
            "session_id": self.session_id,
            "media_type": self.media_type.value,
            "payload": self.payload,
            "created_at": format_timestamp(self.created_at),
            "duration": self.duration,
            "trim_needed": int(self.trim_needed),
            "trim_end_time": self.trim_end_time,
            "crop_x": crop.x if crop else None,
            "crop_y": crop.y if crop else None,
            "crop_width": crop.width if crop else None,
            "crop_height": crop.height if crop else None,
            "item_order": self.order,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MediaItem":
        """Create MediaItem from dictionary (database row)"""
        crop = None
        if data.get("crop_width") is not None:
            crop = CropRect(
                x=data["crop_x"],
                y=data["crop_y"],
                width=data["crop_width"],
                height=data["crop_height"],
            )

        return cls(
            id=data["id"],
            session_id=data["session_id"],
            media_type=MediaType(data["media_type"]),
            payload=bytes(data.get("payload") or b""),
            created_at=datetime.fromisoformat(data["created_at"]),
            duration=data.get("duration"),
            trim_needed=bool(data.get("trim_needed", 0)),
            trim_end_time=data.get("trim_end_time"),
            crop=crop,
            order=data.get("item_order", 0),
        )

    def __repr__(self) -> str:
        """Human-readable representation (payload omitted)"""
        return (
            f"MediaItem(id='{self.id}', type={self.media_type.value}, "
            f"order={self.order}, trim_needed={self.trim_needed})"
        )
