"""
Validation Utilities

Checks applied by every store write path before anything is persisted.
"""

import math
from collections import Counter
from typing import Iterable, Optional, Sequence

from config.settings import CROP_TOLERANCE
from storage.interfaces.storage_interface import ValidationError
from storage.models.media_item import CropRect


def validate_crop(crop: Optional[CropRect]) -> None:
    """
    Validate a normalized crop rectangle.

    Rules:
    1. All values are finite and lie within [0, 1]
    2. width > 0 and height > 0
    3. x + width <= 1 and y + height <= 1

    Args:
        crop: Rectangle to check (None = no crop, always valid)

    Raises:
        ValidationError: If any rule is violated

    Example:
        validate_crop(CropRect(0.1, 0.1, 0.5, 0.5))  # ok
        validate_crop(CropRect(0.6, 0.0, 0.5, 1.0))  # raises
    """
    if crop is None:
        return

    values = {
        "x": crop.x,
        "y": crop.y,
        "width": crop.width,
        "height": crop.height,
    }
    for name, value in values.items():
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValidationError(f"Crop {name} must be a finite number: {value!r}")
        if value < -CROP_TOLERANCE or value > 1 + CROP_TOLERANCE:
            raise ValidationError(f"Crop {name} out of range [0, 1]: {value}")

    if crop.width <= 0 or crop.height <= 0:
        raise ValidationError(
            f"Crop must have positive size: {crop.width}x{crop.height}",
        )

    if crop.x + crop.width > 1 + CROP_TOLERANCE:
        raise ValidationError(
            f"Crop exceeds frame width: x={crop.x} + width={crop.width} > 1",
        )

    if crop.y + crop.height > 1 + CROP_TOLERANCE:
        raise ValidationError(
            f"Crop exceeds frame height: y={crop.y} + height={crop.height} > 1",
        )


def validate_permutation(
    ordered_ids: Sequence[str],
    existing_ids: Iterable[str],
) -> None:
    """
    Check that ordered_ids is exactly a permutation of existing_ids.

    Same set, same cardinality, no duplicates.

    Raises:
        ValidationError: Describing the first mismatch found
    """
    existing = set(existing_ids)
    requested = list(ordered_ids)

    duplicates = sorted(
        media_id for media_id, count in Counter(requested).items() if count > 1
    )
    if duplicates:
        raise ValidationError(f"Duplicate ids in reorder: {duplicates}")

    unknown = sorted(set(requested) - existing)
    if unknown:
        raise ValidationError(f"Ids not in session: {unknown}")

    missing = sorted(existing - set(requested))
    if missing:
        raise ValidationError(f"Reorder is missing ids: {missing}")


def validate_trim_end(
    trim_end_time: Optional[float],
    duration: Optional[float],
) -> None:
    """
    Validate a trim point chosen in the editor.

    The editor's slider runs from 0 to the clip's duration, so a saved trim
    point must lie in that range (any non-negative value when the
    duration is unknown).

    Raises:
        ValidationError: If the trim point is negative, not finite or past
            the end of the clip
    """
    if trim_end_time is None:
        return

    if not math.isfinite(trim_end_time) or trim_end_time < 0:
        raise ValidationError(f"Invalid trim end time: {trim_end_time}")

    if duration is not None and trim_end_time > duration:
        raise ValidationError(
            f"Trim end time {trim_end_time}s is past clip end ({duration}s)",
        )
