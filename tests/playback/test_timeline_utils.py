"""
Timeline Utilities Tests

Boundary decisions as pure functions of (position, effective end).
"""

import pytest

from playback.models.clip import Clip
from playback.utils.timeline_utils import (
    effective_end,
    format_clip_duration,
    has_reached_boundary,
    is_skippable,
)


@pytest.mark.unit
class TestEffectiveEnd:

    def test_trim_wins_over_duration(self):
        assert effective_end(1.5, 3.0) == 1.5

    def test_duration_when_untrimmed(self):
        assert effective_end(None, 5.0) == 5.0

    def test_unknown_means_natural_end(self):
        assert effective_end(None, None) is None

    def test_zero_trim_is_kept(self):
        assert effective_end(0.0, 3.0) == 0.0


@pytest.mark.unit
class TestHasReachedBoundary:

    @pytest.mark.parametrize(
        "position, boundary, expected",
        [
            (1.0, 1.5, False),
            (1.5, 1.5, True),
            (1.6, 1.5, True),
            (1.4999999, 1.5, True),  # within tolerance
            (1.49, 1.5, False),
            (1000.0, None, False),  # no boundary: only "ended" stops playback
            (0.0, 0.0, True),
        ],
    )
    def test_boundary(self, position, boundary, expected):
        assert has_reached_boundary(position, boundary) is expected


@pytest.mark.unit
def test_is_skippable():
    assert is_skippable(0.0)
    assert is_skippable(-2.0)
    assert not is_skippable(0.1)
    assert not is_skippable(None)


@pytest.mark.unit
@pytest.mark.parametrize(
    "seconds, expected",
    [(None, ""), (0, ""), (5.0, "0:05"), (75.4, "1:15"), (600, "10:00")],
)
def test_format_clip_duration(seconds, expected):
    assert format_clip_duration(seconds) == expected


@pytest.mark.unit
def test_clip_exposes_boundary():
    clip = Clip(media_id="a", duration=3.0, trim_end_time=1.5)

    assert clip.effective_end == 1.5
    assert not clip.is_skippable
    assert "a" in repr(clip)
