"""
Playback Test Configuration and Fixtures

Shared fixtures for sequencer and preview tests.
"""

import pytest

from playback.controllers.clip_preview import ClipPreview
from playback.controllers.timeline_sequencer import TimelineSequencer
from playback.implementations.mock_surface import MockSurface
from playback.models.clip import Clip

# =============================================================================
# SURFACE FIXTURES
# =============================================================================


@pytest.fixture
def mock_surface():
    """
    Provide a fresh MockSurface.

    Usage:
        def test_playback(mock_surface):
            mock_surface.load_clip(clip)
            mock_surface.play_through()
    """
    return MockSurface()


# =============================================================================
# CONTROLLER FIXTURES
# =============================================================================


@pytest.fixture
def sequencer(mock_surface):
    """
    Provide a TimelineSequencer on the mock surface, with every
    state change recorded in sequencer.transitions.
    """
    sequencer = TimelineSequencer(mock_surface)
    sequencer.transitions = []
    sequencer.on_state_change = (
        lambda old, new, index: sequencer.transitions.append((new, index))
    )
    return sequencer


@pytest.fixture
def preview(mock_surface):
    """Provide a ClipPreview on the mock surface"""
    preview = ClipPreview(mock_surface)
    yield preview
    preview.close()


# =============================================================================
# CLIP FIXTURES
# =============================================================================


@pytest.fixture
def scenario_clips():
    """
    Three clips of 5.0s, 3.0s and 4.0s; the middle one trimmed to 1.5s.
    """
    return [
        Clip(media_id="id0", duration=5.0, payload=b"c0"),
        Clip(media_id="id1", duration=3.0, trim_end_time=1.5, payload=b"c1"),
        Clip(media_id="id2", duration=4.0, payload=b"c2"),
    ]


@pytest.fixture
def callback_tracker():
    """
    Record callback invocations.

    Usage:
        sequencer.on_complete = callback_tracker.track("complete")
        ...
        assert callback_tracker.names() == ["complete"]
    """
    class CallbackTracker:
        def __init__(self):
            self.calls = []

        def track(self, name):
            def _record(*args):
                self.calls.append((name, args))
            return _record

        def names(self):
            return [name for name, _ in self.calls]

    return CallbackTracker()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Full integration tests")
