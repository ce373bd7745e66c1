"""
Playback Module

Sequential ("merged") playback of a session's clips and single-clip
preview, driven by a playback surface's progress notifications.

Public API:
    - TimelineSequencer: Plays an ordered list of clips back to back
    - ClipPreview: Plays one clip, holding at its trim point
    - Clip: Playback view of a stored video item
    - PlaybackSurfaceInterface: Contract for the UI player
    - MockSurface: Scripted surface for tests
    - PlaybackError: Surface failure

Usage:
    from playback import TimelineSequencer

    sequencer = TimelineSequencer(surface)
    sequencer.on_complete = lambda: print("done")
    sequencer.start(controller.get_playback_queue(session_id))
"""

from playback.constants import PreviewState, SequencerState
from playback.controllers.clip_preview import ClipPreview
from playback.controllers.timeline_sequencer import TimelineSequencer
from playback.implementations.mock_surface import MockSurface
from playback.interfaces.playback_surface_interface import (
    PlaybackError,
    PlaybackSurfaceInterface,
)
from playback.models.clip import Clip
from playback.utils.timeline_utils import (
    effective_end,
    format_clip_duration,
    has_reached_boundary,
)

__all__ = [
    "Clip",
    "ClipPreview",
    "MockSurface",
    "PlaybackError",
    "PlaybackSurfaceInterface",
    "PreviewState",
    "SequencerState",
    "TimelineSequencer",
    "effective_end",
    "format_clip_duration",
    "has_reached_boundary",
]
