"""
Playback Controllers Package

Sequencer and preview state machines.
"""

from playback.controllers.clip_preview import ClipPreview
from playback.controllers.timeline_sequencer import TimelineSequencer

__all__ = [
    "ClipPreview",
    "TimelineSequencer",
]
