"""
Mock Playback Surface

Scripted playback surface for tests. Nothing is rendered: tests move the
playhead with advance_to()/play_through() and end media with finish(),
and the surface forwards those as notifications to its listener.
"""

import logging
from typing import List, Optional, Tuple

from playback.interfaces.playback_surface_interface import (
    EndedListener,
    PlaybackError,
    PlaybackSurfaceInterface,
    PositionListener,
)
from playback.models.clip import Clip


class MockSurface(PlaybackSurfaceInterface):
    """
    Mock playback surface.

    Records every command it receives (commands) and the last position
    reached by each clip before it was replaced or released
    (played_segments).
    """

    def __init__(self, fail_on_load: bool = False):
        """
        Initialize mock surface.

        Args:
            fail_on_load: Raise PlaybackError from load_clip (error tests)
        """
        self.logger = logging.getLogger(__name__)
        self.fail_on_load = fail_on_load

        self._on_position: Optional[PositionListener] = None
        self._on_ended: Optional[EndedListener] = None

        self.current_clip: Optional[Clip] = None
        self.position = 0.0
        self.is_paused = False
        self.load_count = 0

        self.commands: List[Tuple] = []
        self.played_segments: List[Tuple[str, float]] = []

    # =========================================================================
    # INTERFACE
    # =========================================================================

    def attach(self, on_position: PositionListener, on_ended: EndedListener) -> None:
        self._on_position = on_position
        self._on_ended = on_ended
        self.commands.append(("attach",))

    def detach(self) -> None:
        self._on_position = None
        self._on_ended = None
        self.commands.append(("detach",))

    def load_clip(self, clip: Clip) -> None:
        if self.fail_on_load:
            raise PlaybackError(f"[MOCK] Cannot load clip {clip.media_id}")

        self._close_segment()
        self.current_clip = clip
        self.position = 0.0
        self.is_paused = False
        self.load_count += 1
        self.commands.append(("load", clip.media_id))
        self.logger.debug(f"[MOCK] Loaded {clip!r}")

    def hold_at(self, position: float) -> None:
        self.position = position
        self.is_paused = True
        self.commands.append(("hold", position))

    def get_position(self) -> float:
        return self.position

    def release(self) -> None:
        self._close_segment()
        self.current_clip = None
        self.position = 0.0
        self.is_paused = False
        self.commands.append(("release",))

    # =========================================================================
    # TEST DRIVERS
    # =========================================================================

    def advance_to(self, position: float) -> None:
        """Move the playhead and emit one position update"""
        if self.current_clip is None or self.is_paused:
            self.logger.debug(f"[MOCK] Ignoring advance_to({position})")
            return

        self.position = position
        if self._on_position is not None:
            self._on_position(position)

    def finish(self) -> None:
        """Emit the natural-end notification for the loaded clip"""
        if self.current_clip is None:
            return
        if self._on_ended is not None:
            self._on_ended()

    def play_through(self, step: float = 0.25, natural_end: Optional[float] = None) -> None:
        """
        Play the loaded clip until the listener moves on or the media ends.

        Emits position updates every `step` seconds up to the clip's
        recorded duration (or `natural_end`), then the ended notification.
        Stops early when the listener loads another clip, holds, or
        releases the surface.

        Args:
            step: Seconds between position updates
            natural_end: Override for where the media physically ends
        """
        clip = self.current_clip
        if clip is None:
            return

        load_marker = self.load_count
        end = natural_end if natural_end is not None else clip.duration
        if end is None:
            raise ValueError("play_through needs a duration or natural_end")

        position = self.position
        while position < end:
            position = min(end, round(position + step, 6))
            self.advance_to(position)
            if self._moved_on(load_marker):
                return

        self.finish()

    def _moved_on(self, load_marker: int) -> bool:
        return (
            self.current_clip is None
            or self.load_count != load_marker
            or self.is_paused
        )

    def _close_segment(self) -> None:
        if self.current_clip is not None:
            self.played_segments.append((self.current_clip.media_id, self.position))

    @property
    def loaded_ids(self) -> List[str]:
        """Media ids in the order they were loaded"""
        return [command[1] for command in self.commands if command[0] == "load"]
