"""
Clip Preview

Single-clip playback for the clip list and the trim editor. This is the
one-element case of the timeline: there is no next clip, so reaching the
trim point pauses and pins the position there instead of advancing.
"""

import logging
from typing import Callable, Optional

from playback.constants import PreviewState
from playback.interfaces.playback_surface_interface import PlaybackSurfaceInterface
from playback.models.clip import Clip
from playback.utils.timeline_utils import has_reached_boundary


class ClipPreview:
    """
    Preview controller for one clip.

    Usage:
        preview = ClipPreview(surface)
        preview.on_held = lambda position: show_replay_button()
        preview.open(clip)
        ...
        preview.replay()
        preview.close()
    """

    def __init__(self, surface: PlaybackSurfaceInterface):
        self.logger = logging.getLogger(__name__)
        self.surface = surface

        self.state = PreviewState.IDLE
        self.clip: Optional[Clip] = None
        self.held_position: Optional[float] = None

        self.on_held: Optional[Callable[[float], None]] = None

    def open(self, clip: Clip) -> None:
        """
        Load a clip and start playing it from 0.

        Opening another clip while one is shown replaces it.

        Raises:
            PlaybackError: If the surface cannot load the clip
        """
        if self.state in (PreviewState.IDLE, PreviewState.CLOSED):
            self.surface.attach(self._handle_position, self._handle_ended)

        self.clip = clip
        self._play()
        self.logger.info(f"Preview opened: {clip!r}")

    def replay(self) -> bool:
        """
        Restart the held clip from position 0.

        Returns:
            True if restarted, False if not HELD
        """
        if self.state != PreviewState.HELD:
            self.logger.warning(f"Cannot replay - preview is {self.state.value}")
            return False

        self._play()
        return True

    def close(self) -> None:
        """Dismiss the preview and release the surface"""
        if self.state == PreviewState.CLOSED:
            return

        self.surface.detach()
        self.surface.release()
        self.state = PreviewState.CLOSED
        self.clip = None
        self.held_position = None
        self.logger.info("Preview closed")

    def _play(self) -> None:
        self.held_position = None
        self.surface.load_clip(self.clip)
        self.state = PreviewState.PLAYING

        # A trim point at or before 0 holds immediately
        self._handle_position(0.0)

    def _handle_position(self, position: float) -> None:
        if self.state != PreviewState.PLAYING:
            return

        boundary = self.clip.trim_end_time
        if boundary is not None and has_reached_boundary(position, boundary):
            hold_position = max(boundary, 0.0)
            self.surface.hold_at(hold_position)
            self._hold(hold_position)

    def _handle_ended(self) -> None:
        if self.state != PreviewState.PLAYING:
            return
        self._hold(self.surface.get_position())

    def _hold(self, position: float) -> None:
        self.state = PreviewState.HELD
        self.held_position = position
        self.logger.debug(f"Preview held at {position:.3f}s")

        if self.on_held:
            try:
                self.on_held(position)
            except Exception as e:
                self.logger.error(f"Error in held callback: {e}")
