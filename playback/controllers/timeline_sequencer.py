"""
Timeline Sequencer

Drives continuous "merged" playback across an ordered list of clips.

The sequencer never keeps time itself. It reacts to the playback
surface's progress notifications (position updates and "ended") and
decides, with has_reached_boundary(), when the current clip is over.
Everything runs on the notifying thread, one notification at a time.

State flow:
    IDLE -> PLAYING(i) -> ADVANCING -> PLAYING(i+1) ... -> DONE
    any non-terminal state -> ABORTED (abort())
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from playback.constants import TERMINAL_STATES, SequencerState
from playback.interfaces.playback_surface_interface import (
    PlaybackError,
    PlaybackSurfaceInterface,
)
from playback.models.clip import Clip
from playback.utils.timeline_utils import has_reached_boundary


class TimelineSequencer:
    """
    State machine for sequential playback of trimmed clips.

    Usage:
        sequencer = TimelineSequencer(surface)
        sequencer.on_clip_start = lambda i, clip: highlight(i)
        sequencer.on_complete = lambda: show_done()

        sequencer.start(controller.get_playback_queue(session_id))
        # ... surface drives the sequencer through notifications ...
        sequencer.abort()  # user pressed "close"
    """

    def __init__(self, surface: PlaybackSurfaceInterface):
        """
        Initialize sequencer.

        Args:
            surface: Playback surface the clips are loaded into
        """
        self.logger = logging.getLogger(__name__)
        self.surface = surface

        self.state = SequencerState.IDLE
        self._clips: List[Clip] = []
        self._index: Optional[int] = None
        self._skipped: List[int] = []

        # Callbacks
        self.on_state_change: Optional[
            Callable[[SequencerState, SequencerState, Optional[int]], None]
        ] = None
        self.on_clip_start: Optional[Callable[[int, Clip], None]] = None
        self.on_complete: Optional[Callable[[], None]] = None
        self.on_abort: Optional[Callable[[], None]] = None

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def start(self, clips: Sequence[Clip]) -> bool:
        """
        Start playing a sequence.

        Args:
            clips: Ordered clips; the list is fixed for this run

        Returns:
            True if started, False if the sequencer is not IDLE

        Raises:
            PlaybackError: If the surface cannot load a clip (sequencer
                ends ABORTED with the surface released)
        """
        if self.state != SequencerState.IDLE:
            self.logger.warning(f"Cannot start - sequencer in state: {self.state.value}")
            return False

        self._clips = list(clips)
        self._skipped = []
        self.logger.info(f"Starting sequence of {len(self._clips)} clip(s)")

        if not self._clips:
            self._finish()
            return True

        self.surface.attach(self._handle_position, self._handle_ended)
        self._play_from(0)
        return True

    def abort(self) -> bool:
        """
        Cancel playback immediately.

        Discards the sequence and releases the surface. Persisted data is
        never touched.

        Returns:
            True if aborted, False if already DONE/ABORTED
        """
        if self.state in TERMINAL_STATES:
            self.logger.warning(f"Cannot abort - sequencer already {self.state.value}")
            return False

        self.logger.info("Sequence aborted")
        self._release_surface()
        self._transition(SequencerState.ABORTED)
        self._clips = []
        self._trigger_abort_callback()
        return True

    def reset(self) -> None:
        """Return a finished sequencer to IDLE so it can be started again"""
        if self.state not in TERMINAL_STATES and self.state != SequencerState.IDLE:
            self.abort()
        self._clips = []
        self._index = None
        self._skipped = []
        self.state = SequencerState.IDLE

    # =========================================================================
    # SURFACE NOTIFICATIONS
    # =========================================================================

    def _handle_position(self, position: float) -> None:
        if self.state != SequencerState.PLAYING:
            self.logger.debug(
                f"Ignoring position {position:.3f}s in state {self.state.value}",
            )
            return

        clip = self._clips[self._index]
        if has_reached_boundary(position, clip.effective_end):
            self.logger.debug(
                f"Clip {self._index} reached boundary at {position:.3f}s",
            )
            self._advance()

    def _handle_ended(self) -> None:
        if self.state != SequencerState.PLAYING:
            self.logger.debug(f"Ignoring ended in state {self.state.value}")
            return

        self.logger.debug(f"Clip {self._index} ended naturally")
        self._advance()

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _advance(self) -> None:
        self._transition(SequencerState.ADVANCING)
        if self.state != SequencerState.ADVANCING:
            # Aborted from the state change callback
            return
        self._play_from(self._index + 1)

    def _play_from(self, index: int) -> None:
        """Load the first playable clip at or after index, or finish"""
        while index < len(self._clips) and self._clips[index].is_skippable:
            self.logger.info(
                f"Skipping clip {index} ({self._clips[index].media_id}): "
                f"nothing to play",
            )
            self._skipped.append(index)
            index += 1

        if index >= len(self._clips):
            self._finish()
            return

        clip = self._clips[index]
        try:
            self.surface.load_clip(clip)
        except PlaybackError as e:
            self.logger.error(f"Failed to load clip {index}: {e}")
            self._release_surface()
            self._transition(SequencerState.ABORTED)
            raise

        self._index = index
        self._transition(SequencerState.PLAYING)
        if self.state == SequencerState.PLAYING:
            self._trigger_clip_start_callback(index, clip)

    def _finish(self) -> None:
        if self._clips:
            self._release_surface()
        self._transition(SequencerState.DONE)
        self.logger.info("Sequence complete")
        self._trigger_complete_callback()

    def _transition(self, new_state: SequencerState) -> None:
        old_state = self.state
        self.state = new_state

        index = self._index if new_state == SequencerState.PLAYING else None
        suffix = f"({index})" if index is not None else ""
        self.logger.debug(f"Sequencer: {old_state.value} -> {new_state.value}{suffix}")

        if self.on_state_change:
            try:
                self.on_state_change(old_state, new_state, index)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def _release_surface(self) -> None:
        self.surface.detach()
        self.surface.release()

    # =========================================================================
    # CALLBACK TRIGGERS
    # =========================================================================

    def _trigger_clip_start_callback(self, index: int, clip: Clip) -> None:
        if self.on_clip_start:
            try:
                self.on_clip_start(index, clip)
            except Exception as e:
                self.logger.error(f"Error in clip start callback: {e}")

    def _trigger_complete_callback(self) -> None:
        if self.on_complete:
            try:
                self.on_complete()
            except Exception as e:
                self.logger.error(f"Error in complete callback: {e}")

    def _trigger_abort_callback(self) -> None:
        if self.on_abort:
            try:
                self.on_abort()
            except Exception as e:
                self.logger.error(f"Error in abort callback: {e}")

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def current_index(self) -> Optional[int]:
        """Index of the clip being played, None when not PLAYING"""
        if self.state != SequencerState.PLAYING:
            return None
        return self._index

    @property
    def skipped_indexes(self) -> List[int]:
        return list(self._skipped)

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "current_index": self.current_index,
            "clip_count": len(self._clips),
            "skipped": self.skipped_indexes,
        }
