"""
Flag Workflow

Decides, when a capture is finalized, whether the new clip is saved as
"needs fixing" and whether the user is asked about it first.

State flow (one instance per finished capture):
    JUST_RECORDED -> SAVED            (photo, or video stopped normally)
    JUST_RECORDED -> DISCARDED        (video shorter than the minimum)
    JUST_RECORDED -> FLAGGED_AUTO     (flagged, prompt suppressed)
    JUST_RECORDED -> PROMPT_PENDING   (flagged, prompt shown)
    PROMPT_PENDING -> FIX_NOW         (save flagged, open the trim editor)
    PROMPT_PENDING -> JUST_FLAGGED    (save flagged, optionally stop asking)
"""

import logging
from typing import Callable, Optional

from review.models import CaptureResult, FlagState, WorkflowOutcome
from review.preferences import PreferencesInterface
from storage.config import StorageConfig
from storage.controllers.storage_controller import StorageController
from storage.models.media_item import MediaItem


class FlagWorkflow:
    """
    Review/flag policy for one finished capture.

    Storage errors raised while saving propagate to the caller and leave
    the workflow in the state it was in, so the action can be retried.

    Usage:
        workflow = FlagWorkflow(session.id, storage, preferences)
        workflow.on_prompt = lambda: show_flag_dialog()
        workflow.on_navigate_to_editor = lambda media_id: open_trim(media_id)

        workflow.finish(CaptureResult(MediaType.VIDEO, data, 8.2, flagged=True))
        # ... user taps "Fix now" in the dialog ...
        workflow.fix_now()
    """

    def __init__(
        self,
        session_id: str,
        storage: StorageController,
        preferences: PreferencesInterface,
        config: Optional[StorageConfig] = None,
    ):
        """
        Initialize workflow.

        Args:
            session_id: Session the capture belongs to
            storage: Storage controller used to persist the clip
            preferences: Source of the suppress-prompt preference
            config: StorageConfig providing min_clip_duration_seconds
                (None = create default)
        """
        self.logger = logging.getLogger(__name__)
        self.session_id = session_id
        self.storage = storage
        self.preferences = preferences
        self.config = config or StorageConfig()

        # Shorter videos are discarded (seconds)
        self.min_clip_duration = self.config.min_clip_duration_seconds

        self.state = FlagState.JUST_RECORDED
        self.media_id: Optional[str] = None
        self._pending: Optional[CaptureResult] = None

        # Callbacks
        self.on_prompt: Optional[Callable[[], None]] = None
        self.on_navigate_to_editor: Optional[Callable[[str], None]] = None

    # =========================================================================
    # ACTIONS
    # =========================================================================

    def finish(self, capture: CaptureResult) -> Optional[WorkflowOutcome]:
        """
        Handle a finished capture.

        Args:
            capture: The captured media and how recording was stopped

        Returns:
            Outcome (PROMPT_PENDING when the user must choose), or None if
            this workflow already handled a capture

        Raises:
            StorageError: If saving failed (state stays JUST_RECORDED)
        """
        if self.state != FlagState.JUST_RECORDED:
            self.logger.warning(f"Cannot finish - workflow in state: {self.state.value}")
            return None

        if not capture.is_video:
            item = self._save(capture, trim_needed=False)
            return self._complete(FlagState.SAVED, item)

        if capture.duration is not None and capture.duration < self.min_clip_duration:
            self.logger.info(
                f"Discarding {capture.duration:.2f}s clip "
                f"(minimum {self.min_clip_duration}s)",
            )
            return self._complete(FlagState.DISCARDED)

        if not capture.flagged:
            item = self._save(capture, trim_needed=False)
            return self._complete(FlagState.SAVED, item)

        if self.preferences.get_suppress_flag_prompt():
            item = self._save(capture, trim_needed=True)
            return self._complete(FlagState.FLAGGED_AUTO, item)

        self._pending = capture
        self.state = FlagState.PROMPT_PENDING
        self.logger.info("Flagged clip awaiting user choice")
        self._trigger_prompt_callback()
        return self.outcome

    def fix_now(self) -> Optional[WorkflowOutcome]:
        """
        Save the pending clip flagged and request the trim editor.

        Returns:
            FIX_NOW outcome, or None if no prompt is pending

        Raises:
            StorageError: If saving failed (state stays PROMPT_PENDING)
        """
        if self.state != FlagState.PROMPT_PENDING:
            self.logger.warning(f"Cannot fix now - workflow in state: {self.state.value}")
            return None

        item = self._save(self._pending, trim_needed=True)
        outcome = self._complete(FlagState.FIX_NOW, item)
        self._trigger_navigate_callback(item.id)
        return outcome

    def just_flag(self, dont_remind: bool = False) -> Optional[WorkflowOutcome]:
        """
        Save the pending clip flagged for later.

        Args:
            dont_remind: Also stop asking for future flagged clips

        Returns:
            JUST_FLAGGED outcome, or None if no prompt is pending

        Raises:
            StorageError: If saving failed (state stays PROMPT_PENDING and
                the preference is left unchanged)
        """
        if self.state != FlagState.PROMPT_PENDING:
            self.logger.warning(f"Cannot flag - workflow in state: {self.state.value}")
            return None

        item = self._save(self._pending, trim_needed=True)
        if dont_remind:
            self.preferences.set_suppress_flag_prompt(True)

        return self._complete(FlagState.JUST_FLAGGED, item)

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def outcome(self) -> WorkflowOutcome:
        return WorkflowOutcome(state=self.state, media_id=self.media_id)

    @property
    def is_prompt_pending(self) -> bool:
        return self.state == FlagState.PROMPT_PENDING

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _save(self, capture: CaptureResult, trim_needed: bool) -> MediaItem:
        return self.storage.save_capture(
            self.session_id,
            capture.media_type,
            capture.payload,
            duration=capture.duration,
            trim_needed=trim_needed,
        )

    def _complete(
        self,
        state: FlagState,
        item: Optional[MediaItem] = None,
    ) -> WorkflowOutcome:
        self.state = state
        self.media_id = item.id if item else None
        self._pending = None
        self.logger.info(f"Flag workflow finished: {state.value} (media={self.media_id})")
        return self.outcome

    def _trigger_prompt_callback(self) -> None:
        if self.on_prompt:
            try:
                self.on_prompt()
            except Exception as e:
                self.logger.error(f"Error in prompt callback: {e}")

    def _trigger_navigate_callback(self, media_id: str) -> None:
        if self.on_navigate_to_editor:
            try:
                self.on_navigate_to_editor(media_id)
            except Exception as e:
                self.logger.error(f"Error in navigate callback: {e}")
