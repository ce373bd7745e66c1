"""
Review Models

Input and result of one run of the flag workflow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from storage.constants import MediaType


class FlagState(Enum):
    """Flag workflow states"""

    JUST_RECORDED = "just_recorded"
    SAVED = "saved"  # Terminal: stored unflagged
    FLAGGED_AUTO = "flagged_auto"  # Terminal: stored flagged, prompt suppressed
    PROMPT_PENDING = "prompt_pending"  # Waiting for fix_now / just_flag
    FIX_NOW = "fix_now"  # Terminal: stored flagged, editor requested
    JUST_FLAGGED = "just_flagged"  # Terminal: stored flagged
    DISCARDED = "discarded"  # Terminal: too short, nothing stored


TERMINAL_FLAG_STATES = frozenset(
    {
        FlagState.SAVED,
        FlagState.FLAGGED_AUTO,
        FlagState.FIX_NOW,
        FlagState.JUST_FLAGGED,
        FlagState.DISCARDED,
    },
)


@dataclass(frozen=True)
class CaptureResult:
    """What the capture collaborator hands over for one finished capture"""

    media_type: MediaType
    payload: bytes
    duration: Optional[float] = None
    flagged: bool = False

    @property
    def is_video(self) -> bool:
        return self.media_type == MediaType.VIDEO


@dataclass(frozen=True)
class WorkflowOutcome:
    """
    Where a workflow run ended.

    media_id is None while the prompt is pending and for discarded clips.
    """

    state: FlagState
    media_id: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_FLAG_STATES
