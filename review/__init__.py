"""
Review Module

Policy applied when a capture is finalized: save it plainly, flag it for
fixing (asking the user unless they opted out), or discard it.

Public API:
    - FlagWorkflow: One capture's review state machine
    - CaptureResult / WorkflowOutcome / FlagState: Workflow data
    - PreferencesInterface, FilePreferences, MemoryPreferences
"""

from review.flag_workflow import FlagWorkflow
from review.models import CaptureResult, FlagState, WorkflowOutcome
from review.preferences import (
    FilePreferences,
    MemoryPreferences,
    PreferencesInterface,
)

__all__ = [
    "CaptureResult",
    "FilePreferences",
    "FlagState",
    "FlagWorkflow",
    "MemoryPreferences",
    "PreferencesInterface",
    "WorkflowOutcome",
]
