"""
Playback Constants

State enumerations for merged (sequence) playback and single-clip preview.
"""

from enum import Enum


class SequencerState(Enum):
    """Timeline sequencer states"""

    IDLE = "idle"  # No sequence loaded
    PLAYING = "playing"  # Observing playback of the current clip
    ADVANCING = "advancing"  # Transient: moving to the next clip or done
    DONE = "done"  # Terminal: every clip played
    ABORTED = "aborted"  # Terminal: cancelled by the user


class PreviewState(Enum):
    """Single-clip preview states"""

    IDLE = "idle"  # Nothing loaded
    PLAYING = "playing"  # Clip playing
    HELD = "held"  # Paused at the trim point (or natural end)
    CLOSED = "closed"  # Preview dismissed, surface released


# Terminal sequencer states ignore every further notification
TERMINAL_STATES = frozenset({SequencerState.DONE, SequencerState.ABORTED})
