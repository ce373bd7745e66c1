"""
Playback Surface Interface

Abstract interface for whatever actually renders video (a UI player
widget). The sequencer and the preview only talk to this contract.

Why an interface?
1. Testability: MockSurface replays scripted position updates
2. Flexibility: Any player that reports positions and "ended" works
3. Clear contract: Documents exactly which commands the core issues
"""

from abc import ABC, abstractmethod
from typing import Callable

from playback.models.clip import Clip

PositionListener = Callable[[float], None]
EndedListener = Callable[[], None]


class PlaybackSurfaceInterface(ABC):
    """
    Abstract base class for playback surfaces.

    Notifications flow surface -> listener; commands flow the other way.
    Notifications are delivered on the caller's thread, one at a time.
    """

    @abstractmethod
    def attach(self, on_position: PositionListener, on_ended: EndedListener) -> None:
        """
        Register the listener for progress notifications.

        Args:
            on_position: Called with the current position (seconds) each
                time playback progresses
            on_ended: Called when the loaded media reaches its natural end
        """

    @abstractmethod
    def detach(self) -> None:
        """Stop delivering notifications"""

    @abstractmethod
    def load_clip(self, clip: Clip) -> None:
        """
        Load a clip and start playing it from position 0.

        Raises:
            PlaybackError: If the clip cannot be loaded
        """

    @abstractmethod
    def hold_at(self, position: float) -> None:
        """Pause playback and pin the position at `position`"""

    @abstractmethod
    def get_position(self) -> float:
        """Current playback position in seconds (0.0 when nothing loaded)"""

    @abstractmethod
    def release(self) -> None:
        """Stop playback and unload the current clip"""


class PlaybackError(Exception):
    """Raised when the playback surface cannot load or play a clip"""
