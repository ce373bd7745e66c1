"""
Storage Controller

High-level session library used by the capture, review and playback layers.
Provides simple API with event callbacks for the main application.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from playback.models.clip import Clip
from playback.utils.timeline_utils import format_clip_duration
from storage.constants import MediaType
from storage.implementations.local_storage import LocalStorage
from storage.interfaces.storage_interface import (
    NotFoundError,
    StorageError,
    StorageInterface,
)
from storage.models.media_item import CropRect, MediaItem
from storage.models.session import Session
from storage.utils.naming_utils import generate_media_id, generate_session_name
from storage.utils.validation_utils import validate_crop, validate_trim_end


class StorageController:
    """
    High-level storage controller.

    This class:
    - Names new sessions and builds new media items
    - Applies trim editor saves
    - Builds the playback queue for merged playback
    - Reports storage failures through on_storage_error, then re-raises

    Usage:
        storage = StorageController()
        storage.on_storage_error = lambda message: show_toast(message)

        session = storage.create_session()
        item = storage.save_capture(session.id, MediaType.VIDEO, data, 4.2)
        storage.save_edit(item.id, trim_end_time=3.0)
    """

    def __init__(
        self,
        storage_impl: Optional[StorageInterface] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize storage controller.

        Args:
            storage_impl: Storage implementation (None = auto-create LocalStorage)
            clock: Source of "now" for session names and capture timestamps
        """
        self.logger = logging.getLogger(__name__)
        self._clock = clock

        # Storage implementation
        self.storage = storage_impl or LocalStorage()
        self.storage.initialize()

        # Event callbacks
        self.on_storage_error: Optional[Callable[[str], None]] = (
            None  # passes error message
        )

        self.logger.info("Storage controller initialized")

    # =========================================================================
    # SESSION OPERATIONS
    # =========================================================================

    def create_session(self, name: Optional[str] = None) -> Session:
        """
        Create a new, empty session.

        Args:
            name: Display name (None = "Session <Mon> <day>, <time>")

        Returns:
            The stored Session

        Raises:
            StorageError: If the session could not be stored
        """
        name = name or generate_session_name(self._clock())
        try:
            return self.storage.create_session(name)
        except StorageError as e:
            self._report("create session", e)
            raise

    def get_session(self, session_id: str) -> Optional[Session]:
        return self.storage.get_session(session_id)

    def list_sessions(self) -> List[Session]:
        """All sessions, most recently modified first"""
        return self.storage.list_sessions()

    def delete_session(self, session_id: str) -> None:
        """Delete a session with all of its clips (no-op if missing)"""
        try:
            self.storage.delete_session(session_id)
        except StorageError as e:
            self._report("delete session", e)
            raise

    # =========================================================================
    # MEDIA OPERATIONS
    # =========================================================================

    def save_capture(
        self,
        session_id: str,
        media_type: MediaType,
        payload: bytes,
        duration: Optional[float] = None,
        trim_needed: bool = False,
    ) -> MediaItem:
        """
        Store a finished photo or recording at the end of a session.

        Args:
            session_id: Owning session
            media_type: PHOTO or VIDEO
            payload: Encoded media bytes
            duration: Recording length in seconds (videos only)
            trim_needed: Flag the clip for later fixing

        Returns:
            The stored MediaItem (with its assigned order)

        Raises:
            NotFoundError: If the session does not exist
            StorageError: If the item could not be stored

        Example:
            item = storage.save_capture(session.id, MediaType.VIDEO, data, 12.4)
            print(item.order)
        """
        item = MediaItem(
            id=generate_media_id(),
            session_id=session_id,
            media_type=media_type,
            payload=payload,
            created_at=self._clock(),
            duration=duration if media_type == MediaType.VIDEO else None,
            trim_needed=trim_needed,
        )

        try:
            return self.storage.add_media_item(item)
        except StorageError as e:
            self._report("save clip", e)
            raise

    def get_media(self, session_id: str) -> List[MediaItem]:
        """A session's items in playback order"""
        return self.storage.get_media_for_session(session_id)

    def get_media_item(self, media_id: str) -> Optional[MediaItem]:
        return self.storage.get_media_item(media_id)

    def save_edit(
        self,
        media_id: str,
        trim_end_time: Optional[float] = None,
        crop: Optional[CropRect] = None,
    ) -> MediaItem:
        """
        Save the trim editor's result.

        The clip is marked fixed (trim_needed cleared), its trim point is
        stored, and its duration becomes the trimmed length so clip lists
        show what will actually play.

        Args:
            media_id: Item being edited
            trim_end_time: New end of the usable content (seconds)
            crop: Normalized crop rectangle, or None for no crop

        Returns:
            The updated MediaItem

        Raises:
            NotFoundError: If the item (or its session) does not exist
            ValidationError: If the trim point or crop is out of range
        """
        try:
            item = self.storage.get_media_item(media_id)
            if item is None:
                raise NotFoundError(f"Media item not found: id={media_id}")

            validate_crop(crop)
            validate_trim_end(trim_end_time, item.duration)

            edited = replace(
                item,
                trim_needed=False,
                trim_end_time=trim_end_time,
                duration=trim_end_time if trim_end_time is not None else item.duration,
                crop=crop,
            )
            updated = self.storage.update_media_item(edited)

        except StorageError as e:
            self._report("save edit", e)
            raise

        self.logger.info(
            f"Edit saved for {media_id} "
            f"(trim_end={trim_end_time}, crop={'yes' if crop else 'no'})",
        )
        return updated

    def reorder(self, session_id: str, ordered_ids: Sequence[str]) -> None:
        """
        Persist a new clip order (e.g. after drag and drop).

        Raises:
            NotFoundError: If the session does not exist
            ValidationError: If ordered_ids is not a permutation of the
                session's item ids
        """
        try:
            self.storage.reorder_media_items(session_id, ordered_ids)
        except StorageError as e:
            self._report("reorder clips", e)
            raise

    # =========================================================================
    # PLAYBACK / DISPLAY
    # =========================================================================

    def get_playback_queue(self, session_id: str) -> List[Clip]:
        """
        Video clips of a session, in order, ready for the sequencer.

        Photos are left out. Payloads are passed by reference.
        """
        return [
            Clip.from_media_item(item)
            for item in self.storage.get_media_for_session(session_id)
            if item.is_video
        ]

    @staticmethod
    def needs_editor(item: MediaItem) -> bool:
        """Flagged videos open in the trim editor instead of the preview"""
        return item.is_video and item.trim_needed

    @staticmethod
    def format_clip_duration(item: MediaItem) -> str:
        """Clip length for lists, e.g. "1:05" ("" for photos/unknown)"""
        return format_clip_duration(item.display_duration)

    # =========================================================================
    # CALLBACK TRIGGERS
    # =========================================================================

    def _report(self, action: str, error: StorageError) -> None:
        """Log a failure and notify on_storage_error"""
        message = f"Could not {action}: {error}"
        self.logger.error(message)

        if self.on_storage_error:
            try:
                self.on_storage_error(message)
            except Exception as e:
                self.logger.error(f"Error in storage error callback: {e}")

    def cleanup(self) -> None:
        """Close the underlying store"""
        self.storage.cleanup()
        self.logger.info("Storage controller cleaned up")
