"""
Storage Interface

Abstract interface for the session/media store following Dependency
Inversion Principle. Controllers depend on this interface, not concrete
implementations.

Contract shared by every implementation:
- Each operation either applies all of its effects or none of them
- A successful write is durable when the call returns
- Failures are raised, never swallowed (see the exception taxonomy below)
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from storage.models.integrity import IntegrityReport
from storage.models.media_item import MediaItem
from storage.models.session import Session


class StorageInterface(ABC):
    """
    Abstract base class for session/media storage.

    Any storage implementation must provide these methods.
    This allows easy swapping between the SQLite store and the in-memory
    mock store for testing.
    """

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @abstractmethod
    def initialize(self) -> None:
        """
        Open the store.

        Creates the database and schema if needed.

        Raises:
            StorageFailure: If the store cannot be opened
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the store is open and functional.

        Returns:
            True if storage is ready, False otherwise
        """

    @abstractmethod
    def cleanup(self) -> None:
        """
        Close the store (release database connections, etc.).

        Safe to call more than once.
        """

    def __enter__(self) -> "StorageInterface":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.cleanup()

    # =========================================================================
    # SESSIONS
    # =========================================================================

    @abstractmethod
    def create_session(self, name: str) -> Session:
        """
        Create an empty session.

        created_at = last_modified = now, item_count = 0.

        Args:
            name: Display name

        Returns:
            The new Session

        Raises:
            StorageFailure: If the session cannot be written
        """

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[Session]:
        """
        Retrieve a session by ID.

        Returns:
            Session or None if not found
        """

    @abstractmethod
    def list_sessions(self) -> List[Session]:
        """
        List all sessions, most recently modified first.

        Ties on last_modified keep insertion order.

        Returns:
            List of Session objects
        """

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        """
        Delete a session and every media item it owns, atomically.

        Deleting a nonexistent session is a no-op.

        Raises:
            StorageFailure: If deletion fails (nothing is deleted)
        """

    # =========================================================================
    # MEDIA ITEMS
    # =========================================================================

    @abstractmethod
    def add_media_item(self, item: MediaItem) -> MediaItem:
        """
        Append a media item to its session.

        In one atomic unit: order = current item count, insert the item,
        increment the session's item_count and bump last_modified.

        Args:
            item: MediaItem to add (its order is ignored)

        Returns:
            The stored MediaItem with its assigned order

        Raises:
            NotFoundError: If the owning session does not exist
            ValidationError: If the crop rectangle is malformed
            StorageFailure: If the write fails (nothing is written)
        """

    @abstractmethod
    def get_media_item(self, media_id: str) -> Optional[MediaItem]:
        """
        Retrieve a media item by ID.

        Returns:
            MediaItem or None if not found
        """

    @abstractmethod
    def get_media_for_session(self, session_id: str) -> List[MediaItem]:
        """
        List a session's media items by order ascending.

        Equal orders (never produced by this store) fall back to
        created_at ascending.

        Returns:
            List of MediaItem objects (empty for unknown sessions)
        """

    @abstractmethod
    def update_media_item(self, item: MediaItem) -> MediaItem:
        """
        Overwrite a media item's edit metadata and bump its session's
        last_modified, atomically.

        The stored payload, session and order are kept; item_count is
        untouched.

        Returns:
            The stored MediaItem

        Raises:
            NotFoundError: If the item or its session does not exist
            ValidationError: If the crop is malformed or the item would
                change sessions
            StorageFailure: If the write fails
        """

    @abstractmethod
    def reorder_media_items(
        self,
        session_id: str,
        ordered_ids: Sequence[str],
    ) -> None:
        """
        Assign order = index for each id, atomically.

        Does not bump last_modified.

        Raises:
            NotFoundError: If the session does not exist
            ValidationError: If ordered_ids is not exactly a permutation of
                the session's media item ids
            StorageFailure: If the write fails
        """

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    @abstractmethod
    def verify_integrity(self) -> IntegrityReport:
        """
        Check item counts, ordering and ownership across all sessions.

        Returns:
            IntegrityReport listing every violation found
        """

    @abstractmethod
    def repair_integrity(self) -> IntegrityReport:
        """
        Fix every violation verify_integrity() reports, in one transaction.

        Orders are renumbered by (order, created_at), item counts are
        recomputed and orphaned items are deleted.

        Returns:
            IntegrityReport of what was found before repairing
        """


class StorageError(Exception):
    """
    Base exception for storage-related errors.

    Makes it easy to catch storage-specific errors:
        except StorageError as e:
            logger.error(f"Storage failed: {e}")
    """


class NotFoundError(StorageError):
    """Referenced session or media item does not exist"""


class ValidationError(StorageError):
    """Malformed input (crop rectangle, reorder permutation, trim point)"""


class StorageFailure(StorageError):
    """
    The persistence engine rejected or could not complete an operation.

    Possibly transient. No partial effect is left behind, so the caller
    may retry the whole operation.
    """
