"""
Local Storage Implementation

Concrete implementation of StorageInterface backed by SQLite.
Composes the MetadataManager's row-level helpers into the store's
atomic compound operations.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from storage.config import StorageConfig
from storage.constants import IntegrityIssueKind
from storage.interfaces.storage_interface import (
    NotFoundError,
    StorageError,
    StorageInterface,
    ValidationError,
)
from storage.managers.metadata_manager import MetadataManager
from storage.models.integrity import IntegrityReport
from storage.models.media_item import MediaItem
from storage.models.session import Session
from storage.utils.integrity_utils import check_integrity, renumber
from storage.utils.validation_utils import validate_crop, validate_permutation


class LocalStorage(StorageInterface):
    """
    SQLite-backed session/media store.

    Every compound operation runs inside one MetadataManager.transaction(),
    so a failure at any step leaves the database exactly as it was.

    Usage:
        with LocalStorage(config) as store:
            session = store.create_session("Warmup")
            store.add_media_item(item)
    """

    def __init__(
        self,
        config: Optional[StorageConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize local storage.

        Args:
            config: StorageConfig object (None = create default)
            clock: Source of "now" for timestamps
        """
        self.logger = logging.getLogger(__name__)
        self.config = config or StorageConfig()
        self._clock = clock

        self.metadata_manager = MetadataManager(
            self.config.db_path,
            timeout=self.config.db_timeout_seconds,
        )

        self.logger.info(f"Local storage created (db: {self.config.db_path})")

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """Open the database (creates schema on first use)"""
        self.metadata_manager.open()
        self.logger.info("Storage system initialized and ready")

    def is_available(self) -> bool:
        """Check the database answers a trivial query"""
        if not self.metadata_manager.is_open:
            return False
        try:
            with self.metadata_manager.query() as cursor:
                cursor.execute("SELECT 1")
            return True
        except StorageError as e:
            self.logger.error(f"Storage availability check failed: {e}")
            return False

    def cleanup(self) -> None:
        """Close the database"""
        self.metadata_manager.close()

    # =========================================================================
    # SESSIONS
    # =========================================================================

    def create_session(self, name: str) -> Session:
        now = self._clock()
        session = Session(
            id=str(uuid.uuid4()),
            name=name,
            created_at=now,
            last_modified=now,
            item_count=0,
        )

        with self.metadata_manager.transaction() as cursor:
            self.metadata_manager.insert_session(cursor, session)

        self.logger.info(f"Created session: {session.name} (id={session.id})")
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self.metadata_manager.query() as cursor:
            return self.metadata_manager.fetch_session(cursor, session_id)

    def list_sessions(self) -> List[Session]:
        with self.metadata_manager.query() as cursor:
            return self.metadata_manager.fetch_sessions(cursor)

    def delete_session(self, session_id: str) -> None:
        """Remove the session and all of its media items in one transaction"""
        with self.metadata_manager.transaction() as cursor:
            removed_items = self.metadata_manager.delete_items_for_session(
                cursor,
                session_id,
            )
            removed = self.metadata_manager.delete_session_row(cursor, session_id)

        if removed:
            self.logger.info(
                f"Deleted session id={session_id} ({removed_items} media items)",
            )
        else:
            self.logger.debug(f"Delete ignored, no session id={session_id}")

    # =========================================================================
    # MEDIA ITEMS
    # =========================================================================

    def add_media_item(self, item: MediaItem) -> MediaItem:
        """
        Append an item to its session.

        Process (single transaction):
        1. Load the owning session (NotFoundError if missing)
        2. order = number of items the session owns
        3. Insert the item
        4. item_count + 1, last_modified = now
        """
        validate_crop(item.crop)

        with self.metadata_manager.transaction() as cursor:
            session = self.metadata_manager.fetch_session(cursor, item.session_id)
            if session is None:
                raise NotFoundError(f"Session not found: id={item.session_id}")

            order = self.metadata_manager.count_items(cursor, item.session_id)
            stored = replace(item, order=order)
            self.metadata_manager.insert_item(cursor, stored)

            self.metadata_manager.update_session(
                cursor,
                session.next_version(self._clock(), item_delta=1),
            )

        self.logger.info(
            f"Added {stored.media_type.value} to session {stored.session_id} "
            f"(order={stored.order}, trim_needed={stored.trim_needed})",
        )
        return stored

    def get_media_item(self, media_id: str) -> Optional[MediaItem]:
        with self.metadata_manager.query() as cursor:
            return self.metadata_manager.fetch_item(cursor, media_id)

    def get_media_for_session(self, session_id: str) -> List[MediaItem]:
        with self.metadata_manager.query() as cursor:
            return self.metadata_manager.fetch_items_for_session(cursor, session_id)

    def update_media_item(self, item: MediaItem) -> MediaItem:
        """Overwrite edit metadata and bump the session's last_modified"""
        validate_crop(item.crop)

        with self.metadata_manager.transaction() as cursor:
            stored = self.metadata_manager.fetch_item(cursor, item.id)
            if stored is None:
                raise NotFoundError(f"Media item not found: id={item.id}")

            if stored.session_id != item.session_id:
                raise ValidationError(
                    f"Media item {item.id} belongs to session {stored.session_id}, "
                    f"cannot move to {item.session_id}",
                )

            session = self.metadata_manager.fetch_session(cursor, stored.session_id)
            if session is None:
                raise NotFoundError(f"Session not found: id={stored.session_id}")

            updated = replace(
                stored,
                duration=item.duration,
                trim_needed=item.trim_needed,
                trim_end_time=item.trim_end_time,
                crop=item.crop,
            )
            self.metadata_manager.update_item_metadata(cursor, updated)
            self.metadata_manager.update_session(
                cursor,
                session.next_version(self._clock()),
            )

        self.logger.debug(f"Updated media item: {updated!r}")
        return updated

    def reorder_media_items(
        self,
        session_id: str,
        ordered_ids: Sequence[str],
    ) -> None:
        """Apply a full permutation; last_modified is left alone"""
        ordered_ids = list(ordered_ids)

        with self.metadata_manager.transaction() as cursor:
            session = self.metadata_manager.fetch_session(cursor, session_id)
            if session is None:
                raise NotFoundError(f"Session not found: id={session_id}")

            existing = self.metadata_manager.fetch_item_ids(cursor, session_id)
            validate_permutation(ordered_ids, existing)

            for index, media_id in enumerate(ordered_ids):
                self.metadata_manager.set_item_order(cursor, media_id, index)

        self.logger.info(
            f"Reordered {len(ordered_ids)} media items in session {session_id}",
        )

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def verify_integrity(self) -> IntegrityReport:
        with self.metadata_manager.query() as cursor:
            sessions = self.metadata_manager.fetch_sessions(cursor)
            items = self.metadata_manager.fetch_all_items(cursor)

        return check_integrity(sessions, items)

    def repair_integrity(self) -> IntegrityReport:
        with self.metadata_manager.transaction() as cursor:
            sessions = self.metadata_manager.fetch_sessions(cursor)
            items = self.metadata_manager.fetch_all_items(cursor)
            report = check_integrity(sessions, items)

            for issue in report.issues:
                if issue.kind == IntegrityIssueKind.ORPHANED_ITEM:
                    self.metadata_manager.delete_item(cursor, issue.media_id)

            for session in sessions:
                owned = [item for item in items if item.session_id == session.id]

                for media_id, order in renumber(owned).items():
                    self.metadata_manager.set_item_order(cursor, media_id, order)

                if session.item_count != len(owned):
                    self.metadata_manager.update_session(
                        cursor,
                        replace(session, item_count=len(owned)),
                    )

        report.repaired = True
        self.logger.info(f"Integrity repair complete: {report.to_dict()}")
        return report
