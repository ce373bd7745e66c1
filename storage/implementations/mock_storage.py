"""
Mock Storage Implementation

In-memory storage implementation for testing without a database.
Same semantics as LocalStorage, including all-or-nothing compound
operations: each operation works on copies of the collections and swaps
them in only when every step succeeded.
"""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from storage.constants import IntegrityIssueKind
from storage.interfaces.storage_interface import (
    NotFoundError,
    StorageFailure,
    StorageInterface,
    ValidationError,
)
from storage.models.integrity import IntegrityReport
from storage.models.media_item import MediaItem
from storage.models.session import Session
from storage.utils.integrity_utils import check_integrity, renumber, sort_for_session
from storage.utils.validation_utils import validate_crop, validate_permutation

_Collections = Tuple[Dict[str, Session], Dict[str, MediaItem]]


class MockStorage(StorageInterface):
    """
    Mock storage for testing.

    This simulates the store in memory without touching the filesystem.
    Perfect for unit tests that don't need real SQLite I/O.

    Failure injection:
        storage.fail_next("add_media_item")
        storage.add_media_item(item)  # raises StorageFailure, nothing stored
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        """
        Initialize mock storage.

        Args:
            clock: Source of "now" for timestamps
        """
        self.logger = logging.getLogger(__name__)
        self._clock = clock

        # In-memory collections (dicts keep insertion order)
        self._sessions: Dict[str, Session] = {}
        self._items: Dict[str, MediaItem] = {}

        self._open = False
        self._pending_failures: Set[str] = set()

        # Track operations for test verification
        self.operation_log: List[str] = []

        self.logger.info("[MOCK] Storage created (simulation mode)")

    def _log_operation(self, operation: str) -> None:
        """Log operation for test verification"""
        self.operation_log.append(operation)
        self.logger.debug(f"[MOCK] {operation}")

    def _require_open(self) -> None:
        if not self._open:
            raise StorageFailure("Storage is not open (simulated)")

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[_Collections]:
        """
        Stage changes on copies, publish them only at the end.

        An injected failure fires after every step has been staged, so
        tests can check that nothing leaked out.
        """
        self._require_open()
        sessions = dict(self._sessions)
        items = dict(self._items)

        yield sessions, items

        if operation in self._pending_failures:
            self._pending_failures.discard(operation)
            self._log_operation(f"{operation}: simulated failure")
            raise StorageFailure(f"Simulated storage failure during {operation}")

        self._sessions = sessions
        self._items = items

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def initialize(self) -> None:
        """Open mock storage"""
        self._open = True
        self._log_operation("initialize")

    def is_available(self) -> bool:
        return self._open

    def cleanup(self) -> None:
        """Close mock storage (data is kept, like a database file)"""
        self._open = False
        self._log_operation("cleanup")

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

        with self._transaction("create_session") as (sessions, _):
            sessions[session.id] = session

        self._log_operation(f"create_session: {name}")
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        self._require_open()
        return self._sessions.get(session_id)

    def list_sessions(self) -> List[Session]:
        self._require_open()
        # sorted() is stable with reverse=True, so ties keep insertion order
        return sorted(
            self._sessions.values(),
            key=lambda session: session.last_modified,
            reverse=True,
        )

    def delete_session(self, session_id: str) -> None:
        with self._transaction("delete_session") as (sessions, items):
            sessions.pop(session_id, None)
            for media_id in [i.id for i in items.values() if i.session_id == session_id]:
                del items[media_id]

        self._log_operation(f"delete_session: {session_id}")

    # =========================================================================
    # MEDIA ITEMS
    # =========================================================================

    def add_media_item(self, item: MediaItem) -> MediaItem:
        validate_crop(item.crop)

        with self._transaction("add_media_item") as (sessions, items):
            session = sessions.get(item.session_id)
            if session is None:
                raise NotFoundError(f"Session not found: id={item.session_id}")

            if item.id in items:
                raise StorageFailure(f"Media item already exists: id={item.id}")

            order = sum(1 for i in items.values() if i.session_id == item.session_id)
            stored = replace(item, order=order)
            items[stored.id] = stored
            sessions[session.id] = session.next_version(self._clock(), item_delta=1)

        self._log_operation(f"add_media_item: {stored.id} (order={stored.order})")
        return stored

    def get_media_item(self, media_id: str) -> Optional[MediaItem]:
        self._require_open()
        return self._items.get(media_id)

    def get_media_for_session(self, session_id: str) -> List[MediaItem]:
        self._require_open()
        return sort_for_session(
            item for item in self._items.values() if item.session_id == session_id
        )

    def update_media_item(self, item: MediaItem) -> MediaItem:
        validate_crop(item.crop)

        with self._transaction("update_media_item") as (sessions, items):
            stored = items.get(item.id)
            if stored is None:
                raise NotFoundError(f"Media item not found: id={item.id}")

            if stored.session_id != item.session_id:
                raise ValidationError(
                    f"Media item {item.id} belongs to session {stored.session_id}, "
                    f"cannot move to {item.session_id}",
                )

            session = sessions.get(stored.session_id)
            if session is None:
                raise NotFoundError(f"Session not found: id={stored.session_id}")

            updated = replace(
                stored,
                duration=item.duration,
                trim_needed=item.trim_needed,
                trim_end_time=item.trim_end_time,
                crop=item.crop,
            )
            items[updated.id] = updated
            sessions[session.id] = session.next_version(self._clock())

        self._log_operation(f"update_media_item: {updated.id}")
        return updated

    def reorder_media_items(
        self,
        session_id: str,
        ordered_ids: Sequence[str],
    ) -> None:
        ordered_ids = list(ordered_ids)

        with self._transaction("reorder_media_items") as (sessions, items):
            if session_id not in sessions:
                raise NotFoundError(f"Session not found: id={session_id}")

            existing = [i.id for i in items.values() if i.session_id == session_id]
            validate_permutation(ordered_ids, existing)

            for index, media_id in enumerate(ordered_ids):
                items[media_id] = replace(items[media_id], order=index)

        self._log_operation(f"reorder_media_items: {session_id}")

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    def verify_integrity(self) -> IntegrityReport:
        self._require_open()
        return check_integrity(self._sessions.values(), self._items.values())

    def repair_integrity(self) -> IntegrityReport:
        with self._transaction("repair_integrity") as (sessions, items):
            report = check_integrity(sessions.values(), items.values())

            for issue in report.issues:
                if issue.kind == IntegrityIssueKind.ORPHANED_ITEM:
                    items.pop(issue.media_id, None)

            for session in list(sessions.values()):
                owned = [i for i in items.values() if i.session_id == session.id]
                for media_id, order in renumber(owned).items():
                    items[media_id] = replace(items[media_id], order=order)
                if session.item_count != len(owned):
                    sessions[session.id] = replace(session, item_count=len(owned))

        report.repaired = True
        self._log_operation(f"repair_integrity: {len(report.issues)} issues")
        return report

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def fail_next(self, operation: str) -> None:
        """Make the next call of `operation` fail with StorageFailure"""
        self._pending_failures.add(operation)
        self._log_operation(f"fail_next: {operation}")

    def put_raw_session(self, session: Session) -> None:
        """Store a session as-is, bypassing every invariant (for tests)"""
        self._sessions[session.id] = session

    def put_raw_item(self, item: MediaItem) -> None:
        """Store an item as-is, bypassing every invariant (for tests)"""
        self._items[item.id] = item

    def get_operation_log(self) -> List[str]:
        """Get list of all operations for test verification"""
        return self.operation_log.copy()

    def clear_operation_log(self) -> None:
        """Clear operation log"""
        self.operation_log.clear()

    def reset(self) -> None:
        """Reset mock storage to initial state"""
        self._sessions.clear()
        self._items.clear()
        self._pending_failures.clear()
        self.operation_log.clear()
        self._log_operation("reset")
