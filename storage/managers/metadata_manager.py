"""
Metadata Manager

Manages the Sessions and MediaItems collections in a SQLite database.
Single responsibility: Database operations only.

Compound operations (add item + session bump, cascade delete, reorder) are
composed by LocalStorage from the row-level helpers below inside a single
transaction() block, so they commit or roll back as one unit.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from config.settings import DB_TIMEOUT_SECONDS
from storage.constants import INDEX_MEDIA_SESSION, TABLE_MEDIA_ITEMS, TABLE_SESSIONS
from storage.interfaces.storage_interface import StorageFailure
from storage.models.media_item import MediaItem
from storage.models.session import Session

# Columns written for every media item (payload included)
_MEDIA_COLUMNS = (
    "id",
    "session_id",
    "media_type",
    "payload",
    "created_at",
    "duration",
    "trim_needed",
    "trim_end_time",
    "crop_x",
    "crop_y",
    "crop_width",
    "crop_height",
    "item_order",
)

# Columns an edit may change (payload, owner and order are fixed)
_EDITABLE_COLUMNS = (
    "duration",
    "trim_needed",
    "trim_end_time",
    "crop_x",
    "crop_y",
    "crop_width",
    "crop_height",
)


class MetadataManager:
    """
    Manages session/media metadata in SQLite database.

    Responsibilities:
    - Create and maintain database schema
    - Row-level CRUD for sessions and media items
    - Transaction boundaries for compound operations

    Thread Safety:
    - One connection shared by the process
    - Every use of the connection (reads included) holds the lock, so a
      reader never observes another thread's uncommitted transaction
    """

    def __init__(self, db_path: Path, timeout: float = DB_TIMEOUT_SECONDS):
        """
        Initialize metadata manager.

        Args:
            db_path: Path of the SQLite database file
            timeout: Seconds to wait on a locked database
        """
        self.logger = logging.getLogger(__name__)
        self.db_path = Path(db_path)
        self._timeout = timeout
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def open(self) -> None:
        """Open the database and create tables if they don't exist"""
        with self._lock:
            if self._connection is not None:
                return

            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                # isolation_level=None: transactions are opened explicitly
                # with BEGIN IMMEDIATE in transaction()
                self._connection = sqlite3.connect(
                    str(self.db_path),
                    timeout=self._timeout,
                    isolation_level=None,
                    check_same_thread=False,
                )
                self._connection.row_factory = sqlite3.Row
            except (OSError, sqlite3.Error) as e:
                self._connection = None
                raise StorageFailure(f"Failed to open database: {e}") from e

            try:
                self._initialize_db()
            except StorageFailure:
                self.close()
                raise
            self.logger.info(f"Metadata database opened (db: {self.db_path})")

    def _initialize_db(self) -> None:
        """Create schema"""
        with self.transaction() as cursor:
            cursor.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE_SESSIONS} (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    last_modified TEXT NOT NULL,
                    item_count INTEGER NOT NULL DEFAULT 0
                )
            """,
            )

            cursor.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE_MEDIA_ITEMS} (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL,
                    media_type TEXT NOT NULL,
                    payload BLOB,
                    created_at TEXT NOT NULL,
                    duration REAL,
                    trim_needed INTEGER NOT NULL DEFAULT 0,
                    trim_end_time REAL,
                    crop_x REAL,
                    crop_y REAL,
                    crop_width REAL,
                    crop_height REAL,
                    item_order INTEGER NOT NULL
                )
            """,
            )

            # Secondary index for per-session listing and cascade delete
            cursor.execute(
                f"""
                CREATE INDEX IF NOT EXISTS {INDEX_MEDIA_SESSION}
                ON {TABLE_MEDIA_ITEMS}(session_id)
            """,
            )

        self.logger.debug("Database schema initialized")

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def close(self) -> None:
        """Close database connection"""
        with self._lock:
            if self._connection is None:
                return
            try:
                self._connection.close()
                self.logger.debug("Database connection closed")
            except sqlite3.Error as e:
                self.logger.warning(f"Error closing database: {e}")
            finally:
                self._connection = None

    def _require_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StorageFailure("Database is not open")
        return self._connection

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """
        Run a block as one atomic write.

        Commits when the block finishes, rolls back on any exception.
        sqlite3 errors surface as StorageFailure; other exceptions
        (NotFoundError, ValidationError) propagate unchanged.

        Example:
            with manager.transaction() as cursor:
                manager.insert_item(cursor, item)
                manager.update_session(cursor, session)
        """
        with self._lock:
            conn = self._require_connection()
            try:
                conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise StorageFailure(f"Failed to begin transaction: {e}") from e

            cursor = conn.cursor()
            try:
                yield cursor
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                self._rollback(conn)
                raise StorageFailure(f"Transaction failed: {e}") from e
            except BaseException:
                self._rollback(conn)
                raise
            finally:
                cursor.close()

    @contextmanager
    def query(self) -> Iterator[sqlite3.Cursor]:
        """Cursor for read-only statements, sqlite3 errors as StorageFailure"""
        with self._lock:
            conn = self._require_connection()
            cursor = conn.cursor()
            try:
                yield cursor
            except sqlite3.Error as e:
                raise StorageFailure(f"Query failed: {e}") from e
            finally:
                cursor.close()

    def _rollback(self, conn: sqlite3.Connection) -> None:
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
            self.logger.debug("Transaction rolled back")
        except sqlite3.Error as e:
            self.logger.error(f"Rollback failed: {e}")

    # =========================================================================
    # SESSION ROWS
    # =========================================================================

    def insert_session(self, cursor: sqlite3.Cursor, session: Session) -> None:
        data = session.to_dict()
        cursor.execute(
            f"""
            INSERT INTO {TABLE_SESSIONS} (
                id, name, created_at, last_modified, item_count
            ) VALUES (?, ?, ?, ?, ?)
        """,
            (
                data["id"],
                data["name"],
                data["created_at"],
                data["last_modified"],
                data["item_count"],
            ),
        )

    def update_session(self, cursor: sqlite3.Cursor, session: Session) -> None:
        """Write last_modified and item_count of an existing session"""
        data = session.to_dict()
        cursor.execute(
            f"""
            UPDATE {TABLE_SESSIONS}
            SET last_modified = ?, item_count = ?
            WHERE id = ?
        """,
            (data["last_modified"], data["item_count"], data["id"]),
        )

    def fetch_session(
        self,
        cursor: sqlite3.Cursor,
        session_id: str,
    ) -> Optional[Session]:
        cursor.execute(
            f"SELECT * FROM {TABLE_SESSIONS} WHERE id = ?",
            (session_id,),
        )
        row = cursor.fetchone()
        return Session.from_dict(dict(row)) if row else None

    def fetch_sessions(self, cursor: sqlite3.Cursor) -> List[Session]:
        """All sessions, most recently modified first, then insertion order"""
        # Timestamps are stored with fixed microsecond precision, so
        # lexical order equals chronological order
        cursor.execute(
            f"""
            SELECT * FROM {TABLE_SESSIONS}
            ORDER BY last_modified DESC, rowid ASC
        """,
        )
        return [Session.from_dict(dict(row)) for row in cursor.fetchall()]

    def delete_session_row(self, cursor: sqlite3.Cursor, session_id: str) -> int:
        cursor.execute(f"DELETE FROM {TABLE_SESSIONS} WHERE id = ?", (session_id,))
        return cursor.rowcount

    # =========================================================================
    # MEDIA ITEM ROWS
    # =========================================================================

    def insert_item(self, cursor: sqlite3.Cursor, item: MediaItem) -> None:
        data = item.to_dict()
        placeholders = ", ".join("?" for _ in _MEDIA_COLUMNS)
        cursor.execute(
            f"""
            INSERT INTO {TABLE_MEDIA_ITEMS} ({", ".join(_MEDIA_COLUMNS)})
            VALUES ({placeholders})
        """,
            tuple(data[column] for column in _MEDIA_COLUMNS),
        )

    def update_item_metadata(self, cursor: sqlite3.Cursor, item: MediaItem) -> int:
        """Overwrite edit metadata only; payload, owner and order are kept"""
        data = item.to_dict()
        assignments = ", ".join(f"{column} = ?" for column in _EDITABLE_COLUMNS)
        cursor.execute(
            f"UPDATE {TABLE_MEDIA_ITEMS} SET {assignments} WHERE id = ?",
            tuple(data[column] for column in _EDITABLE_COLUMNS) + (item.id,),
        )
        return cursor.rowcount

    def set_item_order(self, cursor: sqlite3.Cursor, media_id: str, order: int) -> None:
        cursor.execute(
            f"UPDATE {TABLE_MEDIA_ITEMS} SET item_order = ? WHERE id = ?",
            (order, media_id),
        )

    def fetch_item(self, cursor: sqlite3.Cursor, media_id: str) -> Optional[MediaItem]:
        cursor.execute(
            f"SELECT * FROM {TABLE_MEDIA_ITEMS} WHERE id = ?",
            (media_id,),
        )
        row = cursor.fetchone()
        return MediaItem.from_dict(dict(row)) if row else None

    def fetch_items_for_session(
        self,
        cursor: sqlite3.Cursor,
        session_id: str,
    ) -> List[MediaItem]:
        """Items of one session by order, created_at as tie-break"""
        cursor.execute(
            f"""
            SELECT * FROM {TABLE_MEDIA_ITEMS}
            WHERE session_id = ?
            ORDER BY item_order ASC, created_at ASC
        """,
            (session_id,),
        )
        return [MediaItem.from_dict(dict(row)) for row in cursor.fetchall()]

    def fetch_all_items(self, cursor: sqlite3.Cursor) -> List[MediaItem]:
        cursor.execute(
            f"SELECT * FROM {TABLE_MEDIA_ITEMS} ORDER BY session_id, item_order",
        )
        return [MediaItem.from_dict(dict(row)) for row in cursor.fetchall()]

    def fetch_item_ids(self, cursor: sqlite3.Cursor, session_id: str) -> List[str]:
        cursor.execute(
            f"SELECT id FROM {TABLE_MEDIA_ITEMS} WHERE session_id = ?",
            (session_id,),
        )
        return [row["id"] for row in cursor.fetchall()]

    def count_items(self, cursor: sqlite3.Cursor, session_id: str) -> int:
        cursor.execute(
            f"SELECT COUNT(*) AS count FROM {TABLE_MEDIA_ITEMS} WHERE session_id = ?",
            (session_id,),
        )
        row = cursor.fetchone()
        return row["count"] if row else 0

    def delete_items_for_session(self, cursor: sqlite3.Cursor, session_id: str) -> int:
        cursor.execute(
            f"DELETE FROM {TABLE_MEDIA_ITEMS} WHERE session_id = ?",
            (session_id,),
        )
        return cursor.rowcount

    def delete_item(self, cursor: sqlite3.Cursor, media_id: str) -> int:
        cursor.execute(f"DELETE FROM {TABLE_MEDIA_ITEMS} WHERE id = ?", (media_id,))
        return cursor.rowcount

    def __del__(self):
        """Destructor - ensure connection is closed"""
        self.close()
