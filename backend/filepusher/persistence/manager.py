"""
SQLite persistence manager for tracked items.

Single-file SQLite database.
Explicit save/load only - no auto-persistence. The catalog decides when a
scan cycle's changes are written.
"""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .errors import LoadError, PersistenceError, SaveError, SchemaError


# Database schema version for migrations
SCHEMA_VERSION = 1


class PersistenceManager:
    """
    Manages SQLite persistence for tracked items.

    Stores one row per tracked item, including its checksum tracking fields
    and structural snapshot (as JSON).

    Does NOT store:
    - Archive jobs (ephemeral, in-memory only)
    - The pending-checksum flag (an outstanding request does not survive a restart)
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize persistence manager.

        Args:
            db_path: Path to SQLite database file (defaults to ./filepusher.db)
        """
        if db_path is None:
            db_path = str(Path.cwd() / "filepusher.db")

        self.db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connect(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Access columns by name
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            raise PersistenceError(f"Database operation failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self):
        """Create schema if it doesn't exist."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS schema_version (
                        version INTEGER PRIMARY KEY,
                        applied_at TEXT NOT NULL
                    )
                """)

                cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
                row = cursor.fetchone()
                current_version = row[0] if row else 0

                if current_version < SCHEMA_VERSION:
                    self._migrate_schema(conn, current_version)
        except PersistenceError as e:
            raise SchemaError(f"Cannot prepare schema in {self.db_path}: {e}") from e

    def _migrate_schema(self, conn, from_version: int):
        """Apply schema migrations."""
        cursor = conn.cursor()

        if from_version < 1:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tracked_items (
                    id TEXT PRIMARY KEY,
                    source_path TEXT NOT NULL,
                    source_uri TEXT NOT NULL,
                    watched_folder TEXT NOT NULL,
                    status TEXT NOT NULL,
                    last_checksum INTEGER,
                    checksum_computed_at TEXT,
                    last_checksum_stable_since TEXT,
                    files TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_tracked_items_source_uri
                ON tracked_items (source_uri)
            """)

            cursor.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (1, datetime.now().isoformat())
            )

    # Tracked item persistence

    def save_items(self, items: List[Dict]):
        """
        Save or update a batch of items in one transaction.

        Args:
            items: Dicts with keys: id, source_path, source_uri, watched_folder,
                status, last_checksum, checksum_computed_at,
                last_checksum_stable_since, files, created_at, updated_at
        """
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                for item in items:
                    cursor.execute("""
                        INSERT INTO tracked_items (
                            id, source_path, source_uri, watched_folder, status,
                            last_checksum, checksum_computed_at, last_checksum_stable_since,
                            files, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            status = excluded.status,
                            last_checksum = excluded.last_checksum,
                            checksum_computed_at = excluded.checksum_computed_at,
                            last_checksum_stable_since = excluded.last_checksum_stable_since,
                            files = excluded.files,
                            updated_at = excluded.updated_at
                    """, (
                        item["id"],
                        item["source_path"],
                        item["source_uri"],
                        item["watched_folder"],
                        item["status"],
                        item.get("last_checksum"),
                        item.get("checksum_computed_at"),
                        item.get("last_checksum_stable_since"),
                        json.dumps(item.get("files", {}), sort_keys=True),
                        item["created_at"],
                        item["updated_at"],
                    ))
        except PersistenceError as e:
            raise SaveError(f"Failed to save {len(items)} item(s): {e}") from e

    def load_all_items(self) -> List[Dict]:
        """
        Load all persisted items.

        Returns:
            List of item dicts (timestamps as ISO strings)
        """
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM tracked_items ORDER BY created_at")

                return [
                    {
                        "id": row["id"],
                        "source_path": row["source_path"],
                        "watched_folder": row["watched_folder"],
                        "status": row["status"],
                        "last_checksum": row["last_checksum"],
                        "checksum_computed_at": row["checksum_computed_at"],
                        "last_checksum_stable_since": row["last_checksum_stable_since"],
                        "files": json.loads(row["files"]) if row["files"] else {},
                        "created_at": row["created_at"],
                        "updated_at": row["updated_at"],
                    }
                    for row in cursor.fetchall()
                ]
        except PersistenceError as e:
            raise LoadError(f"Failed to load items from {self.db_path}: {e}") from e

    def delete_item(self, item_id: str):
        """Delete a tracked item."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM tracked_items WHERE id = ?", (item_id,))
