"""
SQLite-backed notification read-state store.

Read marks live in ``user_read_notifications`` with a uniqueness constraint on
``(user_id, notif_key)``; inserts use ``ON CONFLICT DO NOTHING`` so concurrent
duplicate marks neither conflict nor error. Blocking sqlite3 calls run in a
worker thread with a short-lived connection per call.
"""

import asyncio
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime

import structlog

from pawcare.config import DatabaseConfig
from pawcare.services.repositories import StorageError

logger = structlog.get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS user_read_notifications (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    notif_key TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (user_id, notif_key)
)
"""

# Stay well under SQLITE_MAX_VARIABLE_NUMBER on older builds
LOOKUP_BATCH_SIZE = 500


class SqliteReadStateStore:
    """ReadStateStore implementation on a local SQLite file."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.logger = logger.bind(component="sqlite_read_state", path=path)
        self._initialized = False

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "SqliteReadStateStore":
        return cls(config.read_state_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.Error as e:
            raise StorageError(f"cannot open read-state database {self.path}: {e}") from e
        try:
            if not self._initialized:
                conn.execute(SCHEMA)
                self._initialized = True
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(f"read-state database error: {e}") from e
        finally:
            conn.close()

    def _has_read_sync(self, user_id: str, keys: Sequence[str]) -> set[str]:
        found: set[str] = set()
        with self._connect() as conn:
            for start in range(0, len(keys), LOOKUP_BATCH_SIZE):
                batch = list(keys[start : start + LOOKUP_BATCH_SIZE])
                placeholders = ",".join("?" for _ in batch)
                rows = conn.execute(
                    "SELECT notif_key FROM user_read_notifications "
                    f"WHERE user_id = ? AND notif_key IN ({placeholders})",
                    [user_id, *batch],
                ).fetchall()
                found.update(row[0] for row in rows)
        return found

    def _mark_read_sync(self, user_id: str, key: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO user_read_notifications (user_id, notif_key, created_at) "
                "VALUES (?, ?, ?) "
                "ON CONFLICT (user_id, notif_key) DO NOTHING",
                (user_id, key, datetime.now(UTC).isoformat()),
            )

    def _count_sync(self, user_id: str) -> int:
        with self._connect() as conn:
            (count,) = conn.execute(
                "SELECT COUNT(*) FROM user_read_notifications WHERE user_id = ?", (user_id,)
            ).fetchone()
        return count

    async def has_read(self, user_id: str, keys: Sequence[str]) -> set[str]:
        if not keys:
            return set()
        found = await asyncio.to_thread(self._has_read_sync, user_id, keys)
        self.logger.debug("read_state_lookup", user_id=user_id, keys=len(keys), read=len(found))
        return found

    async def mark_read(self, user_id: str, key: str) -> None:
        await asyncio.to_thread(self._mark_read_sync, user_id, key)

    async def count_marks(self, user_id: str) -> int:
        """Number of persisted read marks for a user."""
        return await asyncio.to_thread(self._count_sync, user_id)
