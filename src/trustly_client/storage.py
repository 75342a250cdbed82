"""
Persistence of notifications and signature audit rows.

:class:`NotificationStore` is what :class:`~trustly_client.notifications.Notification`
needs. :class:`SQLiteNotificationStore` is the bundled implementation. The
notification id is the table's primary key, so a concurrent second delivery
loses the insert and is reported as a duplicate.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Protocol, Union

from trustly_client.errors import StorageError
from trustly_client.models.notification import NotificationRecord, SignatureAuditRecord

SCHEMA = """
CREATE TABLE IF NOT EXISTS trustly_notification (
    id INTEGER PRIMARY KEY,
    uuid TEXT,
    method TEXT,
    signature TEXT,
    data TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS trustly_signature_load (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_id TEXT,
    order_id TEXT,
    uuid TEXT,
    is_bad_signature INTEGER NOT NULL,
    notification_id INTEGER NOT NULL,
    created TEXT NOT NULL
);
"""


class NotificationStore(Protocol):
    def notification_exists(self, notification_id: int) -> bool: ...

    def insert_notification(self, record: NotificationRecord) -> bool:
        """Store ``record``. Return False if its id is already stored."""
        ...

    def insert_signature_audit(self, record: SignatureAuditRecord) -> None: ...


class SQLiteNotificationStore:
    def __init__(self, path: Union[str, Path] = ":memory:"):
        self.path = str(path)
        self._lock = threading.Lock()
        try:
            if self.path != ":memory:":
                Path(self.path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.executescript(SCHEMA)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot open notification store {self.path}: {e}") from e

    def notification_exists(self, notification_id: int) -> bool:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT COUNT(id) FROM trustly_notification WHERE id = ?", (notification_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Notification lookup failed: {e}") from e
        return row[0] > 0

    def insert_notification(self, record: NotificationRecord) -> bool:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT INTO trustly_notification (id, uuid, method, signature, data, created_at) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (record.id, record.uuid, record.method, record.signature, record.data,
                     record.created_at.isoformat()),
                )
        except sqlite3.IntegrityError:
            return False
        except sqlite3.Error as e:
            raise StorageError(f"Notification insert failed: {e}") from e
        return True

    def insert_signature_audit(self, record: SignatureAuditRecord) -> None:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT INTO trustly_signature_load "
                    "(customer_id, order_id, uuid, is_bad_signature, notification_id, created) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (record.customer_id, record.order_id, record.uuid, int(record.is_bad_signature),
                     record.notification_id, record.created.isoformat()),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Signature audit insert failed: {e}") from e

    def signature_audits(self, notification_id: int) -> list[SignatureAuditRecord]:
        """Audit rows for one notification id, oldest first."""
        try:
            with self._lock:
                rows = self._conn.execute(
                    "SELECT customer_id, order_id, uuid, is_bad_signature, notification_id, created "
                    "FROM trustly_signature_load WHERE notification_id = ? ORDER BY id",
                    (notification_id,),
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Signature audit lookup failed: {e}") from e
        return [
            SignatureAuditRecord(
                customer_id=r[0], order_id=r[1], uuid=r[2], is_bad_signature=bool(r[3]),
                notification_id=r[4], created=r[5],
            )
            for r in rows
        ]

    def close(self) -> None:
        self._conn.close()
