"""
Catalog - persisted metadata lists, one per asset kind

Pattern: Repository over a SQLite key-value table
    catalog(kind TEXT PRIMARY KEY, records TEXT, modified_date TEXT)

Each save replaces a kind's whole list inside one transaction, so a
reader sees either the previous list or the new one, never a mix.
Every load reconciles the list against the Content Store and
re-persists it when orphaned records were pruned.
"""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from ..core.exceptions import NotFoundError, StorageError
from ..core.records import ASSET_KINDS, BaseRecord, record_from_dict
from .content_store import ContentStore

logger = logging.getLogger(__name__)


class Catalog:
    """
    Durable per-kind record lists reconciled with storage

    Features:
    - Thread-local connections for thread safety
    - WAL mode
    - Per-kind locks: load-modify-save runs as a unit
    - Silent orphan pruning on every load

    Usage:
        catalog = Catalog(db_path, content_store)
        catalog.append('textures', record)
        records = catalog.load('textures')
    """

    def __init__(self, db_path: Path, content_store: ContentStore):
        """
        Args:
            db_path: Path to the SQLite catalog file
            content_store: Store the catalog is reconciled against
        """
        self._db_path = Path(db_path)
        self._store = content_store
        self._local = threading.local()
        self._locks: Dict[str, threading.RLock] = {kind: threading.RLock() for kind in ASSET_KINDS}
        self._init_schema()

    # ==================== CONNECTION ====================

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection"""
        if getattr(self._local, 'connection', None) is None:
            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                # isolation_level=None: transactions are opened explicitly in _transaction
                connection = sqlite3.connect(
                    str(self._db_path),
                    timeout=30.0,
                    isolation_level=None
                )
                connection.execute("PRAGMA journal_mode = WAL")
                connection.row_factory = sqlite3.Row
            except (OSError, sqlite3.Error) as e:
                raise StorageError(f"Could not open catalog {self._db_path}", str(e))
            self._local.connection = connection

        return self._local.connection

    @contextmanager
    def _transaction(self):
        """Context manager for database transactions"""
        conn = self._get_connection()
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.execute("COMMIT")
        except Exception:
            conn.execute("ROLLBACK")
            raise

    def _init_schema(self):
        try:
            with self._transaction() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS catalog (
                        kind TEXT PRIMARY KEY,
                        records TEXT NOT NULL,
                        modified_date TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize catalog {self._db_path}", str(e))

    def close(self):
        """Close database connection for current thread"""
        connection = getattr(self._local, 'connection', None)
        if connection is not None:
            connection.close()
            self._local.connection = None

    def _lock(self, kind: str) -> threading.RLock:
        try:
            return self._locks[kind]
        except KeyError:
            raise ValueError(f"Unknown asset kind: {kind}")

    # ==================== RAW PERSISTENCE ====================

    def _read(self, kind: str) -> List[BaseRecord]:
        """Read the persisted list for a kind, without reconciliation"""
        try:
            row = self._get_connection().execute(
                "SELECT records FROM catalog WHERE kind = ?", (kind,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {kind} catalog", str(e))

        if row is None:
            return []

        try:
            raw_records = json.loads(row['records'])
        except ValueError as e:
            raise StorageError(f"{kind} catalog is not valid JSON", str(e))

        records = []
        for data in raw_records:
            try:
                records.append(record_from_dict(kind, data))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping unreadable {kind} record {data!r}: {e}")
        return records

    def _write(self, kind: str, records: List[BaseRecord]):
        """Replace the persisted list for a kind in one transaction"""
        payload = json.dumps([record.to_dict() for record in records])
        try:
            with self._transaction() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO catalog (kind, records, modified_date) VALUES (?, ?, ?)",
                    (kind, payload, datetime.now().isoformat())
                )
        except sqlite3.Error as e:
            raise StorageError(f"Could not save {kind} catalog", str(e))

    # ==================== OPERATIONS ====================

    def load(self, kind: str) -> List[BaseRecord]:
        """
        Load a kind's records, pruning orphans.

        Records whose directory is missing are dropped and the pruned
        list is saved back immediately.

        Args:
            kind: Asset kind

        Returns:
            Ordered list of records (insertion order)
        """
        with self._lock(kind):
            return self._load_reconciled(kind)

    def _load_reconciled(self, kind: str) -> List[BaseRecord]:
        persisted = self._read(kind)
        existing = self._store.list_existing_ids(kind)
        records = [record for record in persisted if record.id in existing]

        if len(records) != len(persisted):
            pruned = len(persisted) - len(records)
            logger.info(f"Pruned {pruned} orphaned {kind} record(s)")
            self._write(kind, records)

        return records

    def get(self, kind: str, entry_id: str) -> BaseRecord:
        """
        Get one record.

        Raises:
            NotFoundError: If no record has this id
        """
        for record in self.load(kind):
            if record.id == entry_id:
                return record
        raise NotFoundError(f"{kind} entry not found", entry_id)

    def append(self, kind: str, record: BaseRecord):
        """Add a record at the end of a kind's list"""
        with self._lock(kind):
            records = self._load_reconciled(kind)
            records.append(record)
            self._write(kind, records)
        logger.debug(f"Catalogued {kind} entry {record.id}")

    def rename(self, kind: str, entry_id: str, new_name: str) -> BaseRecord:
        """
        Change a record's display name.

        Returns:
            The updated record

        Raises:
            NotFoundError: If no record has this id (catalog unchanged)
        """
        with self._lock(kind):
            records = self._load_reconciled(kind)
            for record in records:
                if record.id == entry_id:
                    record.name = new_name
                    self._write(kind, records)
                    return record
        raise NotFoundError(f"{kind} entry not found", entry_id)

    def remove(self, kind: str, entry_id: str):
        """Drop a record; absent ids are ignored"""
        with self._lock(kind):
            records = self._read(kind)
            remaining = [record for record in records if record.id != entry_id]
            if len(remaining) != len(records):
                self._write(kind, remaining)


__all__ = ['Catalog']
