"""
Key-value storage backends for the progress store.

The store only needs get(key) and set(key, value) on string values:
- MemoryStorage: in-process dict (tests, throwaway sessions)
- JsonFileStorage: one JSON file holding every key
- SQLiteStorage: ~/.orbitlearn/progress.db, one row per key

Backends raise StorageError on I/O failures.
"""

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from .errors import StorageError


DEFAULT_DATA_DIR = Path.home() / ".orbitlearn"
DEFAULT_PROGRESS_DB = DEFAULT_DATA_DIR / "progress.db"
DEFAULT_PROGRESS_JSON = DEFAULT_DATA_DIR / "progress.json"


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """
    Store all keys in a single JSON object on disk.

    The file is rewritten on every set; fine for one small progress document.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or DEFAULT_PROGRESS_JSON)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e


class SQLiteStorage:
    """
    Key-value table in a SQLite database.

    Each call opens its own connection, so one instance can be shared
    between threads.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize storage.

        Args:
            db_path: Path to progress.db (default: ~/.orbitlearn/progress.db)
        """
        self.db_path = Path(db_path or DEFAULT_PROGRESS_DB)
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialize {self.db_path}: {e}") from e
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def get(self, key: str) -> Optional[str]:
        try:
            conn = self._get_connection()
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
                return row["value"] if row else None
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read '{key}' from {self.db_path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            conn = self._get_connection()
            try:
                now = datetime.now().isoformat()
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at)
                       VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET
                         value = excluded.value,
                         updated_at = excluded.updated_at""",
                    (key, value, now)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot write '{key}' to {self.db_path}: {e}") from e
