"""Settings database file and per-thread SQLite handles.

The CLI, the API worker threads and the list_ports thread pool may all
touch the store, so every thread opens its own handle to the current
database file. The file defaults to ./data/portboard.db; PORTBOARD_DB
points it elsewhere.
"""

import os
import sqlite3
import threading
from pathlib import Path

from portboard.storage.models import ALL_SCHEMAS

_FALLBACK_PATH = Path("./data") / "portboard.db"

_thread_state = threading.local()

_db_path: Path = Path(os.getenv("PORTBOARD_DB", str(_FALLBACK_PATH))).expanduser()


def set_db_path(path: Path | str) -> None:
    """Point the store at another file, e.g. a temporary one in tests."""
    global _db_path
    close_db()
    _db_path = Path(path)


def get_db_path() -> Path:
    return _db_path


def init_db() -> None:
    """Make sure the file exists and holds the settings and label tables."""
    _db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = _open(_db_path)
    try:
        for statement in ALL_SCHEMAS:
            conn.execute(statement)
        conn.commit()
    finally:
        conn.close()


def get_db() -> sqlite3.Connection:
    """The calling thread's handle on the current database file.

    Handles opened before set_db_path() are dropped and reopened.
    """
    conn: sqlite3.Connection | None = getattr(_thread_state, "conn", None)
    if conn is not None and getattr(_thread_state, "path", None) == _db_path:
        return conn
    if conn is not None:
        conn.close()
    conn = _open(_db_path)
    _thread_state.conn = conn
    _thread_state.path = _db_path
    return conn


def close_db() -> None:
    """Release the calling thread's handle, if it has one."""
    conn = getattr(_thread_state, "conn", None)
    if conn is None:
        return
    conn.close()
    _thread_state.conn = None
    _thread_state.path = None


def _open(path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn
