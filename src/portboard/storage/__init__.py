"""SQLite storage layer for portboard.

Holds connection settings and custom port labels.
"""

from portboard.storage.db import get_db, init_db

__all__ = ["get_db", "init_db"]
