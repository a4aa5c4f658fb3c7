"""Repository classes for the settings and custom name tables."""

from portboard.model.ports import CustomName, normalize_protocol
from portboard.storage.db import get_db
from portboard.storage.models import DEFAULT_SETTINGS


class SettingsRepository:
    """Key-value access to the settings table."""

    def seed_defaults(self) -> None:
        """Insert default settings that are not present yet."""
        db = get_db()
        db.executemany(
            "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
            list(DEFAULT_SETTINGS.items()),
        )
        db.commit()

    def get_all(self) -> dict[str, str]:
        db = get_db()
        rows = db.execute("SELECT key, value FROM settings").fetchall()
        return {row["key"]: row["value"] if row["value"] is not None else "" for row in rows}

    def get(self, key: str) -> str | None:
        db = get_db()
        row = db.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        db = get_db()
        db.execute(
            """INSERT INTO settings (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
            (key, value),
        )
        db.commit()


class CustomNameRepository:
    """CRUD operations for user-assigned port labels."""

    def get_all(self) -> list[CustomName]:
        db = get_db()
        rows = db.execute(
            "SELECT port, protocol, name FROM custom_names ORDER BY port, protocol"
        ).fetchall()
        return [CustomName(port=row["port"], protocol=row["protocol"], label=row["name"]) for row in rows]

    def set(self, port: int, protocol: str, name: str) -> None:
        """Create or replace the label for (port, protocol)."""
        db = get_db()
        db.execute(
            """INSERT INTO custom_names (port, protocol, name) VALUES (?, ?, ?)
               ON CONFLICT(port, protocol) DO UPDATE SET name = excluded.name""",
            (port, normalize_protocol(protocol), name),
        )
        db.commit()

    def delete(self, port: int, protocol: str) -> bool:
        """Delete a label. Returns True if a row was deleted."""
        db = get_db()
        cursor = db.execute(
            "DELETE FROM custom_names WHERE port = ? AND protocol = ?",
            (port, normalize_protocol(protocol)),
        )
        db.commit()
        return cursor.rowcount > 0
