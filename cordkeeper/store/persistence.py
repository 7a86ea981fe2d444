"""SQLite persistence for settings and fire sessions.

The schema has three tables:

* ``settings`` holds exactly one row (``id = 1``) with the validated
  :class:`~cordkeeper.settings.config.SeasonConfig` payload encoded as JSON.
* ``fires`` stores one row per fire session.
* ``log_entries`` stores the log records of each fire.  Rows reference their
  fire with ``ON DELETE CASCADE`` so deleting a fire removes its logs.

Timestamps are stored as ISO 8601 strings including their UTC offset.
"""

from __future__ import annotations

import json
import os
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from loguru import logger

from ..fires.models import FireSession, LogRecord, LogSize
from ..settings.config import SeasonConfig

ConnectionLike = sqlite3.Connection

SETTINGS_ROW_ID = 1


def create_engine(path: os.PathLike[str] | str) -> ConnectionLike:
    """Create a SQLite connection for Cordkeeper persistence.

    The parent directory is created automatically.  Foreign keys are enabled
    so that fire deletion cascades to log entries.
    """

    db_path = Path(path)
    if not db_path.parent.exists():
        db_path.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(db_path)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    return connection


def _require_connection(engine: ConnectionLike) -> ConnectionLike:
    if isinstance(engine, sqlite3.Connection):
        return engine
    raise TypeError("engine must be a sqlite3.Connection produced by create_engine")


def init_storage(engine: ConnectionLike) -> None:
    """Initialise the SQLite schema."""

    connection = _require_connection(engine)
    with connection:
        connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS settings (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                payload TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS fires (
                id TEXT PRIMARY KEY,
                start_time TEXT NOT NULL,
                end_time TEXT,
                notes TEXT
            );

            CREATE TABLE IF NOT EXISTS log_entries (
                id TEXT PRIMARY KEY,
                fire_id TEXT NOT NULL REFERENCES fires(id) ON DELETE CASCADE,
                size TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                timestamp TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_log_entries_fire ON log_entries(fire_id);
            """
        )


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def _dump_settings(config: SeasonConfig) -> str:
    return json.dumps(config.model_dump(mode="json"), ensure_ascii=False)


def _load_settings(payload: str) -> SeasonConfig:
    return SeasonConfig.model_validate(json.loads(payload))


def store_settings(engine: ConnectionLike, config: SeasonConfig) -> None:
    """Persist ``config`` as the single settings row."""

    connection = _require_connection(engine)
    with connection:
        connection.execute(
            """
            INSERT INTO settings(id, payload)
            VALUES (?, ?)
            ON CONFLICT(id) DO UPDATE SET payload = excluded.payload
            """,
            (SETTINGS_ROW_ID, _dump_settings(config)),
        )


def load_settings(engine: ConnectionLike) -> SeasonConfig | None:
    """Load the stored settings if a row exists."""

    connection = _require_connection(engine)
    row = connection.execute(
        "SELECT payload FROM settings WHERE id = ?",
        (SETTINGS_ROW_ID,),
    ).fetchone()
    if row is None:
        return None
    return _load_settings(row["payload"])


def get_or_create_settings(engine: ConnectionLike) -> SeasonConfig:
    """Return the stored settings, inserting defaults if none exist yet.

    The insert is a no-op when another caller created the row first, and the
    value returned is always the one read back from storage, so every caller
    observes the same single settings record.
    """

    connection = _require_connection(engine)
    with connection:
        cursor = connection.execute(
            """
            INSERT INTO settings(id, payload)
            VALUES (?, ?)
            ON CONFLICT(id) DO NOTHING
            """,
            (SETTINGS_ROW_ID, _dump_settings(SeasonConfig())),
        )
    if cursor.rowcount:
        logger.info("Created default settings record")
    settings = load_settings(connection)
    if settings is None:  # pragma: no cover - the row was inserted above
        raise sqlite3.DatabaseError("settings row missing after insert")
    return settings


def count_settings_rows(engine: ConnectionLike) -> int:
    connection = _require_connection(engine)
    row = connection.execute("SELECT COUNT(*) AS total FROM settings").fetchone()
    return int(row["total"])


# ---------------------------------------------------------------------------
# Fires and log entries
# ---------------------------------------------------------------------------


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _insert_log(connection: ConnectionLike, fire_id: str, record: LogRecord) -> None:
    connection.execute(
        """
        INSERT INTO log_entries(id, fire_id, size, quantity, timestamp)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            size = excluded.size,
            quantity = excluded.quantity,
            timestamp = excluded.timestamp
        """,
        (
            record.record_id,
            fire_id,
            record.size.value,
            record.quantity,
            record.timestamp.isoformat(),
        ),
    )


def store_fire(engine: ConnectionLike, session: FireSession) -> None:
    """Insert or update ``session`` together with all of its log records."""

    connection = _require_connection(engine)
    with connection:
        connection.execute(
            """
            INSERT INTO fires(id, start_time, end_time, notes)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                start_time = excluded.start_time,
                end_time = excluded.end_time,
                notes = excluded.notes
            """,
            (
                session.session_id,
                _format_time(session.start_time),
                _format_time(session.end_time),
                session.notes,
            ),
        )
        keep = [record.record_id for record in session.logs]
        placeholders = ", ".join("?" for _ in keep)
        if keep:
            connection.execute(
                f"DELETE FROM log_entries WHERE fire_id = ? AND id NOT IN ({placeholders})",
                (session.session_id, *keep),
            )
        else:
            connection.execute(
                "DELETE FROM log_entries WHERE fire_id = ?", (session.session_id,)
            )
        for record in session.logs:
            _insert_log(connection, session.session_id, record)


def append_log(engine: ConnectionLike, session: FireSession, record: LogRecord) -> None:
    """Persist a single newly added log record."""

    connection = _require_connection(engine)
    with connection:
        _insert_log(connection, session.session_id, record)


def delete_fires(engine: ConnectionLike, session_ids: Iterable[str]) -> int:
    """Delete the given fires; their log entries cascade. Returns rows removed."""

    connection = _require_connection(engine)
    identifiers = [(session_id,) for session_id in session_ids]
    if not identifiers:
        return 0
    with connection:
        cursor = connection.executemany("DELETE FROM fires WHERE id = ?", identifiers)
    return cursor.rowcount


def _row_to_log(row: sqlite3.Row) -> LogRecord:
    return LogRecord(
        size=LogSize.from_value(row["size"]),
        quantity=int(row["quantity"]),
        timestamp=datetime.fromisoformat(row["timestamp"]),
        record_id=row["id"],
    )


def load_fires(engine: ConnectionLike) -> list[FireSession]:
    """Load every stored fire with its log records, newest first."""

    connection = _require_connection(engine)
    sessions: dict[str, FireSession] = {}
    for row in connection.execute(
        "SELECT id, start_time, end_time, notes FROM fires ORDER BY start_time DESC"
    ):
        sessions[row["id"]] = FireSession(
            start_time=datetime.fromisoformat(row["start_time"]),
            end_time=_parse_time(row["end_time"]),
            notes=row["notes"],
            session_id=row["id"],
        )
    for row in connection.execute(
        "SELECT id, fire_id, size, quantity, timestamp FROM log_entries ORDER BY timestamp ASC"
    ):
        session = sessions.get(row["fire_id"])
        if session is not None:
            session.logs.append(_row_to_log(row))
    return list(sessions.values())


def count_log_entries(engine: ConnectionLike, session_id: str | None = None) -> int:
    connection = _require_connection(engine)
    if session_id is None:
        row = connection.execute("SELECT COUNT(*) AS total FROM log_entries").fetchone()
    else:
        row = connection.execute(
            "SELECT COUNT(*) AS total FROM log_entries WHERE fire_id = ?", (session_id,)
        ).fetchone()
    return int(row["total"])


__all__ = [
    "ConnectionLike",
    "append_log",
    "count_log_entries",
    "count_settings_rows",
    "create_engine",
    "delete_fires",
    "get_or_create_settings",
    "init_storage",
    "load_fires",
    "load_settings",
    "store_fire",
    "store_settings",
]
