"""SQLite helpers for locations, weather samples and fetch logs."""
from __future__ import annotations

import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence
from urllib.parse import unquote, urlparse

from weatherops.entities import Location, LocationType, NormalizedReading, StoredSample
from weatherops.normalizer import ensure_utc, normalize_sample


class DatabaseSession:
    """Minimal DB-API session wrapper."""

    def __init__(self, connection: sqlite3.Connection):
        self.connection = connection

    def execute(self, sql: str, params: tuple = ()):
        cursor = self.connection.cursor()
        cursor.execute(sql, params)
        return cursor

    def fetchone(self, sql: str, params: tuple = ()):
        cursor = self.execute(sql, params)
        row = cursor.fetchone()
        cursor.close()
        return row

    def fetchall(self, sql: str, params: tuple = ()):
        cursor = self.execute(sql, params)
        rows = cursor.fetchall()
        cursor.close()
        return rows

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def close(self) -> None:
        self.connection.close()


class SessionFactory:
    def __init__(self, url: str):
        self.url = url

    def __call__(self) -> DatabaseSession:
        return DatabaseSession(create_connection(self.url))


_engine_lock = threading.Lock()
_database_url: Optional[str] = None
_session_factory: Optional[SessionFactory] = None


# ---------------------------------------------------------------------------

def _default_database_url() -> str:
    return os.getenv("WEATHER_DATABASE_URL", "sqlite:///./weatherops.db")


def configure_engine(url: Optional[str] = None) -> str:
    """Configure database access using the provided URL and run migrations."""

    global _database_url, _session_factory
    with _engine_lock:
        _database_url = url or _default_database_url()
        scheme = urlparse(_database_url).scheme
        if scheme and not scheme.startswith("sqlite"):
            raise ValueError(f"Unsupported database scheme: {scheme}")
        _session_factory = SessionFactory(_database_url)
    run_migrations()
    return _database_url


def create_connection(url: str) -> sqlite3.Connection:
    # sqlite:///relative.db and sqlite:////absolute/path.db
    parsed = urlparse(url)
    path = unquote(parsed.path or parsed.netloc or "")
    if path.startswith("/"):
        path = path[1:]
    if not path:
        path = ":memory:"
    if path != ":memory:":
        path = os.path.abspath(path)
    connection = sqlite3.connect(path, check_same_thread=False)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys=ON")
    return connection


def get_session_factory(default_url: Optional[str] = None) -> SessionFactory:
    if _session_factory is None:
        configure_engine(default_url)
    assert _session_factory is not None
    return _session_factory


@contextmanager
def session_scope(session_factory: Optional[SessionFactory] = None):
    factory = session_factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------

def run_migrations() -> None:
    with session_scope(get_session_factory()) as session:
        session.execute(
            """
            CREATE TABLE IF NOT EXISTS locations (
                id VARCHAR(64) PRIMARY KEY,
                name VARCHAR(255) NOT NULL UNIQUE,
                location_type VARCHAR(16) NOT NULL,
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                timezone VARCHAR(64) NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        session.execute(
            """
            CREATE TABLE IF NOT EXISTS weather_samples (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location_id VARCHAR(64) NOT NULL,
                observed_at TEXT NOT NULL,
                temp_c REAL,
                wind_speed_ms REAL,
                precip_mm REAL,
                visibility_km REAL,
                condition_code VARCHAR(64) NOT NULL,
                source VARCHAR(64) NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY(location_id) REFERENCES locations(id) ON DELETE CASCADE
            )
            """
        )
        session.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_samples_location_observed
            ON weather_samples (location_id, observed_at)
            """
        )
        session.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_samples_observed
            ON weather_samples (observed_at)
            """
        )
        session.execute(
            """
            CREATE TABLE IF NOT EXISTS fetch_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                location_id VARCHAR(64),
                success INTEGER NOT NULL,
                message TEXT,
                source VARCHAR(64),
                created_at TEXT NOT NULL
            )
            """
        )


# ---------------------------------------------------------------------------

def utcnow_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(value: datetime) -> str:
    # Fixed width so lexical order in SQLite equals chronological order.
    return ensure_utc(value).isoformat(timespec="microseconds")


def _location_from_row(row) -> Location:
    return Location(
        id=row["id"],
        name=row["name"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        location_type=LocationType(row["location_type"]),
        timezone=row["timezone"],
    )


def _sample_from_row(row) -> StoredSample:
    return StoredSample(
        id=row["id"],
        location_id=row["location_id"],
        reading=normalize_sample(dict(row)),
        location_name=row["location_name"],
    )


def upsert_location(session: DatabaseSession, *, name: str, defaults: Dict[str, Any]) -> Location:
    row = session.fetchone("SELECT * FROM locations WHERE name = ?", (name,))
    location_type = LocationType(defaults.get("location_type", LocationType.PORT)).value
    if row:
        session.execute(
            """
            UPDATE locations SET location_type = ?, latitude = ?, longitude = ?, timezone = ?
            WHERE id = ?
            """,
            (location_type, defaults["latitude"], defaults["longitude"], defaults.get("timezone", "Etc/UTC"), row["id"]),
        )
        location_id = row["id"]
    else:
        location_id = defaults.get("id") or uuid.uuid4().hex
        session.execute(
            """
            INSERT INTO locations (id, name, location_type, latitude, longitude, timezone, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                location_id,
                name,
                location_type,
                defaults["latitude"],
                defaults["longitude"],
                defaults.get("timezone", "Etc/UTC"),
                utcnow_iso(),
            ),
        )
    return _location_from_row(session.fetchone("SELECT * FROM locations WHERE id = ?", (location_id,)))


def insert_samples(session: DatabaseSession, *, location_id: str, readings: Iterable[NormalizedReading]) -> int:
    now = utcnow_iso()
    inserted = 0
    for reading in readings:
        session.execute(
            """
            INSERT INTO weather_samples (
                location_id,
                observed_at,
                temp_c,
                wind_speed_ms,
                precip_mm,
                visibility_km,
                condition_code,
                source,
                created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                location_id,
                format_timestamp(reading.observed_at),
                reading.temp_c,
                reading.wind_speed_ms,
                reading.precip_mm,
                reading.visibility_km,
                reading.condition_label,
                reading.source,
                now,
            ),
        )
        inserted += 1
    return inserted


def insert_fetch_log(
    session: DatabaseSession,
    *,
    location_id: Optional[str],
    success: bool,
    message: str,
    source: str,
) -> None:
    session.execute(
        "INSERT INTO fetch_logs (location_id, success, message, source, created_at) VALUES (?, ?, ?, ?, ?)",
        (location_id, 1 if success else 0, message, source, utcnow_iso()),
    )


def count_samples(session: DatabaseSession) -> int:
    row = session.fetchone("SELECT COUNT(*) AS cnt FROM weather_samples")
    return int(row["cnt"])


def fetch_logs(session: DatabaseSession, location_id: Optional[str] = None) -> List[Dict[str, Any]]:
    if location_id:
        rows = session.fetchall("SELECT * FROM fetch_logs WHERE location_id = ? ORDER BY id", (location_id,))
    else:
        rows = session.fetchall("SELECT * FROM fetch_logs ORDER BY id")
    return [dict(row) for row in rows]


class SampleRepository:
    """Store-backed implementation of the engine's store and sink interfaces."""

    _ORDERING = {"asc": "ASC", "desc": "DESC"}

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        self._session_factory = session_factory or get_session_factory()

    # -- read side ------------------------------------------------------
    def find_samples(
        self,
        *,
        location_id: Optional[str] = None,
        observed_after: Optional[datetime] = None,
        order: Optional[str] = None,
    ) -> List[StoredSample]:
        clauses: List[str] = []
        params: List[Any] = []
        if location_id:
            clauses.append("s.location_id = ?")
            params.append(location_id)
        if observed_after is not None:
            clauses.append("s.observed_at >= ?")
            params.append(format_timestamp(observed_after))
        sql = (
            "SELECT s.*, l.name AS location_name FROM weather_samples s "
            "LEFT JOIN locations l ON l.id = s.location_id"
        )
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order is not None:
            if order not in self._ORDERING:
                raise ValueError(f"Unsupported order: {order!r}")
            direction = self._ORDERING[order]
            sql += f" ORDER BY s.observed_at {direction}, s.id {direction}"
        with session_scope(self._session_factory) as session:
            rows = session.fetchall(sql, tuple(params))
        return [_sample_from_row(row) for row in rows]

    def find_locations(self, *, location_id: Optional[str] = None) -> List[Location]:
        with session_scope(self._session_factory) as session:
            if location_id:
                rows = session.fetchall("SELECT * FROM locations WHERE id = ? ORDER BY name", (location_id,))
            else:
                rows = session.fetchall("SELECT * FROM locations ORDER BY name")
        return [_location_from_row(row) for row in rows]

    # -- write side -----------------------------------------------------
    def save_samples(self, location_id: str, readings: Sequence[NormalizedReading]) -> int:
        with session_scope(self._session_factory) as session:
            return insert_samples(session, location_id=location_id, readings=readings)

    def log_fetch(self, location_id: str, success: bool, message: str, source: str) -> None:
        with session_scope(self._session_factory) as session:
            insert_fetch_log(session, location_id=location_id, success=success, message=message, source=source)


__all__ = [
    "DatabaseSession",
    "SampleRepository",
    "SessionFactory",
    "configure_engine",
    "count_samples",
    "fetch_logs",
    "get_session_factory",
    "insert_fetch_log",
    "insert_samples",
    "session_scope",
    "upsert_location",
]
