"""
Journal Ripples — SQLite stores.

One class per table, all sharing a single database file. Ripples and their
suggested-task drafts are created by the entry pipeline; tasks, appointments
and important events are the entities a ripple materializes into.

Review transitions are compare-and-set updates (`... WHERE status = ?`), so
two concurrent approvals of the same ripple can never both succeed.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ripples.data.models import (
    Appointment,
    ImportantEvent,
    Ripple,
    SuggestedTask,
    Task,
)
from ripples.ports.storage_port import StorageError

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class _SQLiteStore:
    """Connection handling shared by every table class."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from ripples.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = str(db_path)
        Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._session() as conn:
            self._init_db(conn)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction.

        Duplicate-key conflicts propagate as sqlite3.IntegrityError so callers
        can skip the row; any other database failure becomes StorageError.
        """
        try:
            conn = self._connect()
        except sqlite3.Error as exc:
            raise StorageError(f"{type(self).__name__}: cannot open {self._db_path}: {exc}") from exc
        try:
            with conn:
                yield conn
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as exc:
            raise StorageError(f"{type(self).__name__}: {exc}") from exc
        finally:
            conn.close()

    def _init_db(self, conn: sqlite3.Connection) -> None:
        raise NotImplementedError

    @staticmethod
    def _add_missing_columns(
        conn: sqlite3.Connection, table: str, columns: dict[str, str],
    ) -> None:
        """Migrate existing DBs: add columns introduced after the table was created."""
        existing_cols = {
            row[1] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()
        }
        for name, ddl in columns.items():
            if name not in existing_cols:
                conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")


# ---------------------------------------------------------------------------
# Ripples
# ---------------------------------------------------------------------------


class RippleDB(_SQLiteStore):
    """Reviewable candidates, unique per (entry_id, text)."""

    def _init_db(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS ripples (
                id                 INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id            INTEGER NOT NULL,
                entry_id           INTEGER NOT NULL,
                entry_date         TEXT    NOT NULL,
                text               TEXT    NOT NULL,
                original_context   TEXT    NOT NULL DEFAULT '',
                type               TEXT    NOT NULL,
                confidence         REAL    NOT NULL DEFAULT 0.5,
                confidence_band    TEXT    NOT NULL DEFAULT 'medium',
                status             TEXT    NOT NULL DEFAULT 'pending',
                due_date           TEXT,
                cluster            TEXT,
                task_id            INTEGER,
                appointment_id     INTEGER,
                important_event_id INTEGER,
                created_at         TEXT    NOT NULL,
                UNIQUE (entry_id, text)
            )
        """)
        self._add_missing_columns(conn, "ripples", {
            "time_start": "TEXT",
            "rrule": "TEXT",
            "calendar_title": "TEXT",
        })
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_ripples_user_date ON ripples (user_id, entry_date)"
        )
        logger.debug("Ripples table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_ripple(row: sqlite3.Row) -> Ripple:
        return Ripple(
            id=row["id"],
            user_id=row["user_id"],
            entry_id=row["entry_id"],
            entry_date=row["entry_date"],
            text=row["text"],
            original_context=row["original_context"],
            type=row["type"],
            confidence=row["confidence"],
            confidence_band=row["confidence_band"],
            status=row["status"],
            due_date=row["due_date"],
            time_start=row["time_start"],
            rrule=row["rrule"],
            calendar_title=row["calendar_title"],
            cluster=row["cluster"],
            task_id=row["task_id"],
            appointment_id=row["appointment_id"],
            important_event_id=row["important_event_id"],
            created_at=row["created_at"],
        )

    def add_ripple(
        self,
        user_id: int,
        entry_id: int,
        entry_date: str,
        text: str,
        original_context: str,
        type: str,
        confidence: float = 0.5,
        confidence_band: str = "medium",
        due_date: str | None = None,
        time_start: str | None = None,
        rrule: str | None = None,
        calendar_title: str | None = None,
        cluster: str | None = None,
    ) -> Ripple | None:
        """Insert a pending ripple. Returns None when it duplicates an existing one."""
        now = _now()
        try:
            with self._session() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO ripples
                        (user_id, entry_id, entry_date, text, original_context, type,
                         confidence, confidence_band, status, due_date, time_start,
                         rrule, calendar_title, cluster, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'pending', ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id, entry_id, entry_date, text, original_context, type,
                        confidence, confidence_band, due_date, time_start,
                        rrule, calendar_title, cluster, now,
                    ),
                )
                ripple_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            logger.warning("Ripple skipped for entry #%d (%s): %r", entry_id, exc, text)
            return None

        logger.info("Ripple created: #%d [%s] '%s'", ripple_id, type, text)
        return Ripple(
            id=ripple_id,
            user_id=user_id,
            entry_id=entry_id,
            entry_date=entry_date,
            text=text,
            original_context=original_context,
            type=type,
            confidence=confidence,
            confidence_band=confidence_band,
            due_date=due_date,
            time_start=time_start,
            rrule=rrule,
            calendar_title=calendar_title,
            cluster=cluster,
            created_at=now,
        )

    def get_ripple(self, ripple_id: int) -> Ripple | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM ripples WHERE id = ?", (ripple_id,)).fetchone()
        return self._row_to_ripple(row) if row else None

    def list_for_entry(self, user_id: int, entry_id: int) -> list[Ripple]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM ripples WHERE user_id = ? AND entry_id = ? ORDER BY id",
                (user_id, entry_id),
            ).fetchall()
        return [self._row_to_ripple(r) for r in rows]

    def list_for_date(
        self,
        user_id: int,
        entry_date: str,
        status: str | None = "pending",
        cluster: str | None = None,
    ) -> list[Ripple]:
        """Ripples of one journal day, optionally filtered by status and cluster."""
        query = "SELECT * FROM ripples WHERE user_id = ? AND entry_date = ?"
        params: list = [user_id, entry_date]
        if status is not None:
            query += " AND status = ?"
            params.append(status)
        if cluster is not None:
            query += " AND cluster = ?"
            params.append(cluster)
        query += " ORDER BY id"

        with self._session() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_ripple(r) for r in rows]

    def transition(
        self, ripple_id: int, user_id: int, from_status: str, to_status: str,
    ) -> bool:
        """Compare-and-set the status. True only if the row was in from_status."""
        with self._session() as conn:
            cursor = conn.execute(
                "UPDATE ripples SET status = ? WHERE id = ? AND user_id = ? AND status = ?",
                (to_status, ripple_id, user_id, from_status),
            )
        return cursor.rowcount > 0

    def set_links(
        self,
        ripple_id: int,
        due_date: str | None = None,
        cluster: str | None = None,
        task_id: int | None = None,
        appointment_id: int | None = None,
        important_event_id: int | None = None,
    ) -> None:
        """Record the materialized entity (and final due date/cluster) on a ripple."""
        updates = {
            "due_date": due_date,
            "cluster": cluster,
            "task_id": task_id,
            "appointment_id": appointment_id,
            "important_event_id": important_event_id,
        }
        updates = {k: v for k, v in updates.items() if v is not None}
        if not updates:
            return
        assignments = ", ".join(f"{col} = ?" for col in updates)
        with self._session() as conn:
            conn.execute(
                f"UPDATE ripples SET {assignments} WHERE id = ?",
                [*updates.values(), ripple_id],
            )

    def delete_for_entry(self, user_id: int, entry_id: int) -> int:
        """Delete every ripple of an entry regardless of status."""
        with self._session() as conn:
            cursor = conn.execute(
                "DELETE FROM ripples WHERE user_id = ? AND entry_id = ?",
                (user_id, entry_id),
            )
        return cursor.rowcount


# ---------------------------------------------------------------------------
# Suggested tasks
# ---------------------------------------------------------------------------


class SuggestedTaskDB(_SQLiteStore):
    """Task drafts, one per task-like ripple, with their own review status."""

    def _init_db(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS suggested_tasks (
                id               INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id          INTEGER NOT NULL,
                source_ripple_id INTEGER NOT NULL UNIQUE,
                title            TEXT    NOT NULL,
                priority         TEXT    NOT NULL DEFAULT 'low',
                due_date         TEXT,
                repeat           TEXT,
                cluster          TEXT,
                status           TEXT    NOT NULL DEFAULT 'pending',
                task_id          INTEGER,
                created_at       TEXT    NOT NULL
            )
        """)
        self._add_missing_columns(conn, "suggested_tasks", {"rrule": "TEXT"})
        logger.debug("Suggested tasks table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_suggestion(row: sqlite3.Row) -> SuggestedTask:
        return SuggestedTask(
            id=row["id"],
            user_id=row["user_id"],
            source_ripple_id=row["source_ripple_id"],
            title=row["title"],
            priority=row["priority"],
            due_date=row["due_date"],
            repeat=row["repeat"],
            rrule=row["rrule"],
            cluster=row["cluster"],
            status=row["status"],
            task_id=row["task_id"],
            created_at=row["created_at"],
        )

    def add_suggestion(
        self,
        user_id: int,
        source_ripple_id: int,
        title: str,
        priority: str = "low",
        due_date: str | None = None,
        repeat: str | None = None,
        rrule: str | None = None,
        cluster: str | None = None,
    ) -> SuggestedTask | None:
        """Insert a pending draft. Returns None if the ripple already has one."""
        now = _now()
        try:
            with self._session() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO suggested_tasks
                        (user_id, source_ripple_id, title, priority, due_date,
                         repeat, rrule, cluster, status, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'pending', ?)
                    """,
                    (user_id, source_ripple_id, title, priority, due_date,
                     repeat, rrule, cluster, now),
                )
                suggestion_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            logger.warning(
                "Suggested task skipped for ripple #%d (%s)", source_ripple_id, exc,
            )
            return None

        logger.info("Suggested task created: #%d '%s'", suggestion_id, title)
        return SuggestedTask(
            id=suggestion_id,
            user_id=user_id,
            source_ripple_id=source_ripple_id,
            title=title,
            priority=priority,
            due_date=due_date,
            repeat=repeat,
            rrule=rrule,
            cluster=cluster,
            created_at=now,
        )

    def get_suggestion(self, suggestion_id: int) -> SuggestedTask | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM suggested_tasks WHERE id = ?", (suggestion_id,)
            ).fetchone()
        return self._row_to_suggestion(row) if row else None

    def list_by_status(self, user_id: int, status: str = "pending") -> list[SuggestedTask]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM suggested_tasks WHERE user_id = ? AND status = ? ORDER BY id",
                (user_id, status),
            ).fetchall()
        return [self._row_to_suggestion(r) for r in rows]

    def transition(
        self, suggestion_id: int, user_id: int, from_status: str, to_status: str,
    ) -> bool:
        with self._session() as conn:
            cursor = conn.execute(
                "UPDATE suggested_tasks SET status = ? "
                "WHERE id = ? AND user_id = ? AND status = ?",
                (to_status, suggestion_id, user_id, from_status),
            )
        return cursor.rowcount > 0

    def set_task(self, suggestion_id: int, task_id: int) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE suggested_tasks SET task_id = ? WHERE id = ?",
                (task_id, suggestion_id),
            )

    def delete_for_ripples(self, ripple_ids: list[int]) -> int:
        if not ripple_ids:
            return 0
        placeholders = ", ".join("?" for _ in ripple_ids)
        with self._session() as conn:
            cursor = conn.execute(
                f"DELETE FROM suggested_tasks WHERE source_ripple_id IN ({placeholders})",
                list(ripple_ids),
            )
        return cursor.rowcount


# ---------------------------------------------------------------------------
# Materialized entities
# ---------------------------------------------------------------------------


class TaskDB(_SQLiteStore):
    def _init_db(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS tasks (
                id               INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id          INTEGER NOT NULL,
                title            TEXT    NOT NULL,
                due_date         TEXT,
                priority         TEXT    NOT NULL DEFAULT 'low',
                rrule            TEXT,
                cluster          TEXT,
                completed        INTEGER NOT NULL DEFAULT 0,
                source_ripple_id INTEGER,
                created_at       TEXT    NOT NULL
            )
        """)
        logger.debug("Tasks table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            due_date=row["due_date"],
            priority=row["priority"],
            rrule=row["rrule"],
            cluster=row["cluster"],
            completed=bool(row["completed"]),
            source_ripple_id=row["source_ripple_id"],
            created_at=row["created_at"],
        )

    def add_task(
        self,
        user_id: int,
        title: str,
        due_date: str | None = None,
        priority: str = "low",
        rrule: str | None = None,
        cluster: str | None = None,
        source_ripple_id: int | None = None,
    ) -> Task:
        now = _now()
        with self._session() as conn:
            cursor = conn.execute(
                """
                INSERT INTO tasks
                    (user_id, title, due_date, priority, rrule, cluster,
                     completed, source_ripple_id, created_at)
                VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (user_id, title, due_date, priority, rrule, cluster, source_ripple_id, now),
            )
            task_id = cursor.lastrowid

        logger.info("Task created: #%d '%s' due %s", task_id, title, due_date)
        return Task(
            id=task_id,
            user_id=user_id,
            title=title,
            due_date=due_date,
            priority=priority,
            rrule=rrule,
            cluster=cluster,
            source_ripple_id=source_ripple_id,
            created_at=now,
        )

    def get_task(self, task_id: int) -> Task | None:
        with self._session() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._row_to_task(row) if row else None

    def list_for_user(self, user_id: int) -> list[Task]:
        with self._session() as conn:
            rows = conn.execute(
                "SELECT * FROM tasks WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
        return [self._row_to_task(r) for r in rows]


class AppointmentDB(_SQLiteStore):
    """One-off appointments and recurring series (rrule + anchor date)."""

    def _init_db(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS appointments (
                id               INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id          INTEGER NOT NULL,
                title            TEXT    NOT NULL,
                date             TEXT    NOT NULL,
                time_start       TEXT,
                time_end         TEXT,
                location         TEXT    NOT NULL DEFAULT '',
                details          TEXT    NOT NULL DEFAULT '',
                cluster          TEXT,
                source_ripple_id INTEGER,
                created_at       TEXT    NOT NULL,
                UNIQUE (user_id, date, time_start, title)
            )
        """)
        self._add_missing_columns(conn, "appointments", {
            "rrule": "TEXT",
            "entry_id": "INTEGER",
        })
        logger.debug("Appointments table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_appointment(row: sqlite3.Row) -> Appointment:
        return Appointment(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            date=row["date"],
            time_start=row["time_start"],
            time_end=row["time_end"],
            location=row["location"],
            details=row["details"],
            rrule=row["rrule"],
            cluster=row["cluster"],
            entry_id=row["entry_id"],
            source_ripple_id=row["source_ripple_id"],
            created_at=row["created_at"],
        )

    def find_appointment(
        self, user_id: int, title: str, date: str, time_start: str | None,
    ) -> Appointment | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM appointments "
                "WHERE user_id = ? AND title = ? AND date = ? AND time_start IS ?",
                (user_id, title, date, time_start),
            ).fetchone()
        return self._row_to_appointment(row) if row else None

    def upsert_appointment(
        self,
        user_id: int,
        title: str,
        date: str,
        time_start: str | None = None,
        time_end: str | None = None,
        location: str = "",
        details: str = "",
        rrule: str | None = None,
        cluster: str | None = None,
        entry_id: int | None = None,
        source_ripple_id: int | None = None,
    ) -> Appointment:
        """Return the appointment keyed by owner+title+date+start, creating it if absent."""
        title = title.strip()
        existing = self.find_appointment(user_id, title, date, time_start)
        if existing is not None:
            return existing

        now = _now()
        try:
            with self._session() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO appointments
                        (user_id, title, date, time_start, time_end, location, details,
                         rrule, cluster, entry_id, source_ripple_id, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, title, date, time_start, time_end, location, details,
                     rrule, cluster, entry_id, source_ripple_id, now),
                )
                appointment_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            existing = self.find_appointment(user_id, title, date, time_start)
            if existing is None:
                raise
            return existing

        logger.info("Appointment created: #%d '%s' on %s %s", appointment_id, title, date,
                    time_start or "")
        return Appointment(
            id=appointment_id,
            user_id=user_id,
            title=title,
            date=date,
            time_start=time_start,
            time_end=time_end,
            location=location,
            details=details,
            rrule=rrule,
            cluster=cluster,
            entry_id=entry_id,
            source_ripple_id=source_ripple_id,
            created_at=now,
        )

    def get_appointment(self, appointment_id: int) -> Appointment | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM appointments WHERE id = ?", (appointment_id,)
            ).fetchone()
        return self._row_to_appointment(row) if row else None

    def list_one_offs(self, user_id: int, date_from: str, date_to: str) -> list[Appointment]:
        """Non-recurring appointments dated inside [date_from, date_to]."""
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT * FROM appointments
                WHERE user_id = ? AND (rrule IS NULL OR rrule = '')
                  AND date >= ? AND date <= ?
                ORDER BY date, time_start
                """,
                (user_id, date_from, date_to),
            ).fetchall()
        return [self._row_to_appointment(r) for r in rows]

    def list_series(self, user_id: int, date_to: str) -> list[Appointment]:
        """Recurring appointments whose anchor is on or before date_to."""
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT * FROM appointments
                WHERE user_id = ? AND rrule IS NOT NULL AND rrule != ''
                  AND date <= ?
                ORDER BY date, time_start
                """,
                (user_id, date_to),
            ).fetchall()
        return [self._row_to_appointment(r) for r in rows]


class ImportantEventDB(_SQLiteStore):
    """All-day dated events, unique per (user_id, date, title)."""

    def _init_db(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS important_events (
                id               INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id          INTEGER NOT NULL,
                title            TEXT    NOT NULL,
                date             TEXT    NOT NULL,
                details          TEXT    NOT NULL DEFAULT '',
                cluster          TEXT,
                source_ripple_id INTEGER,
                created_at       TEXT    NOT NULL,
                UNIQUE (user_id, date, title)
            )
        """)
        logger.debug("Important events table initialized at %s", self._db_path)

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> ImportantEvent:
        return ImportantEvent(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            date=row["date"],
            details=row["details"],
            cluster=row["cluster"],
            source_ripple_id=row["source_ripple_id"],
            created_at=row["created_at"],
        )

    def find_event(self, user_id: int, title: str, date: str) -> ImportantEvent | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM important_events WHERE user_id = ? AND title = ? AND date = ?",
                (user_id, title, date),
            ).fetchone()
        return self._row_to_event(row) if row else None

    def upsert_event(
        self,
        user_id: int,
        title: str,
        date: str,
        details: str = "",
        cluster: str | None = None,
        source_ripple_id: int | None = None,
    ) -> ImportantEvent:
        """Return the event keyed by owner+title+date, creating it if absent."""
        title = title.strip()
        existing = self.find_event(user_id, title, date)
        if existing is not None:
            return existing

        now = _now()
        try:
            with self._session() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO important_events
                        (user_id, title, date, details, cluster, source_ripple_id, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, title, date, details, cluster, source_ripple_id, now),
                )
                event_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            existing = self.find_event(user_id, title, date)
            if existing is None:
                raise
            return existing

        logger.info("Important event created: #%d '%s' on %s", event_id, title, date)
        return ImportantEvent(
            id=event_id,
            user_id=user_id,
            title=title,
            date=date,
            details=details,
            cluster=cluster,
            source_ripple_id=source_ripple_id,
            created_at=now,
        )

    def get_event(self, event_id: int) -> ImportantEvent | None:
        with self._session() as conn:
            row = conn.execute(
                "SELECT * FROM important_events WHERE id = ?", (event_id,)
            ).fetchone()
        return self._row_to_event(row) if row else None

    def list_for_user(
        self, user_id: int, date_from: str | None = None, date_to: str | None = None,
    ) -> list[ImportantEvent]:
        query = "SELECT * FROM important_events WHERE user_id = ?"
        params: list = [user_id]
        if date_from is not None:
            query += " AND date >= ?"
            params.append(date_from)
        if date_to is not None:
            query += " AND date <= ?"
            params.append(date_to)
        query += " ORDER BY date, id"

        with self._session() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_event(r) for r in rows]


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


@dataclass
class Stores:
    """Every store, opened against the same database file."""

    ripples: RippleDB
    suggestions: SuggestedTaskDB
    tasks: TaskDB
    appointments: AppointmentDB
    events: ImportantEventDB


def open_stores(db_path: str | None = None) -> Stores:
    return Stores(
        ripples=RippleDB(db_path),
        suggestions=SuggestedTaskDB(db_path),
        tasks=TaskDB(db_path),
        appointments=AppointmentDB(db_path),
        events=ImportantEventDB(db_path),
    )
