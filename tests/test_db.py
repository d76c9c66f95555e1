"""Tests for ripples.data.db — SQLite stores."""

import sqlite3

import pytest

from ripples.data.db import AppointmentDB, ImportantEventDB, RippleDB, SuggestedTaskDB, TaskDB
from ripples.ports.storage_port import StorageError


def _add(db, text="buy more milk", entry_id=1, user_id=7, type="task", **kwargs):
    return db.add_ripple(
        user_id=user_id, entry_id=entry_id, entry_date="2024-06-10", text=text,
        original_context=f"I need to {text}", type=type, **kwargs,
    )


class TestRippleDBAddAndGet:
    def test_add_ripple_returns_pending_ripple(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        ripple = _add(db, due_date="2024-06-14", cluster="home")
        assert ripple.id is not None
        assert ripple.status == "pending"
        assert ripple.due_date == "2024-06-14"
        assert ripple.cluster == "home"

    def test_get_ripple_round_trips_fields(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        added = _add(
            db, type="recurringTask", confidence=0.8, confidence_band="high",
            rrule="FREQ=WEEKLY;BYDAY=FR", time_start="09:00",
        )
        fetched = db.get_ripple(added.id)
        assert fetched.type == "recurringTask"
        assert fetched.confidence == 0.8
        assert fetched.confidence_band == "high"
        assert fetched.rrule == "FREQ=WEEKLY;BYDAY=FR"
        assert fetched.time_start == "09:00"
        assert fetched.task_id is None

    def test_get_ripple_not_found(self, tmp_db_path):
        assert RippleDB(tmp_db_path).get_ripple(999) is None

    def test_duplicate_text_for_entry_is_skipped(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        assert _add(db) is not None
        assert _add(db) is None
        assert len(db.list_for_entry(7, 1)) == 1

    def test_same_text_in_another_entry_is_allowed(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        _add(db, entry_id=1)
        assert _add(db, entry_id=2) is not None


class TestRippleDBListing:
    def test_list_for_date_defaults_to_pending(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        a = _add(db, text="buy more milk")
        _add(db, text="call the bank")
        db.transition(a.id, 7, "pending", "dismissed")
        assert [r.text for r in db.list_for_date(7, "2024-06-10")] == ["call the bank"]
        assert len(db.list_for_date(7, "2024-06-10", status=None)) == 2

    def test_list_for_date_cluster_filter(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        _add(db, text="buy more milk", cluster="home")
        _add(db, text="send the invoice", cluster="work")
        ripples = db.list_for_date(7, "2024-06-10", cluster="work")
        assert [r.text for r in ripples] == ["send the invoice"]

    def test_listing_is_user_scoped(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        _add(db, user_id=7)
        _add(db, user_id=8, entry_id=2)
        assert len(db.list_for_date(7, "2024-06-10")) == 1
        assert db.list_for_entry(8, 1) == []


class TestRippleDBTransitions:
    def test_transition_is_compare_and_set(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        ripple = _add(db)
        assert db.transition(ripple.id, 7, "pending", "approved") is True
        assert db.transition(ripple.id, 7, "pending", "dismissed") is False
        assert db.get_ripple(ripple.id).status == "approved"

    def test_transition_wrong_user(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        ripple = _add(db)
        assert db.transition(ripple.id, 8, "pending", "approved") is False

    def test_set_links_only_writes_given_values(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        ripple = _add(db, cluster="home")
        db.set_links(ripple.id, due_date="2024-06-20", task_id=5)
        fetched = db.get_ripple(ripple.id)
        assert fetched.due_date == "2024-06-20"
        assert fetched.task_id == 5
        assert fetched.cluster == "home"

    def test_delete_for_entry(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        _add(db, text="buy more milk")
        _add(db, text="call the bank")
        _add(db, text="other entry", entry_id=2)
        assert db.delete_for_entry(7, 1) == 2
        assert db.list_for_entry(7, 1) == []
        assert len(db.list_for_entry(7, 2)) == 1


class TestSuggestedTaskDB:
    def test_one_suggestion_per_ripple(self, tmp_db_path):
        db = SuggestedTaskDB(tmp_db_path)
        first = db.add_suggestion(7, 1, "buy more milk", priority="medium", repeat="Every FR")
        assert first.status == "pending"
        assert db.add_suggestion(7, 1, "buy more milk") is None

    def test_list_by_status_and_transition(self, tmp_db_path):
        db = SuggestedTaskDB(tmp_db_path)
        a = db.add_suggestion(7, 1, "buy more milk")
        db.add_suggestion(7, 2, "call the bank")
        assert db.transition(a.id, 7, "pending", "rejected") is True
        assert [s.title for s in db.list_by_status(7)] == ["call the bank"]
        assert [s.title for s in db.list_by_status(7, "rejected")] == ["buy more milk"]

    def test_set_task(self, tmp_db_path):
        db = SuggestedTaskDB(tmp_db_path)
        s = db.add_suggestion(7, 1, "buy more milk", rrule="FREQ=DAILY")
        db.set_task(s.id, 42)
        fetched = db.get_suggestion(s.id)
        assert fetched.task_id == 42
        assert fetched.rrule == "FREQ=DAILY"

    def test_delete_for_ripples(self, tmp_db_path):
        db = SuggestedTaskDB(tmp_db_path)
        db.add_suggestion(7, 1, "a task")
        db.add_suggestion(7, 2, "b task")
        db.add_suggestion(7, 3, "c task")
        assert db.delete_for_ripples([1, 3]) == 2
        assert db.delete_for_ripples([]) == 0
        assert [s.source_ripple_id for s in db.list_by_status(7)] == [2]


class TestTaskDB:
    def test_add_and_list(self, tmp_db_path):
        db = TaskDB(tmp_db_path)
        task = db.add_task(7, "buy more milk", due_date="2024-06-14", priority="high")
        assert task.completed is False
        assert db.get_task(task.id).priority == "high"
        assert [t.title for t in db.list_for_user(7)] == ["buy more milk"]
        assert db.list_for_user(8) == []


class TestAppointmentDB:
    def test_upsert_returns_existing(self, tmp_db_path):
        db = AppointmentDB(tmp_db_path)
        first = db.upsert_appointment(7, "Dentist", "2024-06-11", "15:00")
        again = db.upsert_appointment(7, " Dentist ", "2024-06-11", "15:00")
        assert again.id == first.id

    def test_upsert_without_time_is_keyed_too(self, tmp_db_path):
        db = AppointmentDB(tmp_db_path)
        first = db.upsert_appointment(7, "Dentist", "2024-06-11")
        assert db.upsert_appointment(7, "Dentist", "2024-06-11").id == first.id
        assert db.upsert_appointment(7, "Dentist", "2024-06-11", "09:00").id != first.id

    def test_one_offs_and_series(self, tmp_db_path):
        db = AppointmentDB(tmp_db_path)
        db.upsert_appointment(7, "Dentist", "2024-06-11", "15:00")
        db.upsert_appointment(7, "Later", "2024-07-11")
        db.upsert_appointment(7, "Yoga", "2024-06-01", "18:00", rrule="FREQ=WEEKLY;BYDAY=SA")
        db.upsert_appointment(7, "Future series", "2024-09-01", rrule="FREQ=DAILY")

        one_offs = db.list_one_offs(7, "2024-06-01", "2024-06-30")
        assert [a.title for a in one_offs] == ["Dentist"]
        series = db.list_series(7, "2024-06-30")
        assert [a.title for a in series] == ["Yoga"]


class TestImportantEventDB:
    def test_upsert_and_range(self, tmp_db_path):
        db = ImportantEventDB(tmp_db_path)
        first = db.upsert_event(7, "Party", "2024-06-20")
        assert db.upsert_event(7, "Party", "2024-06-20").id == first.id
        db.upsert_event(7, "Trip", "2024-08-01")
        assert [e.title for e in db.list_for_user(7, date_to="2024-06-30")] == ["Party"]
        assert len(db.list_for_user(7)) == 2


class TestErrors:
    def test_broken_table_raises_storage_error(self, tmp_db_path):
        db = RippleDB(tmp_db_path)
        conn = sqlite3.connect(tmp_db_path)
        conn.execute("DROP TABLE ripples")
        conn.commit()
        conn.close()
        with pytest.raises(StorageError):
            db.list_for_entry(7, 1)

    def test_unopenable_path_raises_storage_error(self, tmp_path):
        with pytest.raises(StorageError):
            RippleDB(str(tmp_path))


class TestRippleDBMigration:
    def test_migration_adds_columns_to_old_schema(self, tmp_db_path):
        """Simulate an old DB without time_start/rrule/calendar_title, verify migration works."""
        conn = sqlite3.connect(tmp_db_path)
        conn.execute("""
            CREATE TABLE ripples (
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
        conn.execute(
            "INSERT INTO ripples (user_id, entry_id, entry_date, text, type, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (7, 1, "2024-06-10", "Old ripple", "task", "2024-06-10T09:00:00"),
        )
        conn.commit()
        conn.close()

        db = RippleDB(db_path=tmp_db_path)
        [ripple] = db.list_for_entry(7, 1)
        assert ripple.text == "Old ripple"
        assert ripple.time_start is None
        assert ripple.rrule is None
        assert ripple.calendar_title is None
