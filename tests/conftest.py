"""Shared test fixtures and configuration.

Sets up environment variables before any ripples import so ripples.config
loads predictable settings, and provides temp-file SQLite stores.
"""

import os

# Patch env vars BEFORE any ripples imports
os.environ.setdefault("DATABASE_PATH", "data/test-ripples.db")
os.environ.setdefault("TIMEZONE", "America/Toronto")
os.environ.setdefault("MAX_SUGGESTIONS", "25")
os.environ.setdefault("DEFAULT_PRIORITY", "low")
os.environ.setdefault("LOG_LEVEL", "INFO")

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_ripples.db")


@pytest.fixture
def stores(tmp_db_path):
    """Every store, backed by one temp file."""
    from ripples.data.db import open_stores
    return open_stores(tmp_db_path)


@pytest.fixture
def service(stores):
    from ripples.core.ripple_service import RippleService
    return RippleService(
        stores.ripples, stores.suggestions, stores.tasks, stores.appointments, stores.events,
    )


@pytest.fixture
def automation(service, stores):
    from ripples.core.entry_automation import EntryAutomation
    return EntryAutomation(service, stores.appointments, stores.events)


@pytest.fixture
def make_entry():
    """Factory for JournalEntry objects with sensible defaults."""
    from ripples.data.models import JournalEntry

    def _make(text="", entry_id=1, user_id=7, date="2024-06-10", **kwargs):
        return JournalEntry(id=entry_id, user_id=user_id, date=date, text=text, **kwargs)

    return _make
