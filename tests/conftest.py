"""
Pytest configuration and fixtures.
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from fiesta.errors import StoreError
from fiesta.models import Role, SessionContext
from fiesta.workflow import BookingWorkflow


class FakeStore:
    """In-memory record store with the same call shapes as SupabaseStore."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self._lock = threading.Lock()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def fail(self, action, table, message="boom"):
        self.failures[(action, table)] = message

    def _check(self, action, table):
        self.calls.append((action, table))
        if (action, table) in self.failures:
            raise StoreError(f"{table} {action} error: {self.failures[(action, table)]}")

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def seed(self, table, **row):
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._tick())
        self.rows(table).append(dict(row))
        return dict(row)

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    @staticmethod
    def _matches(row, where):
        for col, value in (where or {}).items():
            if isinstance(value, (list, tuple, set)):
                if row.get(col) not in value:
                    return False
            elif row.get(col) != value:
                return False
        return True

    def create(self, table, record):
        with self._lock:
            self._check("insert", table)
            row = dict(record)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", self._tick())
            self.rows(table).append(row)
            return dict(row)

    def update(self, table, where, patch):
        with self._lock:
            self._check("update", table)
            out = []
            for row in self.rows(table):
                if self._matches(row, where):
                    row.update(patch)
                    out.append(dict(row))
            return out

    def query(self, table, where=None, columns="*", order=None, desc=False, limit=None, either=None):
        with self._lock:
            self._check("select", table)
            rows = [r for r in self.rows(table) if self._matches(r, where)]
            if either:
                rows = [r for r in rows if any(r.get(c) == v for c, v in either.items())]
            if order:
                rows.sort(key=lambda r: r.get(order) or "", reverse=desc)
            if limit is not None:
                rows = rows[:limit]
            if columns != "*":
                cols = [c.strip() for c in columns.split(",")]
                rows = [{c: r.get(c) for c in cols} for r in rows]
            return [dict(r) for r in rows]


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def workflow(store):
    return BookingWorkflow(store)


@pytest.fixture
def client_session():
    return SessionContext(user_id="client-1", role=Role.CLIENT, email="ana@example.com")


@pytest.fixture
def provider_session():
    return SessionContext(user_id="provider-1", role=Role.PROVIDER)


@pytest.fixture
def other_provider_session():
    return SessionContext(user_id="provider-2", role=Role.PROVIDER)


@pytest.fixture
def catering(store):
    return store.seed("service_categories", id="cat-catering", name="Catering", icon="food", active=True)
