import contextlib

import pytest

from slink_local.history.history import HistoryStore
from slink_local.storage.db_storage import ADVISORY_LOCK_ID, DBStorage


class FakeDB:
    """Shared state behind every FakeConnection: the slink_kv rows plus a query log."""

    def __init__(self):
        self.rows = {}
        self.queries = []
        self.connections = 0
        self.transactions = 0


class DummyCursor:
    def __init__(self, db):
        self.db = db
        self._row = None

    def execute(self, query, params=None):
        sql = " ".join(query.split())
        self.db.queries.append((sql, params))
        if sql.startswith("SELECT value FROM slink_kv"):
            value = self.db.rows.get(params[0])
            self._row = (value,) if value is not None else None
        elif sql.startswith("INSERT INTO slink_kv"):
            self.db.rows[params[0]] = params[1]
        elif sql.startswith("DELETE FROM slink_kv"):
            self.db.rows.pop(params[0], None)
        return self

    def fetchone(self):
        return self._row

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class DummyConnection:
    def __init__(self, db):
        self.db = db
        self.closed = False
        db.connections += 1

    def cursor(self):
        return DummyCursor(self.db)

    def execute(self, query, params=None):
        return DummyCursor(self.db).execute(query, params)

    @contextlib.contextmanager
    def transaction(self):
        self.db.transactions += 1
        yield self

    def close(self):
        self.closed = True


@pytest.fixture
def db(monkeypatch):
    fake = FakeDB()
    monkeypatch.setattr("psycopg.connect", lambda dsn, autocommit=False: DummyConnection(fake))
    return fake


def test_set_get_remove(db):
    storage = DBStorage("fake")
    assert storage.get("k") is None
    storage.set("k", "v1")
    storage.set("k", "v2")
    assert storage.get("k") == "v2"
    storage.remove("k")
    assert storage.get("k") is None


def test_schema_created_once(db):
    storage = DBStorage("fake")
    storage.set("a", "1")
    storage.get("a")
    creates = [q for q, _ in db.queries if q.startswith("CREATE TABLE IF NOT EXISTS slink_kv")]
    assert len(creates) == 1


def test_upsert_statement(db):
    DBStorage("fake").set("urlHistory", "[]")
    upserts = [q for q, _ in db.queries if q.startswith("INSERT INTO slink_kv")]
    assert "ON CONFLICT (key) DO UPDATE" in upserts[0]


def test_transaction_reuses_one_connection_and_locks(db):
    storage = DBStorage("fake")
    storage.get("warmup")
    before = db.connections

    with storage.transaction():
        storage.set("k", "1")
        storage.set("k", storage.get("k") + "2")
        with storage.transaction():
            storage.remove("other")

    assert db.connections == before + 1
    assert db.transactions == 1
    assert ("SELECT pg_advisory_xact_lock(%s)", (ADVISORY_LOCK_ID,)) in db.queries
    assert db.rows["k"] == "12"


def test_history_store_over_db(db):
    history = HistoryStore(DBStorage("fake"))
    record = history.append("https://a.com", "https://s/a")
    history.record_click("https://s/a")
    assert history.list()[0].id == record.id
    assert history.list()[0].clicks == 1
