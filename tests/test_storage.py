"""Store: schema creation on a fresh file, transaction rollback, conflict retry."""

import duckdb
import pytest

from gigflow.storage.db import Store, init_schema


def _columns(store, table):
    with store.read() as cur:
        rows = cur.execute(
            "SELECT column_name FROM information_schema.columns WHERE table_name = ? ORDER BY ordinal_position",
            [table],
        ).fetchall()
    return [r[0] for r in rows]


def test_store_creates_schema_on_fresh_file(temp_db_path):
    assert not temp_db_path.exists()
    store = Store(temp_db_path)
    try:
        assert temp_db_path.exists()
        assert "version" in _columns(store, "gigs")
        assert {"gig_id", "freelancer_id", "status"} <= set(_columns(store, "bids"))
        assert {"user_id", "kind", "is_read"} <= set(_columns(store, "notifications"))
    finally:
        store.close()


def test_schema_init_is_idempotent(temp_db_path):
    store = Store(temp_db_path)
    with store.read() as cur:
        init_schema(cur)
    store.close()

    reopened = Store(temp_db_path)
    try:
        assert "bid_count" in _columns(reopened, "gigs")
    finally:
        reopened.close()


def test_transaction_rolls_back_on_error(temp_db_path):
    store = Store(temp_db_path)
    try:
        with pytest.raises(RuntimeError):
            with store.transaction() as cur:
                cur.execute(
                    "INSERT INTO gigs (gig_id, title, description, budget, owner_id, created_at) "
                    "VALUES ('g1', 't', 'd', 10, 'o', 0)"
                )
                raise RuntimeError("abort")
        with store.read() as cur:
            assert cur.execute("SELECT COUNT(*) FROM gigs").fetchone()[0] == 0
    finally:
        store.close()


class _BrokenCursor:
    def __init__(self):
        self.closed = False
        self.rolled_back = False

    def begin(self):
        raise duckdb.TransactionException("cannot start a transaction")

    def rollback(self):
        self.rolled_back = True
        raise duckdb.TransactionException("no transaction is active")

    def close(self):
        self.closed = True


def test_transaction_closes_cursor_when_begin_fails(temp_db_path, monkeypatch):
    store = Store(temp_db_path)
    broken = _BrokenCursor()
    monkeypatch.setattr(store, "cursor", lambda: broken)
    try:
        with pytest.raises(duckdb.TransactionException):
            with store.transaction():
                pass
        assert broken.rolled_back
        assert broken.closed
    finally:
        store.close()


def test_run_transaction_retries_conflicts_only(temp_db_path):
    store = Store(temp_db_path)
    attempts = []

    def conflicting(cur):
        attempts.append(1)
        if len(attempts) < 3:
            raise duckdb.TransactionException("Conflict on update!")
        return "done"

    def failing(cur):
        attempts.append(1)
        raise duckdb.IOException("disk full")

    try:
        assert store.run_transaction(conflicting, op="t", retries=5, base_delay_sec=0.001) == "done"
        assert len(attempts) == 3
        attempts.clear()
        with pytest.raises(duckdb.IOException):
            store.run_transaction(failing, op="t", retries=5, base_delay_sec=0.001)
        assert len(attempts) == 1
    finally:
        store.close()
