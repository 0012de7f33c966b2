"""DuckDB connection, schema init, and the transaction primitive."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, TypeVar

import duckdb
import structlog

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)

T = TypeVar("T")

MEMORY = ":memory:"

SCHEMA_SQL = """
-- Sequences keep insertion order independent of clock resolution
CREATE SEQUENCE IF NOT EXISTS gig_seq START 1;
CREATE SEQUENCE IF NOT EXISTS bid_seq START 1;
CREATE SEQUENCE IF NOT EXISTS notification_seq START 1;

-- Gigs: status is monotonic open -> assigned. Every hire and every bid submission
-- bumps version, so any two of them on one gig write the same column and conflict.
CREATE TABLE IF NOT EXISTS gigs (
    gig_id          VARCHAR PRIMARY KEY,
    seq             BIGINT NOT NULL DEFAULT nextval('gig_seq'),
    title           VARCHAR NOT NULL,
    description     VARCHAR NOT NULL,
    budget          DOUBLE NOT NULL,
    owner_id        VARCHAR NOT NULL,
    status          VARCHAR NOT NULL DEFAULT 'open',
    bid_count       INTEGER NOT NULL DEFAULT 0,
    version         BIGINT NOT NULL DEFAULT 0,
    created_at      BIGINT NOT NULL
);

-- Bids: one per (gig, freelancer), status pending -> hired | rejected
CREATE TABLE IF NOT EXISTS bids (
    bid_id          VARCHAR PRIMARY KEY,
    seq             BIGINT NOT NULL DEFAULT nextval('bid_seq'),
    gig_id          VARCHAR NOT NULL,
    freelancer_id   VARCHAR NOT NULL,
    message         VARCHAR NOT NULL,
    price           DOUBLE NOT NULL,
    status          VARCHAR NOT NULL DEFAULT 'pending',
    created_at      BIGINT NOT NULL,
    UNIQUE (gig_id, freelancer_id)
);

-- Notification log (polled by clients)
CREATE TABLE IF NOT EXISTS notifications (
    notification_id VARCHAR PRIMARY KEY,
    seq             BIGINT NOT NULL DEFAULT nextval('notification_seq'),
    user_id         VARCHAR NOT NULL,
    kind            VARCHAR NOT NULL,
    gig_id          VARCHAR,
    message         VARCHAR NOT NULL,
    is_read         BOOLEAN NOT NULL DEFAULT FALSE,
    created_at      BIGINT NOT NULL
);
"""


def now_ms() -> int:
    return int(time.time() * 1000)


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager."""
    if str(db_path) == MEMORY:
        return duckdb.connect(MEMORY)
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables and sequences if they do not exist."""
    sql = "\n".join(line for line in SCHEMA_SQL.splitlines() if not line.lstrip().startswith("--"))
    for stmt in sql.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise


def is_conflict(exc: BaseException) -> bool:
    """True for DuckDB write-write conflicts (optimistic concurrency control aborts)."""
    if isinstance(exc, duckdb.TransactionException):
        return True
    return isinstance(exc, duckdb.Error) and "conflict" in str(exc).lower()


class Store:
    """Shared DuckDB database. Each unit of work gets its own cursor.

    Cursors are independent connections to the same database, so transactions
    on different cursors are isolated from each other and run concurrently.
    Reads outside a transaction see committed state only.
    """

    def __init__(self, db_path: str | Path = MEMORY) -> None:
        self.db_path = str(db_path)
        self._root = get_connection(db_path)
        self._cursor_lock = Lock()
        init_schema(self._root)

    def cursor(self) -> DuckDBPyConnection:
        with self._cursor_lock:
            return self._root.cursor()

    @contextmanager
    def read(self) -> Iterator[DuckDBPyConnection]:
        """Autocommit cursor for point reads and projections."""
        cur = self.cursor()
        try:
            yield cur
        finally:
            cur.close()

    @contextmanager
    def transaction(self) -> Iterator[DuckDBPyConnection]:
        """BEGIN ... COMMIT on a fresh cursor; any exception rolls back everything."""
        cur = self.cursor()
        try:
            cur.begin()
            yield cur
            cur.commit()
        except BaseException:
            _rollback(cur)
            raise
        finally:
            cur.close()

    def run_transaction(
        self,
        work: Callable[[DuckDBPyConnection], T],
        *,
        op: str,
        retries: int = 0,
        base_delay_sec: float = 0.01,
        max_delay_sec: float = 0.5,
    ) -> T:
        """Run work(cur) in a transaction, re-running it from a fresh snapshot on write-write conflict.

        Only conflicts are retried; they abort before commit, so work never commits twice.
        Any other storage error, or a conflict past the retry budget, propagates as duckdb.Error.
        """
        delay = base_delay_sec
        attempt = 0
        while True:
            try:
                with self.transaction() as cur:
                    return work(cur)
            except duckdb.Error as e:
                if not is_conflict(e) or attempt >= retries:
                    raise
                attempt += 1
                log.info("tx_conflict_retry", op=op, attempt=attempt, delay=delay, error=str(e))
                time.sleep(delay)
                delay = min(delay * 2, max_delay_sec)

    def close(self) -> None:
        self._root.close()


def _rollback(cur: DuckDBPyConnection) -> None:
    try:
        cur.rollback()
    except duckdb.Error as e:
        # DuckDB already rolled back a transaction that failed at commit
        log.debug("rollback_noop", error=str(e))
