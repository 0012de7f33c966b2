"""Shared fixtures: temporary DuckDB file, fast-retry settings, recording notifier."""

import tempfile
import threading
from pathlib import Path

import pytest

from gigflow.config.settings import Settings
from gigflow.market.service import build_marketplace


class RecordingNotifier:
    """Collects deliveries; optionally fails every one of them."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []
        self._lock = threading.Lock()

    def deliver(self, user_id, payload):
        with self._lock:
            self.calls.append((user_id, payload))
        if self.fail:
            raise ConnectionError("push channel unavailable")


@pytest.fixture
def settings():
    return Settings.from_dict(
        {
            "hire": {"conflict_retries": 25, "conflict_base_delay_sec": 0.002, "conflict_max_delay_sec": 0.05},
            "notifications": {"workers": 2},
            "logging": {"level": "WARNING"},
        }
    )


@pytest.fixture
def temp_db_path():
    tmp = tempfile.mkdtemp()
    path = Path(tmp) / "test.duckdb"
    yield path
    for p in Path(tmp).iterdir():
        p.unlink(missing_ok=True)
    Path(tmp).rmdir()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def market(settings, temp_db_path, notifier):
    m = build_marketplace(settings, db_path=temp_db_path, notifier=notifier)
    yield m
    m.close()


@pytest.fixture
def open_gig(market):
    return market.ledger.post_gig("client-1", "Logo design", "Need a logo for a bakery", 800)
