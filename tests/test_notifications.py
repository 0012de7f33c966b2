"""Notification dispatcher and notification log."""

import threading

import pytest

from gigflow.errors import NotificationNotFoundError
from gigflow.notify.dispatcher import NotificationDispatcher
from gigflow.notify.log import NotificationLog
from gigflow.storage.db import Store

from conftest import RecordingNotifier


@pytest.fixture
def store(temp_db_path):
    s = Store(temp_db_path)
    yield s
    s.close()


def test_notify_hired_delivers_payload():
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier, workers=1)
    dispatcher.notify_hired("free-1", "gig-1")
    assert dispatcher.drain(timeout=5)
    dispatcher.close()
    assert notifier.calls == [("free-1", {"type": "hired", "gig_id": "gig-1", "message": "You have been hired!"})]
    assert dispatcher.delivered == 1
    assert dispatcher.failed == 0


def test_delivery_failure_is_swallowed_and_counted():
    notifier = RecordingNotifier(fail=True)
    dispatcher = NotificationDispatcher(notifier, workers=1)
    dispatcher.notify_hired("free-1", "gig-1")
    dispatcher.notify_hired("free-2", "gig-2")
    assert dispatcher.drain(timeout=5)
    dispatcher.close()
    assert dispatcher.failed == 2
    assert dispatcher.delivered == 0
    # No retry: each event attempted exactly once
    assert [c[0] for c in notifier.calls] == ["free-1", "free-2"]


def test_notify_returns_before_delivery_finishes():
    release = threading.Event()

    class SlowNotifier:
        def __init__(self):
            self.calls = 0

        def deliver(self, user_id, payload):
            release.wait(5)
            self.calls += 1

    slow = SlowNotifier()
    dispatcher = NotificationDispatcher(slow, workers=1)
    dispatcher.notify_hired("free-1", "gig-1")
    assert slow.calls == 0
    assert dispatcher.pending() == 1
    release.set()
    assert dispatcher.drain(timeout=5)
    assert slow.calls == 1
    dispatcher.close()


def test_close_drains_and_then_drops_new_events():
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier, workers=2)
    for i in range(5):
        dispatcher.notify_hired(f"free-{i}", "gig-1")
    dispatcher.close(wait=True)
    assert len(notifier.calls) == 5
    dispatcher.notify_hired("free-late", "gig-1")
    assert len(notifier.calls) == 5


def test_notification_log_roundtrip(store):
    log = NotificationLog(store)
    log.deliver("free-1", {"type": "hired", "gig_id": "g1", "message": "You have been hired!"})
    log.deliver("free-1", {"type": "hired", "gig_id": "g2", "message": "You have been hired!"})
    log.deliver("free-2", {"type": "hired", "gig_id": "g3", "message": "You have been hired!"})

    mine = log.list_for_user("free-1")
    assert [n.gig_id for n in mine] == ["g2", "g1"]
    assert log.unread_count("free-1") == 2

    log.mark_read("free-1", mine[0].notification_id)
    assert log.unread_count("free-1") == 1
    assert [n.gig_id for n in log.list_for_user("free-1", unread_only=True)] == ["g1"]

    assert log.mark_all_read("free-1") == 1
    assert log.unread_count("free-1") == 0
    assert log.clear("free-1") == 2
    assert log.list_for_user("free-1") == []
    assert len(log.list_for_user("free-2")) == 1


def test_mark_read_of_someone_elses_notification(store):
    log = NotificationLog(store)
    log.deliver("free-2", {"type": "hired", "gig_id": "g3", "message": "hi"})
    other = log.list_for_user("free-2")[0]
    with pytest.raises(NotificationNotFoundError):
        log.mark_read("free-1", other.notification_id)
    assert log.unread_count("free-2") == 1
