"""Fire-and-forget delivery of "you are hired" events after a hire commits."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Any, Protocol

import structlog

from gigflow.errors import NotificationDeliveryFailure

log = structlog.get_logger(__name__)

HIRED_MESSAGE = "You have been hired!"


class Notifier(Protocol):
    """Delivery collaborator. Return value is ignored; raising means delivery failed."""

    def deliver(self, user_id: str, payload: dict[str, Any]) -> None: ...


class NotificationDispatcher:
    """Queues deliveries on a small worker pool and never reports failures to the caller.

    Deliveries are at-most-once: a failure is logged and dropped, there is no retry.
    """

    def __init__(self, notifier: Notifier, workers: int = 2) -> None:
        self.notifier = notifier
        self._executor = ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="gigflow-notify")
        self._pending: set[Future[None]] = set()
        self._lock = Lock()
        self._closed = False
        self.delivered = 0
        self.failed = 0

    def notify_hired(self, freelancer_id: str, gig_id: str) -> None:
        payload = {"type": "hired", "gig_id": gig_id, "message": HIRED_MESSAGE}
        self._submit(freelancer_id, payload)

    def _submit(self, user_id: str, payload: dict[str, Any]) -> None:
        with self._lock:
            if self._closed:
                log.warning("notification_dropped", user_id=user_id, reason="dispatcher closed")
                return
            future = self._executor.submit(self._deliver, user_id, payload)
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)

    def _deliver(self, user_id: str, payload: dict[str, Any]) -> None:
        try:
            self.notifier.deliver(user_id, payload)
        except Exception as e:
            failure = NotificationDeliveryFailure(f"Delivery to {user_id} failed: {e}")
            with self._lock:
                self.failed += 1
            log.warning(
                "notification_delivery_failed",
                user_id=user_id,
                kind=payload.get("type"),
                gig_id=payload.get("gig_id"),
                code=failure.code,
                error=str(failure),
            )
            return
        with self._lock:
            self.delivered += 1
        log.info("notification_delivered", user_id=user_id, kind=payload.get("type"), gig_id=payload.get("gig_id"))

    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def drain(self, timeout: float | None = None) -> bool:
        """Block until every queued delivery has finished. False on timeout."""
        with self._lock:
            futures = list(self._pending)
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def close(self, wait: bool = True) -> None:
        """Stop accepting work; with wait=True, drain queued deliveries first."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
