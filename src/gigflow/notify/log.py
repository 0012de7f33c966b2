"""Notification log: the default delivery collaborator, read by polling clients."""

from __future__ import annotations

import uuid
from typing import Any

from gigflow.errors import NotificationNotFoundError
from gigflow.models import Notification
from gigflow.storage import notifications as store_notifications
from gigflow.storage.db import Store, now_ms


class NotificationLog:
    """Persists delivered events as notifications; users list, mark read, and clear them."""

    def __init__(self, store: Store) -> None:
        self.store = store

    def deliver(self, user_id: str, payload: dict[str, Any]) -> None:
        notification = Notification(
            notification_id=uuid.uuid4().hex,
            user_id=user_id,
            kind=str(payload.get("type", "info")),
            gig_id=payload.get("gig_id"),
            message=str(payload.get("message", "")),
            created_at=now_ms(),
        )
        with self.store.transaction() as cur:
            store_notifications.insert_notification(cur, notification)

    def list_for_user(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        with self.store.read() as cur:
            return store_notifications.list_notifications(cur, user_id, unread_only=unread_only)

    def unread_count(self, user_id: str) -> int:
        with self.store.read() as cur:
            return store_notifications.unread_count(cur, user_id)

    def mark_read(self, user_id: str, notification_id: str) -> None:
        with self.store.transaction() as cur:
            if not store_notifications.mark_read(cur, user_id, notification_id):
                raise NotificationNotFoundError(notification_id)

    def mark_all_read(self, user_id: str) -> int:
        with self.store.transaction() as cur:
            return store_notifications.mark_all_read(cur, user_id)

    def clear(self, user_id: str) -> int:
        with self.store.transaction() as cur:
            return store_notifications.delete_notifications(cur, user_id)
