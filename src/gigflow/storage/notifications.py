"""Notification log persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gigflow.models import Notification

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_COLUMNS = ["notification_id", "user_id", "kind", "gig_id", "message", "read", "created_at"]


def insert_notification(conn: DuckDBPyConnection, notification: Notification) -> None:
    conn.execute(
        """
        INSERT INTO notifications (notification_id, user_id, kind, gig_id, message, is_read, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        [
            notification.notification_id,
            notification.user_id,
            notification.kind,
            notification.gig_id,
            notification.message,
            notification.read,
            notification.created_at,
        ],
    )


def list_notifications(conn: DuckDBPyConnection, user_id: str, unread_only: bool = False) -> list[Notification]:
    """User's notifications, newest first."""
    sql = """
        SELECT notification_id, user_id, kind, gig_id, message, is_read, created_at
        FROM notifications
        WHERE user_id = ?
    """
    if unread_only:
        sql += " AND is_read = FALSE"
    sql += " ORDER BY seq DESC"
    rows = conn.execute(sql, [user_id]).fetchall()
    return [Notification(**dict(zip(_COLUMNS, r))) for r in rows]


def mark_read(conn: DuckDBPyConnection, user_id: str, notification_id: str) -> int:
    row = conn.execute(
        "UPDATE notifications SET is_read = TRUE WHERE notification_id = ? AND user_id = ?",
        [notification_id, user_id],
    ).fetchone()
    return int(row[0]) if row else 0


def mark_all_read(conn: DuckDBPyConnection, user_id: str) -> int:
    row = conn.execute(
        "UPDATE notifications SET is_read = TRUE WHERE user_id = ? AND is_read = FALSE",
        [user_id],
    ).fetchone()
    return int(row[0]) if row else 0


def delete_notifications(conn: DuckDBPyConnection, user_id: str) -> int:
    row = conn.execute("DELETE FROM notifications WHERE user_id = ?", [user_id]).fetchone()
    return int(row[0]) if row else 0


def unread_count(conn: DuckDBPyConnection, user_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM notifications WHERE user_id = ? AND is_read = FALSE", [user_id]
    ).fetchone()
    return int(row[0]) if row else 0
