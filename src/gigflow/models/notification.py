"""Notification - an entry in a user's notification log."""

from __future__ import annotations

from pydantic import BaseModel


class Notification(BaseModel):
    notification_id: str
    user_id: str
    kind: str = "hired"
    gig_id: str | None = None
    message: str
    read: bool = False
    created_at: int  # ms epoch
