"""Post-commit notification dispatch and the notification log."""

from gigflow.notify.dispatcher import NotificationDispatcher, Notifier
from gigflow.notify.log import NotificationLog

__all__ = ["NotificationDispatcher", "Notifier", "NotificationLog"]
