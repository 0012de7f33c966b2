"""Wires store, ledger, hire engine, dispatcher, and queries from settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gigflow.config.settings import Settings
from gigflow.market.hiring import HireEngine
from gigflow.market.ledger import BidLedger
from gigflow.market.queries import MarketQueries
from gigflow.notify.dispatcher import NotificationDispatcher, Notifier
from gigflow.notify.log import NotificationLog
from gigflow.storage.db import Store


@dataclass
class Marketplace:
    store: Store
    ledger: BidLedger
    engine: HireEngine
    queries: MarketQueries
    notifications: NotificationLog
    dispatcher: NotificationDispatcher

    def close(self) -> None:
        """Drain pending notifications, then close the database."""
        self.dispatcher.close(wait=True)
        self.store.close()


def build_marketplace(
    settings: Settings,
    db_path: str | Path | None = None,
    notifier: Notifier | None = None,
) -> Marketplace:
    """Build the core. notifier defaults to the notification log in the same database."""
    store = Store(db_path if db_path is not None else settings.db_path)
    notifications = NotificationLog(store)
    dispatcher = NotificationDispatcher(notifier or notifications, workers=settings.notify_workers)
    retry = {
        "conflict_retries": settings.conflict_retries,
        "conflict_base_delay_sec": settings.conflict_base_delay_sec,
        "conflict_max_delay_sec": settings.conflict_max_delay_sec,
    }
    return Marketplace(
        store=store,
        ledger=BidLedger(store, **retry),
        engine=HireEngine(store, dispatcher, **retry),
        queries=MarketQueries(store),
        notifications=notifications,
        dispatcher=dispatcher,
    )
