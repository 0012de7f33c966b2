"""Canonical schema (Pydantic) - Gig, Bid, Notification."""

from gigflow.models.bid import Bid, BidStatus
from gigflow.models.gig import Gig, GigStatus
from gigflow.models.notification import Notification

__all__ = [
    "Gig",
    "GigStatus",
    "Bid",
    "BidStatus",
    "Notification",
]
