"""Marketplace core: bid ledger, hire transaction engine, read projections."""

from gigflow.market.hiring import HireEngine, HireResult
from gigflow.market.ledger import BidLedger
from gigflow.market.queries import MarketQueries
from gigflow.market.service import Marketplace, build_marketplace

__all__ = [
    "BidLedger",
    "HireEngine",
    "HireResult",
    "MarketQueries",
    "Marketplace",
    "build_marketplace",
]
