"""Read-side projections. Every query runs on its own autocommit cursor and sees committed state only."""

from __future__ import annotations

from gigflow.errors import BidNotFoundError, GigNotFoundError
from gigflow.models import Bid, Gig, GigStatus
from gigflow.storage import bids as store_bids
from gigflow.storage import gigs as store_gigs
from gigflow.storage.db import Store


class MarketQueries:
    def __init__(self, store: Store) -> None:
        self.store = store

    def list_gigs(
        self,
        status: GigStatus | str | None = None,
        owner_id: str | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Gig]:
        status = GigStatus(status) if status is not None else None
        with self.store.read() as cur:
            return store_gigs.list_gigs(
                cur, status=status, owner_id=owner_id, search=search, limit=limit, offset=offset
            )

    def count_gigs(
        self,
        status: GigStatus | str | None = None,
        owner_id: str | None = None,
        search: str | None = None,
    ) -> int:
        status = GigStatus(status) if status is not None else None
        with self.store.read() as cur:
            return store_gigs.count_gigs(cur, status=status, owner_id=owner_id, search=search)

    def gigs_by_owner(self, owner_id: str) -> list[Gig]:
        return self.list_gigs(owner_id=owner_id)

    def get_gig(self, gig_id: str) -> Gig:
        with self.store.read() as cur:
            gig = store_gigs.get_gig(cur, gig_id)
        if gig is None:
            raise GigNotFoundError(gig_id)
        return gig

    def get_bid(self, bid_id: str) -> Bid:
        with self.store.read() as cur:
            bid = store_bids.get_bid(cur, bid_id)
        if bid is None:
            raise BidNotFoundError(bid_id)
        return bid

    def bids_for_gig(self, gig_id: str) -> list[Bid]:
        with self.store.read() as cur:
            return store_bids.list_bids_for_gig(cur, gig_id)

    def bids_by_freelancer(self, freelancer_id: str) -> list[Bid]:
        with self.store.read() as cur:
            return store_bids.list_bids_by_freelancer(cur, freelancer_id)
