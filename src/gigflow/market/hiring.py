"""Hire transaction: one bid hired, its gig assigned, every sibling bid rejected, atomically."""

from __future__ import annotations

from dataclasses import dataclass

import duckdb
import structlog

from gigflow.errors import (
    BidNotFoundError,
    GigAlreadyAssignedError,
    GigNotFoundError,
    NotGigOwnerError,
    TransactionFailure,
)
from gigflow.models import GigStatus
from gigflow.notify.dispatcher import NotificationDispatcher
from gigflow.storage import bids as store_bids
from gigflow.storage import gigs as store_gigs
from gigflow.storage.db import Store, is_conflict

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HireResult:
    gig_id: str
    bid_id: str
    freelancer_id: str
    rejected_count: int


class HireEngine:
    """Runs the OPEN -> ASSIGNED transition of a gig.

    The gig re-read and all writes happen in one DuckDB transaction. Two hires on the
    same gig both bump the gig's version column, so the store lets only one of them
    commit; the other hits a write-write conflict, re-runs from a fresh snapshot, sees the gig
    assigned and fails with GigAlreadyAssignedError. Hires on different gigs touch
    disjoint rows and never wait on each other.
    """

    def __init__(
        self,
        store: Store,
        dispatcher: NotificationDispatcher,
        *,
        conflict_retries: int = 5,
        conflict_base_delay_sec: float = 0.01,
        conflict_max_delay_sec: float = 0.5,
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self.conflict_retries = conflict_retries
        self.conflict_base_delay_sec = conflict_base_delay_sec
        self.conflict_max_delay_sec = conflict_max_delay_sec

    def hire(self, bid_id: str, caller_id: str | None = None) -> HireResult:
        """Hire bid_id. When caller_id is given it must be the gig owner."""
        with self.store.read() as cur:
            bid = store_bids.get_bid(cur, bid_id)
        if bid is None:
            raise BidNotFoundError(bid_id)
        gig_id = bid.gig_id

        def work(cur: duckdb.DuckDBPyConnection) -> HireResult:
            gig = store_gigs.get_gig(cur, gig_id)
            if gig is None:
                raise GigNotFoundError(gig_id)
            if caller_id is not None and gig.owner_id != caller_id:
                raise NotGigOwnerError(gig_id, caller_id)
            if gig.status is not GigStatus.OPEN:
                raise GigAlreadyAssignedError(gig_id)
            if not store_gigs.assign_gig(cur, gig_id):
                raise GigAlreadyAssignedError(gig_id)
            if not store_bids.hire_bid(cur, bid.bid_id):
                # Bid row vanished between the lookup and this snapshot
                raise BidNotFoundError(bid.bid_id)
            rejected = store_bids.reject_siblings(cur, gig_id, bid.bid_id)
            return HireResult(
                gig_id=gig_id,
                bid_id=bid.bid_id,
                freelancer_id=bid.freelancer_id,
                rejected_count=rejected,
            )

        try:
            result = self.store.run_transaction(
                work,
                op="hire",
                retries=self.conflict_retries,
                base_delay_sec=self.conflict_base_delay_sec,
                max_delay_sec=self.conflict_max_delay_sec,
            )
        except GigAlreadyAssignedError:
            log.info("hire_rejected_assigned", bid_id=bid_id, gig_id=gig_id)
            raise
        except duckdb.Error as e:
            if is_conflict(e) and self._gig_assigned(gig_id):
                log.info("hire_rejected_assigned", bid_id=bid_id, gig_id=gig_id, after_conflict=True)
                raise GigAlreadyAssignedError(gig_id) from e
            log.error("transaction_failed", op="hire", bid_id=bid_id, gig_id=gig_id, error=str(e))
            raise TransactionFailure(f"Hire of bid {bid_id} did not commit: {e}") from e

        log.info(
            "hire_committed",
            gig_id=result.gig_id,
            bid_id=result.bid_id,
            freelancer_id=result.freelancer_id,
            rejected=result.rejected_count,
        )
        self._notify(result)
        return result

    def _gig_assigned(self, gig_id: str) -> bool:
        try:
            with self.store.read() as cur:
                return store_gigs.get_gig_status(cur, gig_id) is GigStatus.ASSIGNED
        except duckdb.Error:
            return False

    def _notify(self, result: HireResult) -> None:
        # The hire has committed; nothing below may undo or fail it.
        try:
            self.dispatcher.notify_hired(result.freelancer_id, result.gig_id)
        except Exception as e:
            log.warning("notification_dispatch_failed", gig_id=result.gig_id, error=str(e))
