"""Bid ledger: post gigs, submit bids, list bids per gig."""

from __future__ import annotations

import math
import uuid
from typing import Any

import duckdb
import structlog

from gigflow.errors import (
    DuplicateBidError,
    GigNotFoundError,
    GigNotOpenError,
    TransactionFailure,
    ValidationError,
)
from gigflow.models import Bid, Gig, GigStatus
from gigflow.storage import bids as store_bids
from gigflow.storage import gigs as store_gigs
from gigflow.storage.db import Store, now_ms

log = structlog.get_logger(__name__)


def _require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} must not be empty")
    return text


def _require_positive(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return amount


class BidLedger:
    """Creates gigs and bids. A freelancer gets at most one bid per gig."""

    def __init__(
        self,
        store: Store,
        *,
        conflict_retries: int = 5,
        conflict_base_delay_sec: float = 0.01,
        conflict_max_delay_sec: float = 0.5,
    ) -> None:
        self.store = store
        self.conflict_retries = conflict_retries
        self.conflict_base_delay_sec = conflict_base_delay_sec
        self.conflict_max_delay_sec = conflict_max_delay_sec

    def post_gig(self, owner_id: str, title: str, description: str, budget: Any) -> Gig:
        gig = Gig(
            gig_id=uuid.uuid4().hex,
            title=_require_text(title, "title"),
            description=_require_text(description, "description"),
            budget=_require_positive(budget, "budget"),
            owner_id=_require_text(owner_id, "owner_id"),
            created_at=now_ms(),
        )
        try:
            with self.store.transaction() as cur:
                store_gigs.insert_gig(cur, gig)
        except duckdb.Error as e:
            log.error("transaction_failed", op="post_gig", error=str(e))
            raise TransactionFailure(f"Could not post gig: {e}") from e
        log.info("gig_posted", gig_id=gig.gig_id, owner_id=gig.owner_id, budget=gig.budget)
        return gig

    def submit_bid(self, gig_id: str, freelancer_id: str, message: str, price: Any) -> Bid:
        """Persist a pending bid.

        The gig status check, the duplicate check and the insert share one transaction,
        which also bumps the gig's bid_count and version only while the gig is open. A
        hire bumps the same version column, so the store orders the two:
        a bid that loses to a hire re-runs, sees the assigned gig and gets GigNotOpenError.
        """
        bid = Bid(
            bid_id=uuid.uuid4().hex,
            gig_id=_require_text(gig_id, "gig_id"),
            freelancer_id=_require_text(freelancer_id, "freelancer_id"),
            message=_require_text(message, "message"),
            price=_require_positive(price, "price"),
            created_at=now_ms(),
        )

        def work(cur: duckdb.DuckDBPyConnection) -> Bid:
            gig = store_gigs.get_gig(cur, bid.gig_id)
            if gig is None:
                raise GigNotFoundError(bid.gig_id)
            if gig.owner_id == bid.freelancer_id:
                raise ValidationError("Gig owners cannot bid on their own gig")
            if gig.status is not GigStatus.OPEN:
                raise GigNotOpenError(bid.gig_id)
            if store_bids.find_bid(cur, bid.gig_id, bid.freelancer_id) is not None:
                raise DuplicateBidError(bid.gig_id, bid.freelancer_id)
            if not store_gigs.count_bid(cur, bid.gig_id):
                raise GigNotOpenError(bid.gig_id)
            store_bids.insert_bid(cur, bid)
            return bid

        try:
            created = self.store.run_transaction(
                work,
                op="submit_bid",
                retries=self.conflict_retries,
                base_delay_sec=self.conflict_base_delay_sec,
                max_delay_sec=self.conflict_max_delay_sec,
            )
        except duckdb.ConstraintException as e:
            # UNIQUE (gig_id, freelancer_id) caught a racing duplicate
            raise DuplicateBidError(bid.gig_id, bid.freelancer_id) from e
        except duckdb.Error as e:
            log.error("transaction_failed", op="submit_bid", gig_id=bid.gig_id, error=str(e))
            raise TransactionFailure(f"Could not submit bid: {e}") from e
        log.info(
            "bid_submitted",
            bid_id=created.bid_id,
            gig_id=created.gig_id,
            freelancer_id=created.freelancer_id,
            price=created.price,
        )
        return created

    def list_bids_for_gig(self, gig_id: str) -> list[Bid]:
        """All bids for the gig, any status, in submission order."""
        with self.store.read() as cur:
            return store_bids.list_bids_for_gig(cur, gig_id)
