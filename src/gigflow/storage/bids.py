"""Bid persistence and bid projections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gigflow.models import Bid, BidStatus

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_COLUMNS = ["bid_id", "gig_id", "freelancer_id", "message", "price", "status", "created_at"]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM bids"


def _row_to_bid(row: tuple[Any, ...]) -> Bid:
    return Bid(**dict(zip(_COLUMNS, row)))


def insert_bid(conn: DuckDBPyConnection, bid: Bid) -> None:
    conn.execute(
        """
        INSERT INTO bids (bid_id, gig_id, freelancer_id, message, price, status, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        [
            bid.bid_id,
            bid.gig_id,
            bid.freelancer_id,
            bid.message,
            bid.price,
            bid.status.value,
            bid.created_at,
        ],
    )


def get_bid(conn: DuckDBPyConnection, bid_id: str) -> Bid | None:
    row = conn.execute(f"{_SELECT} WHERE bid_id = ?", [bid_id]).fetchone()
    return _row_to_bid(row) if row else None


def find_bid(conn: DuckDBPyConnection, gig_id: str, freelancer_id: str) -> Bid | None:
    row = conn.execute(
        f"{_SELECT} WHERE gig_id = ? AND freelancer_id = ?", [gig_id, freelancer_id]
    ).fetchone()
    return _row_to_bid(row) if row else None


def hire_bid(conn: DuckDBPyConnection, bid_id: str) -> int:
    """Mark a pending bid hired. Returns rows changed."""
    row = conn.execute(
        "UPDATE bids SET status = ? WHERE bid_id = ? AND status = ?",
        [BidStatus.HIRED.value, bid_id, BidStatus.PENDING.value],
    ).fetchone()
    return int(row[0]) if row else 0


def reject_siblings(conn: DuckDBPyConnection, gig_id: str, winner_bid_id: str) -> int:
    """Reject every other pending bid of the gig. Already rejected bids are untouched."""
    row = conn.execute(
        "UPDATE bids SET status = ? WHERE gig_id = ? AND bid_id <> ? AND status = ?",
        [BidStatus.REJECTED.value, gig_id, winner_bid_id, BidStatus.PENDING.value],
    ).fetchone()
    return int(row[0]) if row else 0


def list_bids_for_gig(conn: DuckDBPyConnection, gig_id: str) -> list[Bid]:
    """All bids for the gig in insertion order."""
    rows = conn.execute(f"{_SELECT} WHERE gig_id = ? ORDER BY seq", [gig_id]).fetchall()
    return [_row_to_bid(r) for r in rows]


def list_bids_by_freelancer(conn: DuckDBPyConnection, freelancer_id: str) -> list[Bid]:
    """A freelancer's bids, newest first."""
    rows = conn.execute(
        f"{_SELECT} WHERE freelancer_id = ? ORDER BY seq DESC", [freelancer_id]
    ).fetchall()
    return [_row_to_bid(r) for r in rows]
