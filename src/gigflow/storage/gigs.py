"""Gig persistence and gig projections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gigflow.models import Gig, GigStatus

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_COLUMNS = ["gig_id", "title", "description", "budget", "owner_id", "status", "created_at", "bid_count"]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM gigs"


def _row_to_gig(row: tuple[Any, ...]) -> Gig:
    return Gig(**dict(zip(_COLUMNS, row)))


def insert_gig(conn: DuckDBPyConnection, gig: Gig) -> None:
    conn.execute(
        """
        INSERT INTO gigs (gig_id, title, description, budget, owner_id, status, bid_count, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            gig.gig_id,
            gig.title,
            gig.description,
            gig.budget,
            gig.owner_id,
            gig.status.value,
            gig.bid_count,
            gig.created_at,
        ],
    )


def get_gig(conn: DuckDBPyConnection, gig_id: str) -> Gig | None:
    row = conn.execute(f"{_SELECT} WHERE gig_id = ?", [gig_id]).fetchone()
    return _row_to_gig(row) if row else None


def get_gig_status(conn: DuckDBPyConnection, gig_id: str) -> GigStatus | None:
    row = conn.execute("SELECT status FROM gigs WHERE gig_id = ?", [gig_id]).fetchone()
    return GigStatus(row[0]) if row else None


def assign_gig(conn: DuckDBPyConnection, gig_id: str) -> int:
    """Flip an open gig to assigned. Returns the number of rows changed (0 or 1)."""
    row = conn.execute(
        "UPDATE gigs SET status = ?, version = version + 1 WHERE gig_id = ? AND status = ?",
        [GigStatus.ASSIGNED.value, gig_id, GigStatus.OPEN.value],
    ).fetchone()
    return int(row[0]) if row else 0


def count_bid(conn: DuckDBPyConnection, gig_id: str) -> int:
    """Bump bid_count on an open gig.

    DuckDB detects write-write conflicts per column, so this bumps version exactly as
    assign_gig does: a bid and a hire on the same gig can then never both commit from
    snapshots that saw the gig open.
    """
    row = conn.execute(
        "UPDATE gigs SET bid_count = bid_count + 1, version = version + 1 WHERE gig_id = ? AND status = ?",
        [gig_id, GigStatus.OPEN.value],
    ).fetchone()
    return int(row[0]) if row else 0


def _gig_filter(
    status: GigStatus | None,
    owner_id: str | None,
    search: str | None,
) -> tuple[str, list[Any]]:
    conditions = ["1=1"]
    params: list[Any] = []
    if status is not None:
        conditions.append("status = ?")
        params.append(GigStatus(status).value)
    if owner_id:
        conditions.append("owner_id = ?")
        params.append(owner_id)
    if search and search.strip():
        needle = f"%{search.strip().lower()}%"
        conditions.append("(LOWER(title) LIKE ? OR LOWER(description) LIKE ?)")
        params.extend([needle, needle])
    return " AND ".join(conditions), params


def list_gigs(
    conn: DuckDBPyConnection,
    *,
    status: GigStatus | None = None,
    owner_id: str | None = None,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Gig]:
    """Gigs newest first. search matches title or description, case-insensitive."""
    where, params = _gig_filter(status, owner_id, search)
    sql = f"{_SELECT} WHERE {where} ORDER BY seq DESC"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)
    if offset:
        sql += " OFFSET ?"
        params.append(offset)
    rows = conn.execute(sql, params).fetchall()
    return [_row_to_gig(r) for r in rows]


def count_gigs(
    conn: DuckDBPyConnection,
    *,
    status: GigStatus | None = None,
    owner_id: str | None = None,
    search: str | None = None,
) -> int:
    where, params = _gig_filter(status, owner_id, search)
    row = conn.execute(f"SELECT COUNT(*) FROM gigs WHERE {where}", params).fetchone()
    return int(row[0]) if row else 0
