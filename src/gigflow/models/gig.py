"""Gig - a posted job with a budget, owned by a client."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class GigStatus(str, Enum):
    """Monotonic: OPEN -> ASSIGNED only."""

    OPEN = "open"
    ASSIGNED = "assigned"


class Gig(BaseModel):
    gig_id: str
    title: str
    description: str = ""
    budget: float = Field(..., gt=0)
    owner_id: str
    status: GigStatus = GigStatus.OPEN
    created_at: int  # ms epoch
    bid_count: int = 0
