"""Bid - a freelancer's proposal against a gig."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BidStatus(str, Enum):
    """PENDING is the only non-terminal state."""

    PENDING = "pending"
    HIRED = "hired"
    REJECTED = "rejected"


class Bid(BaseModel):
    bid_id: str
    gig_id: str
    freelancer_id: str
    message: str
    price: float = Field(..., gt=0)
    status: BidStatus = BidStatus.PENDING
    created_at: int  # ms epoch
