"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gigflow.models import Bid, Gig, Notification


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. gig_already_assigned, bid_not_found")


# --- Gigs ---
# Amounts and text are validated by the ledger so every rule violation has the same error shape.
class GigCreateRequest(BaseModel):
    title: str = ""
    description: str = ""
    budget: float = 0


class GigsListResponse(BaseModel):
    gigs: list[Gig]
    total: int


# --- Bids ---
class BidCreateRequest(BaseModel):
    gig_id: str
    message: str = ""
    price: float = 0


class BidsListResponse(BaseModel):
    bids: list[Bid]
    total: int


# --- Hire ---
class HireResponse(BaseModel):
    message: str = "Freelancer hired successfully"
    gig_id: str
    bid_id: str
    freelancer_id: str
    rejected_count: int = Field(..., description="Pending bids rejected by this hire")


# --- Notifications ---
class NotificationsResponse(BaseModel):
    notifications: list[Notification]
    unread_count: int


class CountResponse(BaseModel):
    updated: int
