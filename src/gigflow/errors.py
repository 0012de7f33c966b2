"""Typed marketplace failures. Each carries a machine code and an HTTP status."""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for every failure the core reports to its callers."""

    code: str = "marketplace_error"
    status_code: int = 400

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return cls.code.replace("_", " ").capitalize()

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(MarketplaceError):
    """Bad input: non-positive amount, empty text, bidding on one's own gig."""

    code = "validation_error"
    status_code = 422


class DuplicateBidError(MarketplaceError):
    code = "duplicate_bid"
    status_code = 409

    def __init__(self, gig_id: str, freelancer_id: str) -> None:
        self.gig_id = gig_id
        self.freelancer_id = freelancer_id
        super().__init__(f"Freelancer {freelancer_id} already bid on gig {gig_id}")


class GigNotOpenError(MarketplaceError):
    code = "gig_not_open"
    status_code = 409

    def __init__(self, gig_id: str) -> None:
        self.gig_id = gig_id
        super().__init__(f"Gig {gig_id} is not open for bids")


class GigNotFoundError(MarketplaceError):
    code = "gig_not_found"
    status_code = 404

    def __init__(self, gig_id: str) -> None:
        self.gig_id = gig_id
        super().__init__(f"Gig not found: {gig_id}")


class BidNotFoundError(MarketplaceError):
    code = "bid_not_found"
    status_code = 404

    def __init__(self, bid_id: str) -> None:
        self.bid_id = bid_id
        super().__init__(f"Bid not found: {bid_id}")


class NotificationNotFoundError(MarketplaceError):
    code = "notification_not_found"
    status_code = 404

    def __init__(self, notification_id: str) -> None:
        self.notification_id = notification_id
        super().__init__(f"Notification not found: {notification_id}")


class GigAlreadyAssignedError(MarketplaceError):
    """Lost the race for a gig (or the gig was assigned long ago). Expected under concurrency."""

    code = "gig_already_assigned"
    status_code = 409

    def __init__(self, gig_id: str) -> None:
        self.gig_id = gig_id
        super().__init__(f"Gig {gig_id} is already assigned")


class NotGigOwnerError(MarketplaceError):
    code = "not_gig_owner"
    status_code = 403

    def __init__(self, gig_id: str, caller_id: str) -> None:
        self.gig_id = gig_id
        self.caller_id = caller_id
        super().__init__(f"User {caller_id} does not own gig {gig_id}")


class TransactionFailure(MarketplaceError):
    """Storage abort or timeout unrelated to business rules. Transient: the caller may retry."""

    code = "transaction_failure"
    status_code = 503


class NotificationDeliveryFailure(MarketplaceError):
    """Raised inside the dispatcher only; logged and never propagated to the hiring caller."""

    code = "notification_delivery_failure"
    status_code = 500


class AuthenticationRequired(MarketplaceError):
    """No caller identity was supplied to a mutating or per-user call."""

    code = "unauthenticated"
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Authentication required")
