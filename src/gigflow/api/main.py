"""FastAPI backend: gigs, bids, hire, notifications."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gigflow.api.schemas import (
    BidCreateRequest,
    BidsListResponse,
    CountResponse,
    ErrorResponse,
    GigCreateRequest,
    GigsListResponse,
    HealthResponse,
    HireResponse,
    NotificationsResponse,
)
from gigflow.config import get_settings
from gigflow.config.settings import Settings
from gigflow.errors import AuthenticationRequired, MarketplaceError, TransactionFailure
from gigflow.market.service import Marketplace, build_marketplace
from gigflow.models import Bid, Gig, GigStatus
from gigflow.notify.dispatcher import Notifier

log = structlog.get_logger(__name__)

# Set by run_api() before uvicorn imports the module-level app.
_config_profile: str | None = None

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _error_json(code: str, message: str, status_code: int, headers: dict[str, str] | None = None) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
        headers=headers,
    )


def get_marketplace(request: Request) -> Marketplace:
    return request.app.state.marketplace


def current_user(x_user_id: str | None = Header(None, description="Authenticated user id")) -> str:
    """Caller identity, supplied by the session layer in front of this service."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise AuthenticationRequired()
    return user_id


def create_app(
    settings: Settings | None = None,
    db_path: str | Path | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """Build the app. The marketplace is opened in lifespan and drained on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or get_settings(_config_profile)
        app.state.marketplace = build_marketplace(resolved, db_path=db_path, notifier=notifier)
        log.info("api_started", db_path=app.state.marketplace.store.db_path)
        try:
            yield
        finally:
            app.state.marketplace.close()
            log.info("api_stopped")

    app = FastAPI(title="GigFlow API", version="0.1.0", lifespan=lifespan)
    origins = (settings or get_settings(_config_profile)).cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MarketplaceError)
    async def marketplace_error(request: Request, exc: MarketplaceError) -> JSONResponse:
        headers = {"Retry-After": "1"} if isinstance(exc, TransactionFailure) else None
        return _error_json(exc.code, exc.message, exc.status_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}" for err in exc.errors()
        )
        return _error_json("validation_error", problems or "Invalid request", 422)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/gigs", status_code=201, response_model=Gig, responses=_ERROR_RESPONSES)
    def gigs_create(
        body: GigCreateRequest,
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> Gig:
        return market.ledger.post_gig(user_id, body.title, body.description, body.budget)

    @app.get("/gigs", response_model=GigsListResponse)
    def gigs_list(
        status: GigStatus | None = Query(None, description="Filter by status (open, assigned)"),
        search: str | None = Query(None, description="Case-insensitive match on title or description"),
        owner_id: str | None = Query(None),
        limit: int = Query(100, ge=1, le=500),
        offset: int = Query(0, ge=0),
        market: Marketplace = Depends(get_marketplace),
    ) -> GigsListResponse:
        """List gigs, newest first."""
        gigs = market.queries.list_gigs(status=status, owner_id=owner_id, search=search, limit=limit, offset=offset)
        total = market.queries.count_gigs(status=status, owner_id=owner_id, search=search)
        return GigsListResponse(gigs=gigs, total=total)

    @app.get("/gigs/mine", response_model=GigsListResponse, responses=_ERROR_RESPONSES)
    def gigs_mine(
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> GigsListResponse:
        gigs = market.queries.gigs_by_owner(user_id)
        return GigsListResponse(gigs=gigs, total=len(gigs))

    @app.get("/gigs/{gig_id}", response_model=Gig, responses=_ERROR_RESPONSES)
    def gigs_detail(gig_id: str, market: Marketplace = Depends(get_marketplace)) -> Gig:
        return market.queries.get_gig(gig_id)

    @app.post("/bids", status_code=201, response_model=Bid, responses=_ERROR_RESPONSES)
    def bids_create(
        body: BidCreateRequest,
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> Bid:
        return market.ledger.submit_bid(body.gig_id, user_id, body.message, body.price)

    @app.get("/bids", response_model=BidsListResponse)
    def bids_for_gig(
        gig_id: str = Query(..., description="Gig whose bids to list, in submission order"),
        market: Marketplace = Depends(get_marketplace),
    ) -> BidsListResponse:
        bids = market.ledger.list_bids_for_gig(gig_id)
        return BidsListResponse(bids=bids, total=len(bids))

    @app.get("/bids/mine", response_model=BidsListResponse, responses=_ERROR_RESPONSES)
    def bids_mine(
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> BidsListResponse:
        bids = market.queries.bids_by_freelancer(user_id)
        return BidsListResponse(bids=bids, total=len(bids))

    @app.patch("/bids/{bid_id}/hire", response_model=HireResponse, responses=_ERROR_RESPONSES)
    def bids_hire(
        bid_id: str,
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> HireResponse:
        """Hire a bid. Only the gig owner may hire; losing a race returns 409 gig_already_assigned."""
        result = market.engine.hire(bid_id, caller_id=user_id)
        return HireResponse(
            gig_id=result.gig_id,
            bid_id=result.bid_id,
            freelancer_id=result.freelancer_id,
            rejected_count=result.rejected_count,
        )

    @app.get("/notifications", response_model=NotificationsResponse, responses=_ERROR_RESPONSES)
    def notifications_list(
        unread_only: bool = False,
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> NotificationsResponse:
        return NotificationsResponse(
            notifications=market.notifications.list_for_user(user_id, unread_only=unread_only),
            unread_count=market.notifications.unread_count(user_id),
        )

    @app.patch("/notifications/read-all", response_model=CountResponse, responses=_ERROR_RESPONSES)
    def notifications_read_all(
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> CountResponse:
        return CountResponse(updated=market.notifications.mark_all_read(user_id))

    @app.patch("/notifications/{notification_id}/read", response_model=CountResponse, responses=_ERROR_RESPONSES)
    def notifications_read(
        notification_id: str,
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> CountResponse:
        market.notifications.mark_read(user_id, notification_id)
        return CountResponse(updated=1)

    @app.delete("/notifications", response_model=CountResponse, responses=_ERROR_RESPONSES)
    def notifications_clear(
        user_id: str = Depends(current_user),
        market: Marketplace = Depends(get_marketplace),
    ) -> CountResponse:
        return CountResponse(updated=market.notifications.clear(user_id))

    return app


app = create_app()


def run_api(host: str = "127.0.0.1", port: int = 8000, profile: str | None = None) -> None:
    global _config_profile, app
    _config_profile = profile
    app = create_app()
    import uvicorn
    uvicorn.run(app, host=host, port=port, reload=False)
