"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from surplus_match.api.admin import router as admin_router
from surplus_match.api.models import DEFAULT_EXPIRY_HOURS, CreateListingRequest
from surplus_match.api.serializers import (
    serialize_claim,
    serialize_summary,
    serialize_view,
)
from surplus_match.app_logging import configure_logging
from surplus_match.containers import AppContainer
from surplus_match.domain.actors import Actor, Role
from surplus_match.domain.errors import ListingError, NotFoundError
from surplus_match.services.queries import ListingScope

_STATUS_BY_CODE = {
    "validation_error": 422,
    "not_found": 404,
    "already_claimed": 409,
    "expired": 410,
    "unauthorized": 403,
    "timeout": 504,
}


async def current_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> Actor:
    """Read the actor forwarded by the upstream auth gateway."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return Actor(id=UUID(x_actor_id), role=Role(x_actor_role.lower()))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting with storage_backend=%s", container.settings.storage_backend
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(ListingError)
    async def listing_error_handler(
        _request: Request, exc: ListingError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_STATUS_BY_CODE.get(
                exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
            ),
            content={"error": exc.code, "detail": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/listings", status_code=status.HTTP_201_CREATED)
    def create_listing(
        body: CreateListingRequest,
        request: Request,
        actor: Actor = Depends(current_actor),
    ) -> dict[str, object]:
        """Create a listing for the calling restaurant."""
        state_container: AppContainer = request.app.state.container
        lifecycle = state_container.lifecycle_service
        now = state_container.clock.now()
        expires_at = body.expires_at or now + timedelta(
            hours=body.expires_in_hours or DEFAULT_EXPIRY_HOURS
        )
        listing = lifecycle.create_listing(
            actor=actor,
            item_name=body.item_name,
            quantity=body.quantity,
            expires_at=expires_at,
            now=now,
            description=body.description,
            image_ref=body.image_ref,
        )
        return serialize_view(lifecycle.get_listing(listing.id, now))

    @app.get("/listings/available")
    def available_listings(
        request: Request,
        _actor: Actor = Depends(current_actor),
    ) -> dict[str, object]:
        """Return claimable listings, soonest-expiring first."""
        state_container: AppContainer = request.app.state.container
        views = state_container.lifecycle_service.get_available_listings(
            state_container.clock.now()
        )
        return {"listings": [serialize_view(view) for view in views]}

    @app.get("/listings/mine")
    def my_listings(
        request: Request,
        scope: ListingScope | None = None,
        actor: Actor = Depends(current_actor),
    ) -> dict[str, object]:
        """Return the caller's role-scoped listings."""
        state_container: AppContainer = request.app.state.container
        views = state_container.lifecycle_service.get_listings_for_actor(
            actor, state_container.clock.now(), scope
        )
        return {"listings": [serialize_view(view) for view in views]}

    @app.get("/listings/summary")
    def listing_summary(
        request: Request,
        actor: Actor = Depends(current_actor),
    ) -> dict[str, int]:
        """Return per-status counts for the calling restaurant."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.lifecycle_service.get_owner_summary(
            actor, state_container.clock.now()
        )
        return serialize_summary(summary)

    @app.get("/listings/{listing_id}")
    def listing_detail(
        listing_id: UUID,
        request: Request,
        _actor: Actor = Depends(current_actor),
    ) -> dict[str, object]:
        """Return one listing with its derived status."""
        state_container: AppContainer = request.app.state.container
        view = state_container.lifecycle_service.get_listing(
            listing_id, state_container.clock.now()
        )
        return serialize_view(view)

    @app.post("/listings/{listing_id}/claim", status_code=status.HTTP_201_CREATED)
    def claim_listing(
        listing_id: UUID,
        request: Request,
        actor: Actor = Depends(current_actor),
    ) -> dict[str, object]:
        """Claim a listing for the calling farm."""
        state_container: AppContainer = request.app.state.container
        claim = state_container.lifecycle_service.claim_listing(
            actor, listing_id, state_container.clock.now()
        )
        return serialize_claim(claim)

    @app.get("/listings/{listing_id}/claim")
    def listing_claim(
        listing_id: UUID,
        request: Request,
        _actor: Actor = Depends(current_actor),
    ) -> dict[str, object]:
        """Return the claim held on a listing."""
        state_container: AppContainer = request.app.state.container
        claim = state_container.lifecycle_service.get_claim_for_listing(listing_id)
        if claim is None:
            raise NotFoundError(f"Listing {listing_id} has no claim")
        return serialize_claim(claim)

    return app
