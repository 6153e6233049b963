"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from surplus_match.api.serializers import serialize_summary, serialize_view

if TYPE_CHECKING:
    from surplus_match.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/listings", dependencies=[Depends(require_admin)])
def list_listings(
    request: Request, limit: int = Query(default=50, ge=1, le=500)
) -> dict[str, object]:
    """Return the newest listings with derived status and claims."""
    container: AppContainer = request.app.state.container
    views = container.admin_service.list_listings(container.clock.now(), limit)
    return {"listings": [serialize_view(view) for view in views]}


@router.get("/summary", dependencies=[Depends(require_admin)])
def summary(request: Request) -> dict[str, int]:
    """Return per-status counts across every listing."""
    container: AppContainer = request.app.state.container
    return serialize_summary(container.admin_service.summary(container.clock.now()))
