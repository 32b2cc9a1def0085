"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

if TYPE_CHECKING:
    from portrait_booth.containers import AppContainer

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


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(
    request: Request, limit: int = Query(default=20, ge=1, le=200)
) -> dict[str, object]:
    """Return recent composition sessions."""
    container: AppContainer = request.app.state.container
    return {"sessions": container.session_service.list_recent(limit)}


@router.get("/layouts/{layout_id}", dependencies=[Depends(require_admin)])
async def layout_detail(layout_id: str, request: Request) -> dict[str, object]:
    """Return frame size and effective placement policy of a layout."""
    container: AppContainer = request.app.state.container
    layout = container.layout_service.get_layout(layout_id)
    policy = container.composition_service.resolve_policy(layout)
    return {
        "layout_id": layout.layout_id,
        "width": layout.frame.width,
        "height": layout.frame.height,
        "version": layout.version,
        "policy": policy.model_dump(mode="json"),
    }
