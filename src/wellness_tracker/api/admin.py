"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from wellness_tracker.containers import AppContainer

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


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(request: Request) -> dict[str, object]:
    """Return profiles with their recent meal counts."""
    container: AppContainer = request.app.state.container
    return {"users": container.admin_service.list_users()}


@router.get("/users/{user_id}", dependencies=[Depends(require_admin)])
async def user_detail(user_id: UUID, request: Request) -> dict[str, object]:
    """Return profile, meal statistics, adherence and exam insights."""
    container: AppContainer = request.app.state.container
    return container.admin_service.get_user_detail(user_id)


@router.get("/references/preview", dependencies=[Depends(require_admin)])
async def reference_preview(
    request: Request, analysis_type: str = "FOOD"
) -> dict[str, object]:
    """Show the reference block that analysis prompts currently receive."""
    container: AppContainer = request.app.state.container
    return container.admin_service.preview_references(analysis_type.upper())
