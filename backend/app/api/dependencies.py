"""API dependencies: database sessions and portal session authentication."""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.database import get_session
from app.services.portal_client import InvalidSessionError, PortalClient, PortalUnavailableError

DEV_SESSION: dict[str, Any] = {"userId": "dev", "username": "dev-mode"}

# ---------------------------------------------------------------------------
# Database dependency
# ---------------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db)]

# ---------------------------------------------------------------------------
# Portal session
# ---------------------------------------------------------------------------


def get_portal_client() -> PortalClient:
    """Portal client dependency (overridden in tests)."""
    return PortalClient()


async def get_current_session(
    portal: Annotated[PortalClient, Depends(get_portal_client)],
    x_session_token: Annotated[str | None, Header()] = None,
) -> dict[str, Any]:
    """Validate the ``X-Session-Token`` header against the portal.

    Returns the portal's session payload. When ``AUTH_DISABLED`` is set a
    fixed development session is returned instead.
    """
    if settings.auth_disabled:
        return DEV_SESSION
    if not x_session_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session token not found",
        )
    try:
        return await portal.verify(x_session_token)
    except InvalidSessionError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
    except PortalUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not verify session",
        ) from exc


CurrentSession = Annotated[dict[str, Any], Depends(get_current_session)]
