"""Portal session verification.

Session tokens are issued by the company portal; this service only asks the
portal whether a token is still valid. Used by the API auth dependency and by
the client session on start-up.
"""

import logging
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

VERIFY_PATH = "/api/verify-session"


class PortalError(Exception):
    """Base error for portal verification."""

    pass


class InvalidSessionError(PortalError):
    """The portal rejected the token or reported the session as expired."""

    pass


class PortalUnavailableError(PortalError):
    """The portal could not be reached or returned garbage."""

    pass


class PortalClient:
    """Thin async client for the portal's session verification endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.portal_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.portal_timeout_seconds
        self._transport = transport

    async def verify(self, session_token: str) -> dict[str, Any]:
        """Return the portal's session payload for a valid token.

        Raises:
            InvalidSessionError: token rejected or session expired
            PortalUnavailableError: network failure or malformed reply
        """
        url = f"{self.base_url}{VERIFY_PATH}"
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                transport=self._transport,
            ) as client:
                response = await client.post(url, json={"sessionToken": session_token})
        except httpx.HTTPError as e:
            logger.error("Portal verification request failed: %s", e)
            raise PortalUnavailableError("Could not reach the portal") from e

        if response.status_code >= 400:
            logger.info("Portal rejected session token (HTTP %s)", response.status_code)
            raise InvalidSessionError("Your session has expired")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Portal returned a non-JSON verification reply")
            raise PortalUnavailableError("Malformed portal reply") from e

        if not isinstance(data, dict):
            raise PortalUnavailableError("Malformed portal reply")
        if not data.get("valid"):
            raise InvalidSessionError(data.get("message") or "Your session has expired")

        session = data.get("session")
        return session if isinstance(session, dict) else {}
