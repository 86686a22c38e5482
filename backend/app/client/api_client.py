"""HTTP collaborator for the registry API.

Every call is a single awaited request carrying the portal session token.
There is no retry: a failed call raises and the caller decides what to show.
"""

import logging
from typing import Any

import httpx

from app.client.errors import AuthenticationError, RecordNotFoundError, RemoteError
from app.config import settings

logger = logging.getLogger(__name__)

RECORDS_PATH = "/documentos"
STATS_PATH = "/stats"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    errors = body.get("errors") if isinstance(body, dict) else None
    if errors:
        return str(errors[0].get("message", ""))
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return f"HTTP {response.status_code}"


class DocumentsClient:
    """Async client for ``/api/documentos`` and ``/api/stats``."""

    def __init__(
        self,
        session_token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.session_token = session_token
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "X-Session-Token": self.session_token,
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        record_id: str | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, url, headers=self._headers(), json=json, params=params
                )
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise RemoteError(f"Request failed: {e}") from e

        if response.status_code == 401:
            raise AuthenticationError(_error_message(response))
        if response.status_code == 404 and record_id is not None:
            raise RecordNotFoundError(record_id)
        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("%s %s returned %s: %s", method, url, response.status_code, message)
            raise RemoteError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError("Malformed response body", status_code=response.status_code) from e
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    # -- records -----------------------------------------------------------

    async def list(self) -> list[dict[str, Any]]:
        data = await self._request("GET", RECORDS_PATH)
        if not isinstance(data, list):
            raise RemoteError("Expected a list of records")
        return data

    async def get(self, record_id: str) -> dict[str, Any]:
        return await self._request("GET", f"{RECORDS_PATH}/{record_id}", record_id=record_id)

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", RECORDS_PATH, json=fields)

    async def update(self, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "PUT", f"{RECORDS_PATH}/{record_id}", record_id=record_id, json=fields
        )

    async def update_status(self, record_id: str, status: str) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"{RECORDS_PATH}/{record_id}", record_id=record_id, json={"status": status}
        )

    async def delete(self, record_id: str) -> bool:
        await self._request("DELETE", f"{RECORDS_PATH}/{record_id}", record_id=record_id)
        return True

    # -- dashboard ---------------------------------------------------------

    async def stats(self, month: int | None = None, year: int | None = None) -> dict[str, Any]:
        params = {"month": month, "year": year} if month is not None and year is not None else None
        return await self._request("GET", STATS_PATH, params=params)
