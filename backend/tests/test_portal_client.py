"""Tests for portal session verification."""

import httpx
import pytest

from app.services.portal_client import InvalidSessionError, PortalClient, PortalUnavailableError

from conftest import PORTAL_URL, VALID_TOKEN


@pytest.mark.asyncio
async def test_valid_token_returns_session(portal: PortalClient):
    session = await portal.verify(VALID_TOKEN)
    assert session == {"userId": "u-1", "username": "ana"}


@pytest.mark.asyncio
async def test_invalid_flag_raises_with_portal_message(portal: PortalClient):
    with pytest.raises(InvalidSessionError, match="Session expired"):
        await portal.verify("expired-token")


@pytest.mark.asyncio
async def test_http_error_status_raises_invalid_session(portal: PortalClient):
    with pytest.raises(InvalidSessionError):
        await portal.verify("forged")


@pytest.mark.asyncio
async def test_posts_token_to_verify_endpoint():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"valid": True})

    portal = PortalClient(base_url=PORTAL_URL + "/", transport=httpx.MockTransport(handler))
    assert await portal.verify("tok") == {}

    assert str(seen[0].url) == f"{PORTAL_URL}/api/verify-session"
    assert seen[0].method == "POST"
    assert b'"sessionToken"' in seen[0].content


@pytest.mark.asyncio
async def test_network_failure_raises_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    portal = PortalClient(base_url=PORTAL_URL, transport=httpx.MockTransport(handler))
    with pytest.raises(PortalUnavailableError):
        await portal.verify("tok")


@pytest.mark.asyncio
async def test_non_json_reply_raises_unavailable():
    portal = PortalClient(
        base_url=PORTAL_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
    )
    with pytest.raises(PortalUnavailableError):
        await portal.verify("tok")
