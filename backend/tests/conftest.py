"""Shared test fixtures for the document registry tests."""

import os

# Point the application engine at SQLite before app.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_DISABLED", "false")

from typing import Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from app.db.models import Base  # noqa: E402
from app.services.portal_client import PortalClient  # noqa: E402

# Use an in-memory SQLite database for tests.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionFactory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

VALID_TOKEN = "valid-token"
PORTAL_URL = "https://portal.test"


@event.listens_for(engine.sync_engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def db() -> AsyncSession:
    """Create tables and yield a fresh async session for each test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ---------------------------------------------------------------------------
# Portal
# ---------------------------------------------------------------------------


def _portal_handler(request: httpx.Request) -> httpx.Response:
    """Fake portal: only ``VALID_TOKEN`` is a live session."""
    import json

    token = json.loads(request.content or b"{}").get("sessionToken")
    if token == VALID_TOKEN:
        return httpx.Response(200, json={"valid": True, "session": {"userId": "u-1", "username": "ana"}})
    if token == "expired-token":
        return httpx.Response(200, json={"valid": False, "message": "Session expired"})
    return httpx.Response(401, json={"valid": False})


@pytest.fixture
def portal() -> PortalClient:
    return PortalClient(base_url=PORTAL_URL, transport=httpx.MockTransport(_portal_handler))


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(db: AsyncSession, portal: PortalClient):
    """ASGI client with the DB session and portal swapped for test doubles."""
    from app.api.dependencies import get_db, get_portal_client
    from app.main import app

    async def _test_db():
        yield db
        await db.flush()

    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_portal_client] = lambda: portal

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-Session-Token": VALID_TOKEN},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Record payloads
# ---------------------------------------------------------------------------


def folder_payload(name: str, parent_id: str | None = None) -> dict[str, Any]:
    return {"kind": "folder", "name": name, "parent_id": parent_id, "owner": "Ana"}


def file_payload(name: str, parent_id: str | None = None, **extra: Any) -> dict[str, Any]:
    payload = {
        "kind": "file",
        "name": name,
        "parent_id": parent_id,
        "size": "1.2 MB",
        "modified_at": "2026-02-10",
        "owner": "Maria",
        "mime_type": "application/pdf",
    }
    payload.update(extra)
    return payload


def document_payload(number: str, **extra: Any) -> dict[str, Any]:
    payload = {
        "kind": "document",
        "document_number": number,
        "document_type": "Invoice",
        "department": "Finance",
        "responsible": "Roberto",
        "issued_on": "2026-02-10",
        "status": "pending",
    }
    payload.update(extra)
    return payload
