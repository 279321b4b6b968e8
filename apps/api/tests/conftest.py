"""Shared fixtures backed by an in-memory SQLite database."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from callintake.db.session import get_session
from callintake.main import app
from callintake.models import Assistant, Organization
from callintake.models.base import Base

ORG_ID = "org-1"
ASSISTANT_ID = "assistant-1"
VAPI_ASSISTANT_ID = "vapi-assistant-1"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()


@pytest_asyncio.fixture
async def tenant(session_factory) -> SimpleNamespace:
    async with session_factory() as session:
        session.add(Organization(id=ORG_ID, name="Acme Plumbing", slug="acme"))
        session.add(
            Assistant(
                id=ASSISTANT_ID,
                org_id=ORG_ID,
                vapi_assistant_id=VAPI_ASSISTANT_ID,
                name="Front Desk",
                config={},
            )
        )
        await session.commit()
    return SimpleNamespace(org_id=ORG_ID, assistant_id=ASSISTANT_ID, vapi_assistant_id=VAPI_ASSISTANT_ID)


@pytest_asyncio.fixture
async def session(session_factory, tenant) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as db_session:
        yield db_session


@pytest_asyncio.fixture
async def client(session_factory, tenant) -> AsyncGenerator[AsyncClient, None]:
    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
    app.dependency_overrides.pop(get_session, None)


def end_of_call_report(
    *,
    phone: str | None = "+15551234567",
    call_id: str | None = None,
    assistant_id: str = VAPI_ASSISTANT_ID,
    **extra,
) -> dict:
    """Build a minimal end-of-call report message."""

    message: dict = {
        "type": "end-of-call-report",
        "assistant": {"id": assistant_id},
        "startedAt": "2025-03-04T15:00:00Z",
        "endedAt": "2025-03-04T15:02:30Z",
    }
    if phone is not None:
        message["customer"] = {"number": phone}
    if call_id is not None:
        message["callId"] = call_id
    message.update(extra)
    return message
