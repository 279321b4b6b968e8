"""Async engine and per-request sessions."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import settings


def _connect_args(url: str) -> dict[str, object]:
    # Hosted Postgres providers require TLS; the flag only applies to asyncpg.
    if settings.database_ssl_required and url.startswith("postgresql+asyncpg://"):
        return {"ssl": "require"}
    return {}


engine = create_async_engine(
    settings.database_async_url,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_async_url),
)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for one request, rolling back whatever a failed handler left open."""

    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    await engine.dispose()
