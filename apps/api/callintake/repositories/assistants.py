"""Assistant directory lookups."""
from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.assistant import Assistant


async def get_by_vapi_id(session: AsyncSession, vapi_assistant_id: str | None) -> Assistant | None:
    """Return the assistant registered for a voice-platform assistant id."""

    if not vapi_assistant_id:
        return None
    stmt: Select[tuple[Assistant]] = select(Assistant).where(Assistant.vapi_assistant_id == vapi_assistant_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()
