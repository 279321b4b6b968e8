"""Call repository helpers."""
from __future__ import annotations

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.call import Call


async def get_by_id(session: AsyncSession, call_id: str) -> Call | None:
    """Return a call record by identifier."""

    return await session.get(Call, call_id)


async def get_by_vapi_call_id(session: AsyncSession, *, org_id: str, vapi_call_id: str) -> Call | None:
    """Return a previously stored call for the platform call id, if any."""

    stmt: Select[tuple[Call]] = (
        select(Call)
        .where(Call.org_id == org_id, Call.vapi_call_id == vapi_call_id)
        .order_by(Call.created_at.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def add_call(session: AsyncSession, call: Call) -> Call:
    """Stage a new call record and flush so database errors surface here."""

    session.add(call)
    await session.flush()
    return call


async def fill_missing_caller_name(
    session: AsyncSession,
    *,
    org_id: str,
    caller_number: str,
    caller_name: str,
) -> int:
    """Set caller_name on every call for the number that has none. Returns rows updated."""

    stmt = (
        update(Call)
        .where(
            Call.org_id == org_id,
            Call.caller_number == caller_number,
            Call.caller_name.is_(None),
        )
        .values(caller_name=caller_name)
    )
    result = await session.execute(stmt)
    return result.rowcount or 0


async def list_for_org(
    session: AsyncSession,
    *,
    org_id: str,
    limit: int,
    caller_number: str | None = None,
) -> list[Call]:
    """Return the newest calls for an organization."""

    stmt = select(Call).where(Call.org_id == org_id)
    if caller_number:
        stmt = stmt.where(Call.caller_number == caller_number)
    stmt = stmt.order_by(Call.started_at.desc(), Call.id.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())
