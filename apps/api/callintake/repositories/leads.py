"""Lead repository helpers."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utcnow
from ..models.lead import Lead

LEAD_SOURCE_CALL = "call"


async def get_by_phone(session: AsyncSession, *, org_id: str, phone: str) -> Lead | None:
    """Return the organization's lead for a normalized phone number."""

    stmt: Select[tuple[Lead]] = (
        select(Lead)
        .where(Lead.org_id == org_id, Lead.phone == phone)
        .order_by(Lead.created_at.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_lead(
    session: AsyncSession,
    *,
    org_id: str,
    phone: str,
    name: str | None,
    notes: str | None,
    source: str = LEAD_SOURCE_CALL,
) -> Lead:
    """Persist a new lead and flush so constraint violations surface here."""

    lead = Lead(
        id=str(uuid4()),
        org_id=org_id,
        phone=phone,
        name=name or None,
        source=source,
        notes=notes,
        created_at=utcnow(),
    )
    session.add(lead)
    await session.flush()
    return lead


async def list_for_org(session: AsyncSession, *, org_id: str, limit: int) -> list[Lead]:
    """Return the newest leads for an organization."""

    stmt = (
        select(Lead)
        .where(Lead.org_id == org_id)
        .order_by(Lead.created_at.desc(), Lead.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
