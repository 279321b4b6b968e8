"""Lead ledger upkeep and caller-name backfill.

Both steps run after the call record is committed and are best-effort: any error
is logged and rolled back, never raised, so enrichment cannot fail a request whose
call is already stored.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.lead import Lead
from ..repositories import calls as calls_repo
from ..repositories import leads as leads_repo

logger = logging.getLogger(__name__)


def default_lead_notes(summary: str | None, called_at: datetime) -> str:
    """Use the call summary, else a dated placeholder."""

    if summary:
        return summary
    return f"Called on {called_at.month}/{called_at.day}/{called_at.year}"


async def update_lead(
    session: AsyncSession,
    *,
    org_id: str,
    phone: str | None,
    caller_name: str | None,
    lead: Lead | None,
    notes: str,
) -> Lead | None:
    """Create the lead on first contact, otherwise fill its name if still empty.

    A name already on file is never replaced.
    """

    if not phone:
        return None

    try:
        if lead is None:
            try:
                lead = await leads_repo.create_lead(
                    session, org_id=org_id, phone=phone, name=caller_name, notes=notes
                )
                await session.commit()
                return lead
            except IntegrityError:
                # Another request inserted the lead first; fall through to the update path.
                await session.rollback()
                logger.warning("Lead for %s in org %s already exists, updating instead", phone, org_id)
                lead = await leads_repo.get_by_phone(session, org_id=org_id, phone=phone)
                if lead is None:
                    return None

        if caller_name and not lead.name:
            lead.name = caller_name
            session.add(lead)
            await session.commit()
        return lead
    except Exception:  # noqa: BLE001 - the call is already stored; never fail the request here
        await session.rollback()
        logger.exception("Failed to update lead for %s in org %s", phone, org_id)
        return None


async def backfill_caller_name(
    session: AsyncSession,
    *,
    org_id: str,
    phone: str | None,
    caller_name: str | None,
) -> int:
    """Copy a newly resolved name onto earlier calls from the same number that lack one."""

    if not phone or not caller_name:
        return 0

    try:
        updated = await calls_repo.fill_missing_caller_name(
            session, org_id=org_id, caller_number=phone, caller_name=caller_name
        )
        await session.commit()
    except Exception:  # noqa: BLE001 - the call is already stored; never fail the request here
        await session.rollback()
        logger.exception("Failed to backfill caller name for %s in org %s", phone, org_id)
        return 0

    if updated:
        logger.info("Backfilled caller name on %d earlier calls for %s", updated, phone)
    return updated
