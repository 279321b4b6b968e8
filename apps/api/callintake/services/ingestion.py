"""End-of-call report ingestion.

Steps run strictly in order within one request: resolve the tenant from the
assistant, resolve the caller identity, persist the call, update the lead
ledger, then backfill earlier calls. Only the tenant lookup and the call insert
can fail the request; the ledger and backfill steps are best-effort.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import assistants as assistants_repo
from ..repositories import calls as calls_repo
from ..repositories import leads as leads_repo
from ..schemas.webhooks import END_OF_CALL_REPORT, CallEvent
from . import ledger
from .call_records import build_call_record
from .errors import RequestRejected
from .identity import resolve_identity
from .phone import normalize_phone

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestionResult:
    processed: bool
    call_id: str | None = None
    caller_name: str | None = None
    duplicate: bool = False


async def ingest_call_event(message: dict[str, Any] | None, session: AsyncSession) -> IngestionResult:
    """Persist an end-of-call report and enrich the organization's lead data."""

    if not isinstance(message, dict) or message.get("type") != END_OF_CALL_REPORT:
        return IngestionResult(processed=False)

    event = CallEvent.model_validate(message)

    platform_assistant_id = event.platform_assistant_id
    assistant = await assistants_repo.get_by_vapi_id(session, platform_assistant_id)
    if assistant is None:
        logger.error("No assistant found for platform assistant id %s", platform_assistant_id)
        raise RequestRejected(404, "Unknown assistant")
    org_id = assistant.org_id
    assistant_id = assistant.id

    platform_call_id = event.platform_call_id
    if platform_call_id:
        existing = await calls_repo.get_by_vapi_call_id(session, org_id=org_id, vapi_call_id=platform_call_id)
        if existing is not None:
            logger.info("Call %s already stored as %s; skipping redelivery", platform_call_id, existing.id)
            return IngestionResult(
                processed=True, call_id=existing.id, caller_name=existing.caller_name, duplicate=True
            )

    caller_number = normalize_phone(event.customer.number if event.customer else None)
    lead = None
    if caller_number:
        lead = await leads_repo.get_by_phone(session, org_id=org_id, phone=caller_number)
    identity = resolve_identity(event, lead)

    call = build_call_record(
        event,
        org_id=org_id,
        assistant_id=assistant_id,
        caller_number=caller_number,
        caller_name=identity.caller_name,
    )
    try:
        await calls_repo.add_call(session, call)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to insert call for org %s", org_id)
        raise RequestRejected(500, "Insert failed") from exc

    # Later rollbacks expire session state, so keep plain values.
    call_id = call.id
    notes = ledger.default_lead_notes(event.summary_text, call.started_at)

    await ledger.update_lead(
        session,
        org_id=org_id,
        phone=caller_number,
        caller_name=identity.caller_name,
        lead=lead,
        notes=notes,
    )
    await ledger.backfill_caller_name(
        session,
        org_id=org_id,
        phone=caller_number,
        caller_name=identity.caller_name,
    )

    logger.info(
        "Stored call %s for org %s (caller=%s, known lead=%s)",
        call_id,
        org_id,
        caller_number,
        identity.lead_found,
    )
    return IngestionResult(processed=True, call_id=call_id, caller_name=identity.caller_name)
