"""Read-side queries for an organization's calls and leads."""
from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.call import Call
from ..models.lead import Lead
from ..repositories import calls as calls_repo
from ..repositories import leads as leads_repo
from ..schemas import admin as schemas
from .phone import normalize_phone


def _call_summary_fields(call: Call) -> dict:
    return {
        "call_id": call.id,
        "caller_number": call.caller_number,
        "caller_name": call.caller_name,
        "started_at": call.started_at,
        "duration_seconds": call.duration_seconds,
        "cost_cents": call.cost_cents,
        "end_reason": call.end_reason,
        "success_score": call.success_score,
    }


def _lead_summary(lead: Lead) -> schemas.LeadSummary:
    return schemas.LeadSummary(
        lead_id=lead.id,
        phone=lead.phone,
        name=lead.name,
        email=lead.email,
        score=lead.score,
        source=lead.source,
        notes=lead.notes,
        created_at=lead.created_at,
    )


async def list_calls(
    session: AsyncSession,
    *,
    org_id: str,
    limit: int,
    caller_number: str | None = None,
) -> schemas.CallListResponse:
    """Return the organization's newest calls, optionally for one caller.

    A caller filter that is not a usable phone number matches nothing.
    """

    phone = normalize_phone(caller_number)
    if caller_number and phone is None:
        return schemas.CallListResponse(items=[])

    calls = await calls_repo.list_for_org(session, org_id=org_id, limit=limit, caller_number=phone)
    return schemas.CallListResponse(items=[schemas.CallSummary(**_call_summary_fields(call)) for call in calls])


async def get_call(session: AsyncSession, *, org_id: str, call_id: str) -> schemas.CallDetailResponse:
    call = await calls_repo.get_by_id(session, call_id)
    if call is None or call.org_id != org_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Call not found")

    return schemas.CallDetailResponse(
        call=schemas.CallDetail(
            **_call_summary_fields(call),
            assistant_id=call.assistant_id,
            vapi_call_id=call.vapi_call_id,
            ended_at=call.ended_at,
            transcript=call.transcript,
            summary=call.summary,
            metadata=dict(call.metadata_json or {}),
        )
    )


async def list_leads(session: AsyncSession, *, org_id: str, limit: int) -> schemas.LeadListResponse:
    leads = await leads_repo.list_for_org(session, org_id=org_id, limit=limit)
    return schemas.LeadListResponse(items=[_lead_summary(lead) for lead in leads])
