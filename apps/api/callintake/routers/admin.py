"""Admin endpoints for an organization's call and lead history."""
from __future__ import annotations

import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..db.session import get_session
from ..schemas import admin as admin_schema
from ..services import history as history_service


async def require_admin_token(x_admin_token: str | None = Header(default=None)) -> None:
    """Reject requests without the configured admin token; no token configured means no access."""

    expected = settings.admin_api_token
    if not expected or not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


router = APIRouter(dependencies=[Depends(require_admin_token)])


@router.get("/orgs/{org_id}/calls", response_model=admin_schema.CallListResponse)
async def list_calls(
    org_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    caller_number: str | None = None,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.CallListResponse:
    """Return the newest calls for the organization."""

    return await history_service.list_calls(session, org_id=org_id, limit=limit, caller_number=caller_number)


@router.get("/orgs/{org_id}/calls/{call_id}", response_model=admin_schema.CallDetailResponse)
async def get_call(
    org_id: str,
    call_id: str,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.CallDetailResponse:
    """Return a call with its transcript and metadata."""

    return await history_service.get_call(session, org_id=org_id, call_id=call_id)


@router.get("/orgs/{org_id}/leads", response_model=admin_schema.LeadListResponse)
async def list_leads(
    org_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
) -> admin_schema.LeadListResponse:
    """Return the newest leads for the organization."""

    return await history_service.list_leads(session, org_id=org_id, limit=limit)
