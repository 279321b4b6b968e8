"""SMS log persistence."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.sms_log import SmsLog


async def record_sms(
    session: AsyncSession,
    *,
    org_id: str | None,
    to_phone: str,
    from_phone: str | None,
    message_type: str,
    message_body: str,
    provider_sid: str | None,
    status: str | None,
) -> SmsLog:
    entry = SmsLog(
        id=str(uuid4()),
        org_id=org_id,
        to_phone=to_phone,
        from_phone=from_phone,
        message_type=message_type,
        message_body=message_body,
        provider_sid=provider_sid,
        status=status,
    )
    session.add(entry)
    await session.flush()
    return entry
