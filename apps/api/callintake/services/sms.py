"""Manual SMS sends from the dashboard."""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import sms_log as sms_log_repo
from ..schemas import sms as schemas
from .errors import RequestRejected
from .notifications import SmsResult, SmsSender, build_follow_up_sms
from .phone import normalize_phone

logger = logging.getLogger(__name__)

MESSAGE_TYPE_FOLLOW_UP = "follow_up"
MESSAGE_TYPE_CUSTOM = "custom"


def _message_body(payload: schemas.SmsSendRequest) -> str:
    if payload.type == MESSAGE_TYPE_FOLLOW_UP:
        return build_follow_up_sms(payload.caller_name)
    if payload.type == MESSAGE_TYPE_CUSTOM and payload.custom_message:
        return payload.custom_message
    raise RequestRejected(400, "Invalid type or missing message")


async def send_sms(
    payload: schemas.SmsSendRequest,
    session: AsyncSession,
    sender: SmsSender,
) -> schemas.SmsSendResponse:
    """Send a follow-up or custom text and record it in the SMS log."""

    phone = normalize_phone(payload.to)
    if phone is None:
        raise RequestRejected(400, "Missing 'to' phone number")

    body = _message_body(payload)
    result = await sender.send(phone, body)
    await _record_send(session, payload, sender, result, body)

    return schemas.SmsSendResponse(success=True, sid=result.sid, status=result.status)


async def _record_send(
    session: AsyncSession,
    payload: schemas.SmsSendRequest,
    sender: SmsSender,
    result: SmsResult,
    body: str,
) -> None:
    """Best-effort: the message is already sent, so logging failures are swallowed."""

    try:
        await sms_log_repo.record_sms(
            session,
            org_id=payload.org_id or None,
            to_phone=result.to,
            from_phone=sender.from_number or None,
            message_type=payload.type or MESSAGE_TYPE_CUSTOM,
            message_body=body,
            provider_sid=result.sid,
            status=result.status,
        )
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Failed to record SMS log entry for %s", result.to)
