"""Manual SMS endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import sms as schemas
from ..services import sms as sms_service
from ..services.errors import RequestRejected
from ..services.notifications import SmsSender, get_sms_sender

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send", response_model=schemas.SmsSendResponse)
async def send_sms(
    payload: schemas.SmsSendRequest,
    session: AsyncSession = Depends(get_session),
    sender: SmsSender = Depends(get_sms_sender),
) -> schemas.SmsSendResponse | JSONResponse:
    """Send a follow-up or custom text to a phone number."""

    try:
        return await sms_service.send_sms(payload, session, sender)
    except RequestRejected as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.error})
    except Exception as exc:  # noqa: BLE001 - provider errors become a 500 body
        logger.exception("SMS send failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Failed to send SMS"},
        )
