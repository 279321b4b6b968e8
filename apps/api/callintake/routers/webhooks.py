"""Voice-platform webhook endpoints."""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..db.session import get_session
from ..schemas import webhooks as schemas
from ..services import ingestion as ingestion_service
from ..services import tool_calls as tool_calls_service
from ..services.errors import RequestRejected
from ..services.notifications import SmsSender, get_sms_sender

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_message(request: Request) -> dict[str, Any] | None:
    """Return the ``message`` object of the JSON envelope, if there is one."""

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    return message if isinstance(message, dict) else None


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


@router.post("/vapi", response_model=schemas.WebhookAck, response_model_exclude_none=True)
async def receive_call_event(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> schemas.WebhookAck | JSONResponse:
    """Ingest an end-of-call report; other event types are acknowledged and ignored."""

    try:
        message = await _read_message(request)
        result = await ingestion_service.ingest_call_event(message, session)
    except RequestRejected as exc:
        return _error(exc.status_code, exc.error)
    except Exception:  # noqa: BLE001 - the platform only sees a coarse failure
        logger.exception("Webhook processing failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error")

    return schemas.WebhookAck(received=True, processed=result.processed, call_id=result.call_id)


@router.get("/vapi", response_model=schemas.WebhookProbe)
async def validate_webhook() -> schemas.WebhookProbe:
    """Static acknowledgment for the platform's URL validation probe."""

    return schemas.WebhookProbe(status="ok", service=settings.webhook_service_name)


@router.post("/vapi/tools", response_model=schemas.ToolCallResponse)
async def invoke_tool(
    request: Request,
    sender: SmsSender = Depends(get_sms_sender),
) -> schemas.ToolCallResponse | JSONResponse:
    """Run a server-side tool the assistant called mid-conversation."""

    try:
        message = await _read_message(request)
        return await tool_calls_service.handle_tool_call(message, sender)
    except RequestRejected as exc:
        return _error(exc.status_code, exc.error)
    except Exception as exc:  # noqa: BLE001 - report the failure back to the platform
        logger.exception("Tool execution failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Tool execution failed")
