"""Server-side tools the voice assistant can invoke mid-call."""
from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..schemas.webhooks import ToolCallResponse, ToolCallResult
from .errors import RequestRejected
from .notifications import SmsSender, build_default_tool_sms
from .phone import normalize_phone

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any], SmsSender], Awaitable[str]]


def _first_tool_call(message: dict[str, Any]) -> dict[str, Any] | None:
    tool_calls = message.get("toolCalls")
    if isinstance(tool_calls, list) and tool_calls and isinstance(tool_calls[0], dict):
        return tool_calls[0]
    tool_call = message.get("toolCall")
    return tool_call if isinstance(tool_call, dict) else None


def _parse_arguments(tool_call: dict[str, Any]) -> dict[str, Any]:
    """Arguments arrive either as a JSON string or an object."""

    function = tool_call.get("function")
    raw = function.get("arguments") if isinstance(function, dict) else None
    if raw is None:
        raw = tool_call.get("arguments")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw.strip() else {}
        except ValueError as exc:
            raise RequestRejected(400, "Invalid tool arguments") from exc
    return raw if isinstance(raw, dict) else {}


def _tool_call_id(tool_call: dict[str, Any]) -> str | None:
    value = tool_call.get("id")
    return str(value) if value is not None else None


def _function_name(tool_call: dict[str, Any]) -> str | None:
    function = tool_call.get("function")
    name = function.get("name") if isinstance(function, dict) else None
    if not name:
        name = tool_call.get("name")
    return name if isinstance(name, str) else None


async def send_follow_up_text(arguments: dict[str, Any], sender: SmsSender) -> str:
    phone_number = arguments.get("phone_number")
    phone = normalize_phone(phone_number) if isinstance(phone_number, str) else None
    if phone is None:
        return "I need the caller's phone number to send a text."

    custom = arguments.get("message")
    body = custom if isinstance(custom, str) and custom.strip() else build_default_tool_sms()
    await sender.send(phone, body)
    return f"I've sent a follow-up text to {phone}."


TOOL_HANDLERS: dict[str, ToolHandler] = {
    "send_follow_up_text": send_follow_up_text,
}


async def handle_tool_call(message: dict[str, Any] | None, sender: SmsSender) -> ToolCallResponse:
    """Dispatch the first tool call in the message and wrap its spoken result."""

    if not isinstance(message, dict) or not message:
        raise RequestRejected(400, "No message")

    tool_call = _first_tool_call(message)
    if tool_call is None:
        raise RequestRejected(400, "No tool call found")

    name = _function_name(tool_call)
    arguments = _parse_arguments(tool_call)

    handler = TOOL_HANDLERS.get(name or "")
    if handler is None:
        logger.warning("Assistant requested unknown tool %s", name)
        result = f"Unknown function: {name}"
    else:
        result = await handler(arguments, sender)

    return ToolCallResponse(results=[ToolCallResult(tool_call_id=_tool_call_id(tool_call), result=result)])
