"""Tests for the mid-call tool dispatcher."""
from __future__ import annotations

import json

import pytest

from callintake.services import tool_calls
from callintake.services.errors import RequestRejected
from callintake.services.notifications import SmsResult


class FakeSender:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.from_number = "+15550009999"

    async def send(self, to: str, body: str) -> SmsResult:
        self.sent.append((to, body))
        return SmsResult(sid="SM123", status="queued", to=to)


def _tool_message(name: str, arguments, *, call_id: str = "tc_1") -> dict:
    return {
        "type": "tool-calls",
        "toolCalls": [{"id": call_id, "function": {"name": name, "arguments": arguments}}],
    }


@pytest.mark.asyncio
async def test_follow_up_text_with_string_arguments() -> None:
    sender = FakeSender()
    message = _tool_message(
        "send_follow_up_text",
        json.dumps({"phone_number": "5551234567", "message": "See you Tuesday!"}),
    )

    response = await tool_calls.handle_tool_call(message, sender)

    assert sender.sent == [("+15551234567", "See you Tuesday!")]
    assert response.results[0].tool_call_id == "tc_1"
    assert response.results[0].result == "I've sent a follow-up text to +15551234567."


@pytest.mark.asyncio
async def test_follow_up_text_defaults_message() -> None:
    sender = FakeSender()
    message = _tool_message("send_follow_up_text", {"phone_number": "+15551234567"})

    await tool_calls.handle_tool_call(message, sender)

    assert sender.sent[0][1].startswith("Thanks for calling")


@pytest.mark.asyncio
async def test_follow_up_text_without_phone_does_not_send() -> None:
    sender = FakeSender()

    response = await tool_calls.handle_tool_call(_tool_message("send_follow_up_text", {}), sender)

    assert sender.sent == []
    assert "phone number" in response.results[0].result


@pytest.mark.asyncio
async def test_single_tool_call_shape_is_accepted() -> None:
    sender = FakeSender()
    message = {
        "toolCall": {"id": "tc_9", "name": "send_follow_up_text", "arguments": {"phone_number": "+15551234567"}}
    }

    response = await tool_calls.handle_tool_call(message, sender)

    assert response.results[0].tool_call_id == "tc_9"
    assert len(sender.sent) == 1


@pytest.mark.asyncio
async def test_unknown_function_is_reported_not_raised() -> None:
    sender = FakeSender()

    response = await tool_calls.handle_tool_call(_tool_message("send_payment_link", {}), sender)

    assert response.results[0].result == "Unknown function: send_payment_link"
    assert sender.sent == []


@pytest.mark.asyncio
async def test_invalid_argument_json_rejected() -> None:
    with pytest.raises(RequestRejected) as exc:
        await tool_calls.handle_tool_call(_tool_message("send_follow_up_text", "{oops"), FakeSender())

    assert exc.value.status_code == 400
    assert exc.value.error == "Invalid tool arguments"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("message", "error"),
    [
        (None, "No message"),
        ({}, "No message"),
        ({"type": "tool-calls", "toolCalls": []}, "No tool call found"),
    ],
)
async def test_missing_tool_call_rejected(message, error) -> None:
    with pytest.raises(RequestRejected) as exc:
        await tool_calls.handle_tool_call(message, FakeSender())

    assert exc.value.status_code == 400
    assert exc.value.error == error
