"""Malformed report fields degrade to missing values instead of failing."""
from __future__ import annotations

from datetime import timezone

from callintake.schemas.webhooks import CallEvent, WebhookAck


def test_wrongly_typed_fields_become_none() -> None:
    event = CallEvent.model_validate(
        {
            "type": "end-of-call-report",
            "customer": "not-an-object",
            "duration": "abc",
            "cost": True,
            "startedAt": "yesterday",
            "endedReason": {"code": 1},
            "analysis": ["nope"],
            "transcript": 42,
        }
    )

    assert event.customer is None
    assert event.duration is None
    assert event.cost is None
    assert event.started_at is None
    assert event.ended_reason is None
    assert event.analysis is None
    assert event.transcript is None


def test_transcript_keeps_object_turns_only() -> None:
    event = CallEvent.model_validate(
        {"transcript": [{"role": "user", "text": "hello"}, "garbage", {"role": 7, "message": None}]}
    )

    assert len(event.transcript) == 2
    assert event.transcript[0].content == "hello"
    assert event.transcript[1].role == "7"
    assert event.transcript[1].content is None


def test_timestamps_are_timezone_aware() -> None:
    event = CallEvent.model_validate({"startedAt": "2025-03-04T15:00:00Z", "endedAt": "2025-03-04T15:02:30"})

    assert event.started_at.tzinfo == timezone.utc
    assert event.ended_at.tzinfo == timezone.utc


def test_identifiers_fall_back_to_nested_call() -> None:
    event = CallEvent.model_validate({"call": {"id": "call-9", "assistantId": "asst-9"}})

    assert event.platform_call_id == "call-9"
    assert event.platform_assistant_id == "asst-9"


def test_summary_falls_back_to_analysis() -> None:
    event = CallEvent.model_validate({"analysis": {"summary": "Booked a visit."}})

    assert event.summary_text == "Booked a visit."


def test_ack_serializes_camel_case_call_id() -> None:
    ack = WebhookAck(processed=True, call_id="call-1")

    assert ack.model_dump(by_alias=True) == {"received": True, "processed": True, "callId": "call-1"}
