"""Derive persisted call records from end-of-call reports."""
from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from uuid import uuid4

from ..models.call import Call
from ..schemas.webhooks import CallEvent, TranscriptTurn

DEFAULT_END_REASON = "completed"
# Upper bound of the 32-bit integer columns duration_seconds and cost_cents.
INT32_MAX = 2**31 - 1

_LEADING_NUMBER = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, unlike ``round``."""

    return int(math.floor(value + 0.5))


def transcript_text(transcript: str | Sequence[TranscriptTurn] | None) -> str | None:
    """Flatten a transcript into ``role: text`` lines."""

    if isinstance(transcript, str):
        return transcript or None
    if not transcript:
        return None
    return "\n".join(f"{turn.role or ''}: {turn.content or ''}" for turn in transcript)


def _clamp_int32(value: float) -> float:
    return max(-INT32_MAX - 1, min(INT32_MAX, value))


def cost_in_cents(cost: float | None) -> int:
    if not cost:
        return 0
    return round_half_up(_clamp_int32(cost * 100))


def parse_success_score(value: object) -> float | None:
    """Map a 0-10 evaluation (number or numeric-prefixed string) onto [0, 1]."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match is None:
            return None
        number = float(match.group(0))
    else:
        return None

    score = number / 10
    if math.isnan(score) or not 0 <= score <= 1:
        return None
    return score


def call_duration_seconds(duration: float | None, started_at: datetime, ended_at: datetime) -> int:
    if duration:
        seconds = duration
    else:
        seconds = (ended_at - started_at).total_seconds()
    return max(0, round_half_up(_clamp_int32(seconds)))


def call_metadata(event: CallEvent) -> dict:
    model = event.assistant.model if event.assistant else None
    voice = event.assistant.voice if event.assistant else None
    return {
        "costBreakdown": event.cost_breakdown,
        "model": model.get("model") if model else None,
        "voice": voice.get("voiceId") if voice else None,
        "phoneNumberId": event.phone_number_id,
    }


def build_call_record(
    event: CallEvent,
    *,
    org_id: str,
    assistant_id: str,
    caller_number: str | None,
    caller_name: str | None,
    now: datetime | None = None,
) -> Call:
    """Return an unsaved ``Call`` for the report with all derived fields filled."""

    current = now or datetime.now(timezone.utc)
    started_at = event.started_at or event.created_at or current
    ended_at = event.ended_at or current
    analysis = event.analysis

    return Call(
        id=str(uuid4()),
        org_id=org_id,
        assistant_id=assistant_id,
        vapi_call_id=event.platform_call_id,
        caller_number=caller_number,
        caller_name=caller_name,
        started_at=started_at,
        ended_at=ended_at,
        duration_seconds=call_duration_seconds(event.duration, started_at, ended_at),
        cost_cents=cost_in_cents(event.cost),
        end_reason=event.ended_reason or DEFAULT_END_REASON,
        transcript=transcript_text(event.transcript),
        summary=event.summary_text,
        success_score=parse_success_score(analysis.success_evaluation) if analysis else None,
        metadata_json=call_metadata(event),
    )
