"""Schemas for voice-platform webhook payloads.

The platform's end-of-call report is only partially structured and any field may
be missing or carry an unexpected type. Validators here coerce bad values to
``None`` so downstream derivations can apply their fallbacks instead of failing
the request.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

END_OF_CALL_REPORT = "end-of-call-report"


def _optional_str(value: object) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _optional_number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _optional_mapping(value: object) -> object:
    return value if isinstance(value, dict) else None


def _optional_datetime(value: object) -> datetime | None:
    parsed: datetime | None = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TranscriptTurn(BaseModel):
    """One conversational turn. ``text`` is accepted as a synonym of ``message``."""

    model_config = ConfigDict(extra="allow")

    role: str | None = None
    message: str | None = None
    text: str | None = None

    _coerce_strings = field_validator("role", "message", "text", mode="before")(_optional_str)

    @property
    def content(self) -> str | None:
        return self.message if self.message is not None else self.text


class Customer(BaseModel):
    model_config = ConfigDict(extra="allow")

    number: str | None = None
    name: str | None = None

    _coerce_strings = field_validator("number", "name", mode="before")(_optional_str)


class AssistantRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    model: dict[str, Any] | None = None
    voice: dict[str, Any] | None = None

    _coerce_id = field_validator("id", mode="before")(_optional_str)
    _coerce_mappings = field_validator("model", "voice", mode="before")(_optional_mapping)


class CallRef(BaseModel):
    """Nested ``call`` object some report versions carry."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    assistant_id: str | None = Field(default=None, alias="assistantId")

    _coerce_strings = field_validator("id", "assistant_id", mode="before")(_optional_str)


class CallAnalysis(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    summary: str | None = None
    success_evaluation: Any = Field(default=None, alias="successEvaluation")
    structured_data: dict[str, Any] | None = Field(default=None, alias="structuredData")

    _coerce_summary = field_validator("summary", mode="before")(_optional_str)
    _coerce_structured = field_validator("structured_data", mode="before")(_optional_mapping)


class CallEvent(BaseModel):
    """End-of-call report as delivered inside the webhook ``message`` envelope."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    id: str | None = None
    call_id: str | None = Field(default=None, alias="callId")
    assistant_id: str | None = Field(default=None, alias="assistantId")
    assistant: AssistantRef | None = None
    call: CallRef | None = None
    customer: Customer | None = None
    phone_number_id: str | None = Field(default=None, alias="phoneNumberId")
    started_at: datetime | None = Field(default=None, alias="startedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    ended_at: datetime | None = Field(default=None, alias="endedAt")
    duration: float | None = None
    cost: float | None = None
    cost_breakdown: Any = Field(default=None, alias="costBreakdown")
    ended_reason: str | None = Field(default=None, alias="endedReason")
    summary: str | None = None
    transcript: str | list[TranscriptTurn] | None = None
    analysis: CallAnalysis | None = None

    _coerce_strings = field_validator(
        "type", "id", "call_id", "assistant_id", "phone_number_id", "ended_reason", "summary", mode="before"
    )(_optional_str)
    _coerce_numbers = field_validator("duration", "cost", mode="before")(_optional_number)
    _coerce_datetimes = field_validator("started_at", "created_at", "ended_at", mode="before")(
        _optional_datetime
    )
    _coerce_objects = field_validator("assistant", "call", "customer", "analysis", mode="before")(
        _optional_mapping
    )

    @field_validator("transcript", mode="before")
    @classmethod
    def _coerce_transcript(cls, value: object) -> object:
        """Keep flat strings, drop non-object turns, discard anything else."""

        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return [turn for turn in value if isinstance(turn, dict)]
        return None

    @property
    def platform_assistant_id(self) -> str | None:
        if self.assistant and self.assistant.id:
            return self.assistant.id
        if self.assistant_id:
            return self.assistant_id
        if self.call and self.call.assistant_id:
            return self.call.assistant_id
        return None

    @property
    def platform_call_id(self) -> str | None:
        if self.call_id:
            return self.call_id
        if self.id:
            return self.id
        if self.call and self.call.id:
            return self.call.id
        return None

    @property
    def summary_text(self) -> str | None:
        if self.summary:
            return self.summary
        if self.analysis and self.analysis.summary:
            return self.analysis.summary
        return None


class WebhookAck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    received: bool = True
    processed: bool
    call_id: str | None = Field(default=None, alias="callId")


class WebhookProbe(BaseModel):
    status: str
    service: str


class ToolCallResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    result: str


class ToolCallResponse(BaseModel):
    results: list[ToolCallResult]
