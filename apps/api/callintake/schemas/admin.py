"""Schemas for the call and lead history API."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class CallSummary(BaseModel):
    call_id: str
    caller_number: str | None = None
    caller_name: str | None = None
    started_at: datetime
    duration_seconds: int
    cost_cents: int
    end_reason: str | None = Field(default=None)
    success_score: float | None = None


class CallListResponse(BaseModel):
    items: list[CallSummary]


class CallDetail(CallSummary):
    assistant_id: str | None = None
    vapi_call_id: str | None = None
    ended_at: datetime | None = None
    transcript: str | None = None
    summary: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class CallDetailResponse(BaseModel):
    call: CallDetail


class LeadSummary(BaseModel):
    lead_id: str
    phone: str | None = None
    name: str | None = None
    email: str | None = None
    score: int | None = None
    source: str | None = None
    notes: str | None = None
    created_at: datetime


class LeadListResponse(BaseModel):
    items: list[LeadSummary]
