"""Schemas for the manual SMS endpoint."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SmsSendRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    to: str | None = None
    type: str | None = None
    caller_name: str | None = Field(default=None, alias="callerName")
    org_id: str | None = Field(default=None, alias="orgId")
    custom_message: str | None = Field(default=None, alias="customMessage")


class SmsSendResponse(BaseModel):
    success: bool
    sid: str | None = None
    status: str | None = None
