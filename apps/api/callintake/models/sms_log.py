"""Outbound SMS log model."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class SmsLog(Base):
    """Audit row for an SMS sent through the notification provider."""

    __tablename__ = "sms_log"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    org_id: Mapped[str | None] = mapped_column(ForeignKey("organizations.id", ondelete="SET NULL"))
    to_phone: Mapped[str] = mapped_column(String, nullable=False)
    from_phone: Mapped[str | None] = mapped_column(String)
    message_type: Mapped[str] = mapped_column(String, nullable=False)
    message_body: Mapped[str] = mapped_column(Text, nullable=False)
    provider_sid: Mapped[str | None] = mapped_column(String)
    status: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
