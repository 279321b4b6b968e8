"""Outbound SMS through Twilio."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache

from twilio.rest import Client

from ..core.config import settings

logger = logging.getLogger(__name__)


class NotificationUnavailableError(RuntimeError):
    """Raised when the SMS provider is not configured."""


@dataclass(slots=True)
class SmsResult:
    sid: str | None
    status: str | None
    to: str


class SmsSender:
    """Thin async wrapper over the synchronous Twilio REST client."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str) -> None:
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self._client: Client | None = None

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def _get_client(self) -> Client:
        if self._client is None:
            self._client = Client(self.account_sid, self.auth_token)
        return self._client

    async def send(self, to: str, body: str) -> SmsResult:
        """Send ``body`` to ``to`` and return the provider's message id and status."""

        if not self.configured:
            raise NotificationUnavailableError("Twilio credentials are missing")

        loop = asyncio.get_running_loop()

        def _create_message():
            return self._get_client().messages.create(body=body, from_=self.from_number, to=to)

        message = await loop.run_in_executor(None, _create_message)
        logger.info("Sent SMS %s to %s (status=%s)", message.sid, to, message.status)
        return SmsResult(sid=message.sid, status=message.status, to=message.to or to)


@lru_cache
def get_sms_sender() -> SmsSender:
    """Return the process-wide sender built from settings."""

    return SmsSender(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_phone_number,
    )


def _first_name(caller_name: str | None) -> str:
    if caller_name and caller_name.strip():
        return caller_name.strip().split()[0]
    return "there"


def build_follow_up_sms(caller_name: str | None) -> str:
    """Personalised follow-up text used by the manual SMS endpoint."""

    company = settings.follow_up_sender_name
    return (
        f"Hey {_first_name(caller_name)}, thanks for calling {company}! "
        "Just wanted to follow up and see if you had any questions. "
        "You can reply here or call back anytime. Talk soon!"
    )


def build_default_tool_sms() -> str:
    """Text sent when the assistant asks for a follow-up without its own wording."""

    company = settings.follow_up_sender_name
    return f"Thanks for calling {company}! We'll be in touch soon. Reply to this text anytime."
