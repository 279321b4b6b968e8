"""Expose ORM models."""
from .assistant import Assistant
from .call import Call
from .lead import Lead
from .organization import Organization, OrgTier
from .sms_log import SmsLog

__all__ = [
    "Assistant",
    "Call",
    "Lead",
    "Organization",
    "OrgTier",
    "SmsLog",
]
