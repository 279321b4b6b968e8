"""Caller identity resolution for completed calls.

A caller name is derived from an ordered list of strategies. Each strategy is a
plain function taking the call event and the organization's existing lead for
the caller (if any) and returning a name or None; the first non-empty result
wins. Earlier strategies are the more reliable signals:

1. the name already stored on the lead,
2. AI-extracted structured analysis fields,
3. a customer name supplied directly by the platform,
4. a regex scan of the caller's opening transcript turns.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..core.config import settings
from ..models.lead import Lead
from ..schemas.webhooks import CallEvent

NameStrategy = Callable[[CallEvent, Lead | None], str | None]

STRUCTURED_NAME_KEYS: tuple[str, ...] = (
    "callerName",
    "caller_name",
    "customerName",
    "customer_name",
    "name",
)
CALLER_ROLES = frozenset({"user", "customer"})

# Only the introduction phrase is case-insensitive; the name must be one or two
# capitalized words so "this is Sam calling" yields "Sam".
INTRODUCTION_PATTERN = re.compile(
    r"\b(?i:my name is|this is|i'm|i am|it's)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)"
)


@dataclass(slots=True)
class IdentityResolution:
    caller_name: str | None
    lead_found: bool


def _clean(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def name_from_lead(event: CallEvent, lead: Lead | None) -> str | None:
    """A previously confirmed lead name is authoritative."""

    if lead is None:
        return None
    return _clean(lead.name)


def name_from_structured_data(event: CallEvent, lead: Lead | None) -> str | None:
    if event.analysis is None or not event.analysis.structured_data:
        return None
    structured = event.analysis.structured_data
    for key in STRUCTURED_NAME_KEYS:
        name = _clean(structured.get(key))
        if name:
            return name
    return None


def name_from_customer(event: CallEvent, lead: Lead | None) -> str | None:
    if event.customer is None:
        return None
    return _clean(event.customer.name)


def name_from_transcript(event: CallEvent, lead: Lead | None) -> str | None:
    """Scan the caller's early turns for a self-introduction."""

    if not isinstance(event.transcript, list):
        return None
    for turn in event.transcript[: settings.transcript_scan_turns]:
        if turn.role not in CALLER_ROLES or not turn.content:
            continue
        match = INTRODUCTION_PATTERN.search(turn.content)
        if match:
            return match.group(1).strip()
    return None


DEFAULT_STRATEGIES: tuple[NameStrategy, ...] = (
    name_from_lead,
    name_from_structured_data,
    name_from_customer,
    name_from_transcript,
)


def resolve_identity(
    event: CallEvent,
    lead: Lead | None,
    strategies: Sequence[NameStrategy] = DEFAULT_STRATEGIES,
) -> IdentityResolution:
    """Return the first name any strategy yields, plus whether a lead exists."""

    caller_name: str | None = None
    for strategy in strategies:
        caller_name = strategy(event, lead)
        if caller_name:
            break
    return IdentityResolution(caller_name=caller_name or None, lead_found=lead is not None)
