"""Phone number canonicalization."""
from __future__ import annotations

import re

from ..core.config import settings

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(value: str | None, *, country_code: str | None = None) -> str | None:
    """Return a best-effort E.164-style form of ``value``, or None when empty.

    No plausibility check is made on the result.
    """

    if not value or not value.strip():
        return None

    code = country_code if country_code is not None else settings.default_country_code
    digits = _NON_DIGITS.sub("", value)

    if len(digits) == 10:
        return f"+{code}{digits}"
    if len(digits) == 11 and digits.startswith(code):
        return f"+{digits}"
    if value.startswith("+"):
        return value
    if not digits:
        return None
    return f"+{digits}"
