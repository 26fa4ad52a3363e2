"""Date-string helpers.

Tracker records keep dates as free-form strings exactly as the user typed
them. These helpers normalise user input to ``MM/DD/YYYY`` and give the
dashboard a tolerant way to order records by those strings.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone

_SLASH_FULL = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_SLASH_SHORT = re.compile(r"^(\d{1,2})/(\d{1,2})$")


def utc_now_iso() -> str:
    """Current UTC time as ``2026-01-05T09:30:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today_iso() -> str:
    return date.today().isoformat()


def _valid(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _mdy(d: date) -> str:
    return f"{d.month:02d}/{d.day:02d}/{d.year}"


def parse_date_input(text: str, today: date | None = None) -> str:
    """Normalise a typed date to ``MM/DD/YYYY``.

    Accepts ``MMDDYYYY``, ``M/D/YYYY``, ``M/D`` and ``MMDD`` (the last two
    get the current year) plus ISO dates. Anything else is returned as-is
    so the user can see what they typed.
    """
    if not text:
        return ""
    today = today or date.today()
    digits = re.sub(r"\D", "", text)

    if len(digits) == 8:
        d = _valid(int(digits[4:8]), int(digits[0:2]), int(digits[2:4]))
        if d:
            return _mdy(d)

    m = _SLASH_FULL.match(text)
    if m:
        d = _valid(int(m.group(3)), int(m.group(1)), int(m.group(2)))
        if d:
            return _mdy(d)

    m = _SLASH_SHORT.match(text)
    if m:
        d = _valid(today.year, int(m.group(1)), int(m.group(2)))
        if d:
            return _mdy(d)

    if len(digits) == 4 and digits == text.strip():
        d = _valid(today.year, int(digits[0:2]), int(digits[2:4]))
        if d:
            return _mdy(d)

    parsed = parse_date_or_none(text)
    if parsed:
        return _mdy(parsed)
    return text


def parse_date_or_none(text: str) -> date | None:
    """Parse ``YYYY-MM-DD`` (optionally with a time part) or ``MM/DD/YYYY``."""
    if not text or not isinstance(text, str):
        return None
    text = text.strip()
    m = _SLASH_FULL.match(text)
    if m:
        return _valid(int(m.group(3)), int(m.group(1)), int(m.group(2)))
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def date_sort_key(text: str) -> float:
    """Ordinal of the parsed date; unparsable or empty strings sort last."""
    parsed = parse_date_or_none(text)
    return parsed.toordinal() if parsed else math.inf
