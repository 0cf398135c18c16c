"""
Calendar and student number helpers.

Requests are grouped by the calendar day of the portal's timezone.
Every function here takes the timezone (or an explicit moment) as a
parameter; nothing reads or changes the process timezone.

Student numbers are stored with the two-digit year of submission in
front of them (``"24s10203"`` for student ``10203`` in 2024) so that
numbers recycled by the school in later years do not collide with old
blacklist entries.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from .config import settings


_PREFIX_RE = re.compile(r"^\d{2}s")

# 9999-12-31T23:59:59.999Z, the last moment ``datetime`` can represent.
MAX_EPOCH_MILLIS = 253402300799999


def portal_now(tz_name: Optional[str] = None) -> datetime:
    """Current moment in the portal timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.portal_timezone))


def portal_today(tz_name: Optional[str] = None) -> date:
    """Current calendar day in the portal timezone."""
    return portal_now(tz_name).date()


def bucket_key(day: date) -> str:
    """Key of the daily bucket document for ``day``."""
    return day.isoformat()


def from_epoch_millis(value: Optional[int]) -> datetime:
    """Convert a client epoch-milliseconds timestamp to an aware datetime.

    ``None`` yields the current UTC time.
    """
    if value is None:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def normalize_student_number(raw: str, day: date) -> str:
    """Return the stored form ``{yy}s{raw}`` of a student number.

    Numbers that already carry a year prefix are returned unchanged.
    """
    raw = raw.strip()
    if _PREFIX_RE.match(raw):
        return raw
    return f"{day.year % 100:02d}s{raw}"


def display_student_number(stored: str) -> str:
    """Strip the year prefix, giving back the raw 5-digit form."""
    if _PREFIX_RE.match(stored):
        return stored[3:]
    return stored
