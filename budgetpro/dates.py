"""Calendar-date helpers.

Deadlines are stored as ``YYYY-MM-DD`` strings.  They are decomposed into
integer components and rebuilt as :class:`datetime.date` values so that
comparisons happen between calendar dates, never between instants.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Tuple


def today() -> date:
    return date.today()


def as_date(value) -> date:
    """Truncate a ``datetime`` (or pandas ``Timestamp``) to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` (optionally followed by a time part) into a date.

    Returns ``None`` for empty or unparseable input.
    """
    if not value:
        return None
    text = str(value).strip().split('T')[0]
    parts = text.split('-')
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        return None


def month_of(value: Optional[str]) -> Optional[Tuple[int, int]]:
    parsed = parse_calendar_date(value)
    if parsed is None:
        return None
    return parsed.year, parsed.month


def iso_today() -> str:
    return today().isoformat()
