from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import PUNCH_TIME_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_punch_time(value: str) -> Optional[datetime]:
    """Parse a terminal timestamp ("YYYY-MM-DD HH:MM:SS", ISO-8601 tolerated).

    Returns None instead of raising so callers can skip the line.
    """

    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, PUNCH_TIME_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        return None
    # Terminals report wall-clock time; drop any offset so the natural key stays naive.
    return parsed.replace(tzinfo=None)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
