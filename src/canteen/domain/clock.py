"""Store-local time helpers.

Every timestamp the domain stamps comes from an injected clock so that
"today" always means the store's calendar day, not the host's.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Callable

from canteen.domain.exceptions import ValidationError

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current time as an aware datetime in the host's local zone."""
    return datetime.now().astimezone()


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def days_before(moment: datetime, days: int) -> datetime:
    return start_of_day(moment) - timedelta(days=days)


def date_key(value: date | datetime | str) -> str:
    """Normalise a calendar day to its counter key.

    Dates become ``YYYY-MM-DD``; strings are taken as already-formed keys.
    """
    if isinstance(value, str):
        key = value.strip()
        if not key:
            raise ValidationError("Date key is required")
        return key
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()
