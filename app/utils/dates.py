# app/utils/dates.py
from datetime import date, datetime, timezone
from typing import Optional, Union

DateInput = Union[str, date, datetime, None]


def _utc_date(moment: datetime) -> date:
    """Calendar date of a datetime; offset-aware values are read in UTC"""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def to_date(value: DateInput) -> Optional[date]:
    """Normalize an ISO date/datetime string or a date/datetime into a calendar date.

    Raises ValueError for anything that cannot be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _utc_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Due date must not be empty")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return _utc_date(datetime.fromisoformat(text))
        except ValueError:
            raise ValueError(f"Invalid date: {value!r}")
    raise ValueError(f"Unsupported date value: {value!r}")
