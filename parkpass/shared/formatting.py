from datetime import datetime, time, tzinfo
from typing import Optional, Union


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _clock(value: Union[datetime, time]) -> str:
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"


def format_time(value: Optional[Union[datetime, time]], tz: Optional[tzinfo] = None) -> str:
    """``Mon, Jan 6 | 9:30 AM`` for datetimes, ``9:30 AM`` for times of day."""
    if value is None:
        return "N/A"
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return f"{value:%a}, {value:%b} {value.day} | {_clock(value)}"
    return _clock(value)
