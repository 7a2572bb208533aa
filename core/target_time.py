"""
Target Time Resolution
Turns a bare time of day into the next concrete timestamp after "now"
"""
import re
from datetime import datetime, time, timedelta

_TIME_OF_DAY = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def parse_time_of_day(value: str) -> time:
    """
    Parse "H:MM" / "HH:MM" (24-hour) into a time

    Args:
        value: Time of day string, e.g. "18:30"

    Returns:
        datetime.time
    """
    m = _TIME_OF_DAY.match(value or "")
    if not m:
        raise ValueError(f"Could not parse time of day: {value!r}. Use HH:MM, e.g. 18:30.")

    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time of day out of range: {value!r}")
    return time(hour, minute)


def next_occurrence_of(time_of_day: time, now: datetime) -> datetime:
    """
    Next timestamp strictly after now with the given time of day
    Advances at most one day, keeping now's tzinfo

    Args:
        time_of_day: Target wall-clock time
        now: Captured current time

    Returns:
        datetime in (now, now + 24h]
    """
    candidate = now.replace(
        hour=time_of_day.hour,
        minute=time_of_day.minute,
        second=0,
        microsecond=0,
    )
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate
