"""
Text Utilities
Display formatting for times, durations and temperatures
"""
from datetime import datetime


def format_12_hour(moment: datetime) -> str:
    """
    Format a timestamp as a 12-hour clock time

    Args:
        moment: datetime to format

    Returns:
        e.g. "6:05 PM", "12:00 AM"
    """
    hours = moment.hour
    ampm = "PM" if hours >= 12 else "AM"
    hours = hours % 12 or 12
    return f"{hours}:{moment.minute:02d} {ampm}"


def format_duration(minutes: float) -> str:
    """
    Format a duration, rounded to the nearest whole minute

    Args:
        minutes: Duration in minutes

    Returns:
        e.g. "45 minutes", "1 hour 5 min", "5 hours 40 min"
    """
    total = int(round(minutes))
    h, m = divmod(total, 60)
    if h == 0:
        return f"{m} minutes"
    return f"{h} hour{'s' if h != 1 else ''} {m} min"


def format_temperature(temp_f: float) -> str:
    """Whole-degree Fahrenheit"""
    return f"{int(round(temp_f))}°F"
