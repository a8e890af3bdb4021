from datetime import date, datetime, timedelta, timezone

_SECONDS_PER_DAY = 86400
# Offsets with a well-known zone abbreviation shown next to the UTC offset
_ZONE_NAMES = {8: "PHT"}


def shifted_hour(timestamp: datetime, offset_hours: int) -> int:
    """Hour of day after shifting a UTC timestamp by a whole-hour offset.

    Crossing midnight wraps into the neighbouring day, so 20:00Z at +8 is 4.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return (timestamp + timedelta(hours=offset_hours)).hour


def elapsed_days(oldest: datetime, newest: datetime) -> float:
    """Days between two instants, never less than 1.0."""
    return max((newest - oldest).total_seconds() / _SECONDS_PER_DAY, 1.0)


def calendar_date_key(timestamp: datetime) -> date:
    """UTC calendar date of a timestamp (not timezone-shifted)."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.date()


def timezone_label(offset_hours: int) -> str:
    if offset_hours == 0:
        return "UTC (GMT/Zulu)"
    label = f"UTC +{offset_hours}" if offset_hours > 0 else f"UTC {offset_hours}"
    zone = _ZONE_NAMES.get(offset_hours)
    return f"{label} ({zone})" if zone else label


def hour_label(hour: int, offset_hours: int) -> str:
    return f"{hour:02d}:00–{hour:02d}:59 ({timezone_label(offset_hours)})"
