"""Frequency, consistency and peak hour derived from an activity feed."""
import math
from collections import Counter
from collections.abc import Sequence

from activity_lens.models import ActivityEvent, Consistency, PeakHour, Synopsis
from activity_lens.utils.time import calendar_date_key, elapsed_days, hour_label, shifted_hour


def weekly_frequency(event_count: int, days: float) -> float:
    return round(event_count / (days / 7), 1)


def consistency(events: Sequence[ActivityEvent], days: float) -> Consistency:
    """Share of elapsed days that saw at least one event.

    Two events minutes apart across UTC midnight span two dates but less than
    one elapsed day, so the day count is raised to the active count.
    """
    active_days = len({calendar_date_key(e.created_at) for e in events})
    total_days = max(math.ceil(days), active_days, 1)
    return Consistency(
        percent=round(active_days / total_days * 100),
        active_days=active_days,
        total_days=total_days,
    )


def peak_hour(events: Sequence[ActivityEvent], offset_hours: int) -> PeakHour | None:
    """Busiest hour of day in the given timezone; the earlier hour wins ties."""
    if not events:
        return None
    hours = Counter(shifted_hour(e.created_at, offset_hours) for e in events)
    best = min(hours, key=lambda h: (-hours[h], h))
    return PeakHour(hour=best, label=hour_label(best, offset_hours))


def compute_synopsis(events: Sequence[ActivityEvent], offset_hours: int) -> Synopsis:
    """Compute the synopsis for a newest-first event feed."""
    if not events:
        return Synopsis()

    # Both frequency and consistency share one elapsed-day value
    days = elapsed_days(events[-1].created_at, events[0].created_at)
    return Synopsis(
        frequency=weekly_frequency(len(events), days),
        consistency=consistency(events, days),
        peak_hour=peak_hour(events, offset_hours),
    )
