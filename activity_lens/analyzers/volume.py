from collections import Counter
from collections.abc import Iterable

from activity_lens.models import ActivityEvent, DailyVolume
from activity_lens.utils.time import calendar_date_key


def daily_volume(events: Iterable[ActivityEvent]) -> list[DailyVolume]:
    """Event counts per UTC calendar date, oldest date first.

    Dates without events are not filled in.
    """
    counts = Counter(calendar_date_key(e.created_at) for e in events)
    return [DailyVolume(day=day, count=counts[day]) for day in sorted(counts)]
