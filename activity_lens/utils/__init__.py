from activity_lens.utils.time import (
    calendar_date_key,
    elapsed_days,
    hour_label,
    shifted_hour,
    timezone_label,
)

__all__ = [
    "calendar_date_key",
    "elapsed_days",
    "hour_label",
    "shifted_hour",
    "timezone_label",
]
