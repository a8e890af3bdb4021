from activity_lens.analyzers.languages import aggregate_languages, top_languages
from activity_lens.analyzers.profile import build_profile
from activity_lens.analyzers.synopsis import compute_synopsis
from activity_lens.analyzers.volume import daily_volume

__all__ = [
    "aggregate_languages",
    "build_profile",
    "compute_synopsis",
    "daily_volume",
    "top_languages",
]
